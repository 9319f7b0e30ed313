# hbaserpc

Building blocks for talking to HBase over its RPC protocol. The package
describes each call (Get, Scan, Put, Delete, Append, Increment,
CheckAndPut, table administration, snapshots, region moves), turns it into
a request message, and encodes or decodes the cell blocks that travel next
to those messages.

Request and response messages are plain dataclasses from
`hbaserpc.messages` (and a few defined next to the calls that use them).

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Regions

Calls addressed to a region server (`Get`, `Scan`, `Mutate`) need a region
before `to_proto()` can build a request; without one it raises
`ValueError`. Any object with a `name` attribute holding the region name
will do (see the `RegionInfo` protocol in `hbaserpc.call`). If the object
has a callable `region_specifier()`, its result is used instead.

```python
from types import SimpleNamespace

region = SimpleNamespace(name=b"users,,1700000000000.abcdef.")
```

## Reading data

```python
from hbaserpc.get import Get
from hbaserpc.query import families, max_versions, time_range_uint64

get = Get(b"users", b"row-42",
          families({"info": ["name", "email"]}),
          max_versions(3),
          time_range_uint64(1000, 2000))
get.region = region
request = get.to_proto()          # a GetRequest
```

`get.exists_only()` asks only whether the row exists.

The options in `hbaserpc.query` work with both `Get` and `Scan`:
`families`, `filters`, `time_range` (datetimes), `time_range_uint64`
(milliseconds), `max_versions`, `max_results_per_column_family`,
`result_offset`, `cache_blocks`, `consistency` (a `ConsistencyType`) and
`priority`. Given to any other kind of call, or with an out-of-range value,
they raise `OptionError` (a subclass of `ValueError`). `get_priority(call)`
returns a call's priority, 0 for calls that have none.

Scans cover a whole table or a half-open key range `[start, stop)`:

```python
from hbaserpc.scan import Scan, new_scan_range, number_of_rows, reversed_scan

whole = Scan(b"users", number_of_rows(100))
part = new_scan_range(b"users", b"a", b"m", reversed_scan())
```

Scan-only options in `hbaserpc.scan`: `scanner_id`, `close_scanner`,
`max_result_size`, `number_of_rows`, `allow_partial_results`,
`track_scan_metrics`, `reversed_scan` and `attribute`. When a scanner id is
set, `to_proto()` sends only the id and no scan description.

## Writing data

```python
from datetime import timedelta
from hbaserpc.mutate import (
    DurabilityType, durability, new_del, new_inc_single, new_put, ttl,
)

put = new_put(b"users", b"row-42", {"info": {"name": b"Ada"}},
              durability(DurabilityType.SKIP_WAL), ttl(timedelta(hours=1)))
delete = new_del(b"users", b"row-42", {"info": None})   # whole family
counter = new_inc_single(b"stats", b"daily", "cf", "hits", 1)
```

`new_app` and `new_inc` take a values mapping like `new_put`. Other
mutation options: `timestamp` (a datetime, rounded to milliseconds),
`timestamp_uint64` and `delete_one_version`; the last one is refused for a
delete of an entire row.

A `Mutate` produces either a request with the values inline
(`to_proto()`) or a request plus its cell blocks:

```python
put.region = region
request, blocks, size = put.serialize_cell_blocks([])
```

`hbaserpc.checkandput.CheckAndPut(put, family, qualifier, expected)` wraps
a put so that it only applies when that cell holds the expected value. It
only accepts puts, marks them as not batchable and is never sent with cell
blocks.

`hbaserpc.call.skip_batch()` is an option for `Get` and `Mutate`;
`can_batch(call)` tells whether a call may go into a multi request.

## Cell blocks

`hbaserpc.call.cell_from_cell_block(b)` decodes one cell and returns it
with the number of bytes consumed; `deserialize_cell_blocks(b, n)` decodes
`n` cells in a row. Both raise `ValueError` when a buffer is too short or
its lengths do not add up. `Get`, `Scan` and `Mutate` each have
`deserialize_cell_blocks(response, b)` to fill a response from cell blocks.
`to_local_result` turns a result message into a `Result`.

## Administration

`hbaserpc.admin` holds `CreateTable` (with the `split_keys` and
`table_attributes` options; family attributes not given take HBase's
defaults), `DeleteTable`, `DisableTable`, `EnableTable`, `ListTableNames`
(with `list_regex`, `list_namespace` and `list_sys_tables`),
`ClusterStatus`, `GetProcedureState` and `SetBalancer`.

`hbaserpc.snapshot` holds `Snapshot` (with `snapshot_version`,
`snapshot_owner` and `snapshot_skip_flush`), `SnapshotDone`,
`DeleteSnapshot`, `RestoreSnapshot`, `RestoreSnapshotDone`, which wrap a
`Snapshot`, and `ListSnapshots`.

`hbaserpc.move.MoveRegion` moves a region given by its encoded name;
`with_destination_region_server("host,port,startcode")` picks the target.

## Tracing

`hbaserpc.trace.RequestTracePropagator` carries trace headers inside a
`RequestHeader`, with `get`, `set` and `keys`.

## What this package does not do

- It opens no connections and has no client: nothing here sends a request,
  looks up regions or retries.
- It does not encode or decode the messages themselves to protocol buffer
  bytes; they are plain dataclasses for a transport layer to handle.
- It has no filter classes. `filters()` accepts any object with a
  `construct_pb_filter()` method and stores what that method returns.