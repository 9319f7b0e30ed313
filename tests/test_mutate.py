from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pytest

from hbaserpc.call import OptionError, can_batch, skip_batch
from hbaserpc.get import Get
from hbaserpc.messages import (
    Cell,
    CellType,
    ColumnValue,
    DeleteType,
    Durability,
    MutateRequest,
    MutateResponse,
    MutationProto,
    MutationType,
    NameBytesPair,
    QualifierValue,
    RegionSpecifier,
    RegionSpecifierType,
    ResultProto,
)
from hbaserpc.mutate import (
    DurabilityType,
    Mutate,
    delete_one_version,
    durability,
    new_app,
    new_del,
    new_inc,
    new_inc_single,
    new_put,
    timestamp,
    timestamp_uint64,
    ttl,
)
from hbaserpc.query import families


@dataclass
class FakeRegion:
    name: bytes = b"region"
    table: bytes = b""
    start_key: bytes = b""
    stop_key: bytes = b""


RS = RegionSpecifier(type=RegionSpecifierType.REGION_NAME, value=b"region")
LATEST = b"\x7f\xff\xff\xff\xff\xff\xff\xff"
TS42 = b"\x00\x00\x00\x00\x00\x00\x00*"
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def req(**kwargs):
    kwargs.setdefault("durability", Durability.USE_DEFAULT)
    return MutateRequest(region=RS, mutation=MutationProto(row=b"key", **kwargs))


def cv(family, *qvs):
    return ColumnValue(family=family, qualifier_value=list(qvs))


CF_Q = {"cf": {"q": b"value"}}

CASES = [
    pytest.param(
        lambda t, k: new_put(t, k, None),
        req(mutate_type=MutationType.PUT),
        req(mutate_type=MutationType.PUT, associated_cell_count=0),
        [], 0, id="put-empty"),
    pytest.param(
        lambda t, k: new_put(t, k, None, durability(DurabilityType.SKIP_WAL)),
        req(mutate_type=MutationType.PUT, durability=Durability.SKIP_WAL),
        req(mutate_type=MutationType.PUT, durability=Durability.SKIP_WAL,
            associated_cell_count=0),
        [], 0, id="put-skip-wal"),
    pytest.param(
        lambda t, k: new_put(t, k, None, ttl(timedelta(seconds=1))),
        req(mutate_type=MutationType.PUT,
            attribute=[NameBytesPair(name="_ttl", value=b"\x00\x00\x00\x00\x00\x00\x03\xe8")]),
        req(mutate_type=MutationType.PUT,
            attribute=[NameBytesPair(name="_ttl", value=b"\x00\x00\x00\x00\x00\x00\x03\xe8")],
            associated_cell_count=0),
        [], 0, id="put-ttl"),
    pytest.param(
        lambda t, k: new_put(t, k, CF_Q),
        req(mutate_type=MutationType.PUT,
            column_value=[cv(b"cf", QualifierValue(qualifier=b"q", value=b"value"))]),
        req(mutate_type=MutationType.PUT, associated_cell_count=1),
        [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03key\x02cfq"
         + LATEST + b"\x04value"],
        35, id="put-one"),
    pytest.param(
        lambda t, k: new_put(t, k, {"cf1": {"q1": b"value", "q2": b"value"},
                                    "cf2": {"q1": b"value"}}),
        req(mutate_type=MutationType.PUT, column_value=[
            cv(b"cf1", QualifierValue(qualifier=b"q1", value=b"value"),
               QualifierValue(qualifier=b"q2", value=b"value")),
            cv(b"cf2", QualifierValue(qualifier=b"q1", value=b"value")),
        ]),
        req(mutate_type=MutationType.PUT, associated_cell_count=3),
        [b"\x00\x00\x00!\x00\x00\x00\x14\x00\x00\x00\x05\x00\x03key\x03cf1q1"
         + LATEST + b"\x04value",
         b"\x00\x00\x00!\x00\x00\x00\x14\x00\x00\x00\x05\x00\x03key\x03cf1q2"
         + LATEST + b"\x04value",
         b"\x00\x00\x00!\x00\x00\x00\x14\x00\x00\x00\x05\x00\x03key\x03cf2q1"
         + LATEST + b"\x04value"],
        111, id="put-many"),
    pytest.param(
        lambda t, k: new_put(t, k, CF_Q, timestamp(EPOCH + timedelta(milliseconds=42))),
        req(mutate_type=MutationType.PUT, timestamp=42,
            column_value=[cv(b"cf", QualifierValue(qualifier=b"q", value=b"value",
                                                   timestamp=42))]),
        req(mutate_type=MutationType.PUT, timestamp=42, associated_cell_count=1),
        [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03key\x02cfq"
         + TS42 + b"\x04value"],
        35, id="put-timestamp"),
    pytest.param(
        lambda t, k: new_put(t, k, CF_Q, timestamp_uint64(42)),
        req(mutate_type=MutationType.PUT, timestamp=42,
            column_value=[cv(b"cf", QualifierValue(qualifier=b"q", value=b"value",
                                                   timestamp=42))]),
        req(mutate_type=MutationType.PUT, timestamp=42, associated_cell_count=1),
        [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03key\x02cfq"
         + TS42 + b"\x04value"],
        35, id="put-timestamp-uint64"),
    pytest.param(
        lambda t, k: new_del(t, k, None),
        req(mutate_type=MutationType.DELETE),
        req(mutate_type=MutationType.DELETE, associated_cell_count=0),
        [], 0, id="del-row"),
    pytest.param(
        lambda t, k: new_del(t, k, CF_Q, timestamp_uint64(42)),
        req(mutate_type=MutationType.DELETE, timestamp=42, column_value=[
            cv(b"cf", QualifierValue(qualifier=b"q", value=b"value", timestamp=42,
                                     delete_type=DeleteType.DELETE_MULTIPLE_VERSIONS))]),
        req(mutate_type=MutationType.DELETE, timestamp=42, associated_cell_count=1),
        [b"\x00\x00\x00\x1f\x00\x00\x00\x12\x00\x00\x00\x05\x00\x03key\x02cfq"
         + TS42 + b"\x0cvalue"],
        35, id="del-qualifier"),
    pytest.param(
        lambda t, k: new_app(t, k, None),
        req(mutate_type=MutationType.APPEND),
        req(mutate_type=MutationType.APPEND, associated_cell_count=0),
        [], 0, id="append-empty"),
    pytest.param(
        lambda t, k: new_inc(t, k, None),
        req(mutate_type=MutationType.INCREMENT),
        req(mutate_type=MutationType.INCREMENT, associated_cell_count=0),
        [], 0, id="inc-empty"),
    pytest.param(
        lambda t, k: new_inc_single(t, k, "cf", "q", 1),
        req(mutate_type=MutationType.INCREMENT, column_value=[
            cv(b"cf", QualifierValue(qualifier=b"q",
                                     value=b"\x00\x00\x00\x00\x00\x00\x00\x01"))]),
        req(mutate_type=MutationType.INCREMENT, associated_cell_count=1),
        [b"\x00\x00\x00\"\x00\x00\x00\x12\x00\x00\x00\x08\x00\x03key\x02cfq"
         + LATEST + b"\x04\x00\x00\x00\x00\x00\x00\x00\x01"],
        38, id="inc-single"),
    pytest.param(
        lambda t, k: new_del(t, k, {"cf": None}),
        req(mutate_type=MutationType.DELETE, column_value=[
            cv(b"cf", QualifierValue(qualifier=b"", delete_type=DeleteType.DELETE_FAMILY))]),
        req(mutate_type=MutationType.DELETE, associated_cell_count=1),
        [b"\x00\x00\x00\x19\x00\x00\x00\x11\x00\x00\x00\x00\x00\x03key\x02cf"
         + LATEST + b"\x0e"],
        29, id="del-family"),
    pytest.param(
        lambda t, k: new_del(t, k, {"cf": None}, timestamp_uint64(42)),
        req(mutate_type=MutationType.DELETE, timestamp=42, column_value=[
            cv(b"cf", QualifierValue(qualifier=b"", timestamp=42,
                                     delete_type=DeleteType.DELETE_FAMILY))]),
        req(mutate_type=MutationType.DELETE, timestamp=42, associated_cell_count=1),
        [b"\x00\x00\x00\x19\x00\x00\x00\x11\x00\x00\x00\x00\x00\x03key\x02cf"
         + TS42 + b"\x0e"],
        29, id="del-family-timestamp"),
    pytest.param(
        lambda t, k: new_del(t, k, {"cf": None}, timestamp_uint64(42), delete_one_version()),
        req(mutate_type=MutationType.DELETE, timestamp=42, column_value=[
            cv(b"cf", QualifierValue(qualifier=b"", timestamp=42,
                                     delete_type=DeleteType.DELETE_FAMILY_VERSION))]),
        req(mutate_type=MutationType.DELETE, timestamp=42, associated_cell_count=1),
        [b"\x00\x00\x00\x19\x00\x00\x00\x11\x00\x00\x00\x00\x00\x03key\x02cf"
         + TS42 + b"\n"],
        29, id="del-family-one-version"),
    pytest.param(
        lambda t, k: new_del(t, k, {"cf": {"a": None}}, timestamp_uint64(42),
                             delete_one_version()),
        req(mutate_type=MutationType.DELETE, timestamp=42, column_value=[
            cv(b"cf", QualifierValue(qualifier=b"a", timestamp=42,
                                     delete_type=DeleteType.DELETE_ONE_VERSION))]),
        req(mutate_type=MutationType.DELETE, timestamp=42, associated_cell_count=1),
        [b"\x00\x00\x00\x1a\x00\x00\x00\x12\x00\x00\x00\x00\x00\x03key\x02cfa"
         + TS42 + b"\x08"],
        30, id="del-qualifier-one-version"),
]


@pytest.mark.parametrize("as_str", [False, True])
@pytest.mark.parametrize("factory, out, cb_proto, cellblocks, cb_len", CASES)
def test_mutate(as_str, factory, out, cb_proto, cellblocks, cb_len):
    table, key = ("table", "key") if as_str else (b"table", b"key")
    m = factory(table, key)
    assert m.name() == "Mutate"
    assert m.new_response() == MutateResponse()
    assert m.table == b"table"

    m.region = FakeRegion()
    assert m.to_proto() == out

    request, blocks, size = m.serialize_cell_blocks(None)
    assert request == cb_proto
    assert size == cb_len
    assert sum(len(b) for b in blocks) == size
    if cellblocks:
        assert blocks == [b"".join(cellblocks)]
    else:
        assert blocks == []


@pytest.mark.parametrize("as_str", [False, True])
def test_invalid_durability(as_str):
    table, key = ("table", "key") if as_str else (b"table", b"key")
    with pytest.raises(OptionError, match="invalid durability value"):
        new_put(table, key, None, durability(42))


@pytest.mark.parametrize("as_str", [False, True])
def test_delete_one_version_for_whole_row(as_str):
    table, key = ("table", "key") if as_str else (b"table", b"key")
    with pytest.raises(OptionError) as info:
        new_del(table, key, None, delete_one_version())
    assert str(info.value) == (
        "'DeleteOneVersion' option cannot be specified for delete entire row request")


def test_serialize_appends_to_existing_cellblocks():
    m = new_put(b"table", b"key", CF_Q)
    m.region = FakeRegion()
    _, blocks, size = m.serialize_cell_blocks([b"prior"])
    assert blocks[0] == b"prior"
    assert len(blocks) == 2
    assert size == 35


def test_description_names_mutation_kind():
    assert new_put(b"t", b"k", None).description() == "PUT"
    assert new_del(b"t", b"k", None).description() == "DELETE"
    assert new_app(b"t", b"k", None).description() == "APPEND"
    assert new_inc(b"t", b"k", None).description() == "INCREMENT"


def test_values_kept_as_given():
    values = {"cf": {"q": b"v"}}
    assert new_put(b"t", b"k", values).values is values


def test_cell_blocks_enabled():
    assert new_put(b"t", b"k", None).cell_blocks_enabled() is True


def test_skip_batch_option():
    assert can_batch(new_put(b"t", b"k", None)) is True
    assert can_batch(new_put(b"t", b"k", None, skip_batch())) is False


@pytest.mark.parametrize("option, name", [
    (ttl(timedelta(seconds=1)), "TTL"),
    (timestamp(EPOCH), "Timestamp"),
    (timestamp_uint64(1), "TimestampUint64"),
    (durability(DurabilityType.SYNC_WAL), "Durability"),
    (delete_one_version(), "DeleteOneVersion"),
])
def test_mutation_options_rejected_by_get(option, name):
    with pytest.raises(OptionError) as info:
        Get(b"t", b"k", option)
    assert str(info.value) == f"'{name}' option can only be used with mutation queries"


def test_query_option_rejected_by_put():
    with pytest.raises(OptionError) as info:
        new_put("", "", None, families({"yolo": ["swag"]}))
    assert str(info.value) == "'Families' option can only be used with Get or Scan request"


def test_durability_stored():
    m = new_put(b"t", b"k", None, durability(DurabilityType.FSYNC_WAL))
    assert m.durability is DurabilityType.FSYNC_WAL


CELLBLOCK = bytes([0, 0, 0, 48, 0, 0, 0, 19, 0, 0, 0, 21, 0, 4, 114, 111, 119, 55, 2, 99,
                   102, 97, 0, 0, 1, 92, 13, 97, 5, 32, 4, 72, 101, 108, 108, 111, 32, 109,
                   121, 32, 110, 97, 109, 101, 32, 105, 115, 32, 68, 111, 103, 46])


def expected_cells():
    return [
        Cell(row=b"row7", family=b"cf", qualifier=b"b", timestamp=1494873081120,
             value=b"Hello my name is Dog."),
        Cell(row=b"row7", family=b"cf", qualifier=b"a", timestamp=1494873081120,
             value=b"Hello my name is Dog.", cell_type=CellType.PUT),
    ]


def test_deserialize_cell_blocks():
    cells = expected_cells()
    resp = MutateResponse(result=ResultProto(cell=[cells[0]], associated_cell_count=1))
    m = new_put(b"t", b"k", None)
    n = m.deserialize_cell_blocks(resp, CELLBLOCK)
    assert resp.result.cell == cells
    assert n == len(CELLBLOCK)


def test_deserialize_cell_blocks_error():
    cells = expected_cells()
    resp = MutateResponse(result=ResultProto(cell=cells[:1], associated_cell_count=1))
    m = new_put(b"t", b"k", None)
    with pytest.raises(ValueError):
        m.deserialize_cell_blocks(resp, CELLBLOCK[:10])
    assert resp.result.cell == cells[:1]


def test_deserialize_cell_blocks_without_result():
    m = new_put(b"t", b"k", None)
    assert m.deserialize_cell_blocks(MutateResponse(), CELLBLOCK) == 0


def test_mutate_constructor_sets_type():
    m = Mutate(b"t", b"k", None, MutationType.APPEND)
    assert m.mutation_type is MutationType.APPEND
    assert m.key == b"k"