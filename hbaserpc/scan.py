"""Scan requests: read rows of a table sequentially."""

from typing import Any

from hbaserpc.call import BaseCall, Option, OptionError, apply_options
from hbaserpc.call import deserialize_cell_blocks as _deserialize
from hbaserpc.get import families_to_column
from hbaserpc.messages import (
    NameBytesPair,
    ResultProto,
    ScanProto,
    ScanRequest,
    ScanResponse,
    TimeRange,
)
from hbaserpc.query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    BaseQuery,
    ConsistencyType,
)

DEFAULT_MAX_RESULT_SIZE = 2097152
DEFAULT_NUMBER_OF_ROWS = 2**31 - 1
NO_SCANNER_ID = 2**64 - 1


def _as_bytes(value: str | bytes | None) -> bytes | None:
    if isinstance(value, str):
        return value.encode()
    return value


class Scan(BaseCall, BaseQuery):
    """A scanner over a table, optionally restricted to a key range."""

    rpc_name = "Scan"
    response_type = ScanResponse

    def __init__(self, table: str | bytes | None, *args: Option) -> None:
        BaseCall.__init__(self, _as_bytes(table) or b"")
        BaseQuery.__init__(self)
        self.start_row: bytes | None = None
        self.stop_row: bytes | None = None
        self.scanner_id = NO_SCANNER_ID
        self.max_result_size = DEFAULT_MAX_RESULT_SIZE
        self.number_of_rows = DEFAULT_NUMBER_OF_ROWS
        self.reversed = False
        self.attributes: list[NameBytesPair] = []
        self.track_scan_metrics = False
        self.close_scanner = False
        self.allow_partial_results = False
        apply_options(self, args)

    def __str__(self) -> str:
        return (
            f"Scan{{Table={self.table!r} StartRow={self.start_row!r} "
            f"StopRow={self.stop_row!r} "
            f"TimeRange=({self.from_timestamp}, {self.to_timestamp}) "
            f"MaxVersions={self.max_versions} NumberOfRows={self.number_of_rows} "
            f"MaxResultSize={self.max_result_size} Familes={self.families} "
            f"Filter={self.filter} StoreLimit={self.store_limit} "
            f"StoreOffset={self.store_offset} ScannerID={self.scanner_id} "
            f"Close={self.close_scanner}}}"
        )

    def to_proto(self) -> ScanRequest:
        """Build the ScanRequest message."""
        request = ScanRequest(
            region=self.region_specifier(),
            close_scanner=self.close_scanner,
            number_of_rows=self.number_of_rows,
            client_handles_partials=True,
            client_handles_heartbeats=True,
            track_scan_metrics=self.track_scan_metrics,
        )
        if self.scanner_id != NO_SCANNER_ID:
            request.scanner_id = self.scanner_id
            return request
        scan = ScanProto(
            column=families_to_column(self.families),
            start_row=self.start_row,
            stop_row=self.stop_row,
            time_range=TimeRange(),
            max_result_size=self.max_result_size,
        )
        if self.max_versions != DEFAULT_MAX_VERSIONS:
            scan.max_versions = self.max_versions
        if self.store_limit != DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY:
            scan.store_limit = self.store_limit
        if self.store_offset != 0:
            scan.store_offset = self.store_offset
        if self.from_timestamp != MIN_TIMESTAMP:
            scan.time_range.from_ = self.from_timestamp
        if self.to_timestamp != MAX_TIMESTAMP:
            scan.time_range.to = self.to_timestamp
        if self.reversed:
            scan.reversed = True
        if self.cache_blocks != DEFAULT_CACHE_BLOCKS:
            scan.cache_blocks = self.cache_blocks
        if self.consistency != ConsistencyType.DEFAULT:
            scan.consistency = self.consistency.to_proto()
        scan.attribute = list(self.attributes)
        scan.filter = self.filter
        request.scan = scan
        return request

    def new_response(self) -> ScanResponse:
        """An empty ScanResponse."""
        return ScanResponse()

    def deserialize_cell_blocks(self, response: Any, b: bytes) -> int:
        """Fill the response's results from cell blocks; returns bytes read."""
        view = memoryview(b)
        results: list[ResultProto] = []
        read = 0
        for num_cells, partial in zip(response.cells_per_result,
                                      response.partial_flag_per_result, strict=True):
            cells, size = _deserialize(view[read:], num_cells)
            results.append(ResultProto(cell=cells, partial=partial))
            read += size
        response.results = results
        return read


def new_scan_range(table: str | bytes | None, start_row: str | bytes | None,
                   stop_row: str | bytes | None, *args: Option) -> Scan:
    """A scanner over the half-open key range [start_row, stop_row)."""
    scan = Scan(table, *args)
    scan.start_row = _as_bytes(start_row)
    scan.stop_row = _as_bytes(stop_row)
    scan.key = scan.start_row if scan.start_row is not None else b""
    return scan


def _scan(call: BaseCall, option_name: str) -> Scan:
    if not isinstance(call, Scan):
        raise OptionError(f"'{option_name}' option can only be used with Scan queries")
    return call


def scanner_id(scanner_id: int) -> Option:
    """Continue an ongoing scan with the given scanner id."""

    def apply(call: BaseCall) -> None:
        _scan(call, "ScannerID").scanner_id = scanner_id

    return apply


def close_scanner() -> Option:
    """Close the scanner after the first response."""

    def apply(call: BaseCall) -> None:
        _scan(call, "Close").close_scanner = True

    return apply


def max_result_size(n: int) -> Option:
    """Maximum number of bytes fetched per response."""

    def apply(call: BaseCall) -> None:
        scan = _scan(call, "MaxResultSize")
        if n == 0:
            raise OptionError("'MaxResultSize' option must be greater than 0")
        scan.max_result_size = n

    return apply


def number_of_rows(n: int) -> Option:
    """How many rows are fetched per request to the region server."""

    def apply(call: BaseCall) -> None:
        _scan(call, "NumberOfRows").number_of_rows = n

    return apply


def allow_partial_results() -> Option:
    """Let the scanner return partial rows."""

    def apply(call: BaseCall) -> None:
        _scan(call, "AllowPartialResults").allow_partial_results = True

    return apply


def track_scan_metrics() -> Option:
    """Ask the server to report scan metrics."""

    def apply(call: BaseCall) -> None:
        _scan(call, "TrackScanMetrics").track_scan_metrics = True

    return apply


def reversed_scan() -> Option:
    """Scan in reverse key order."""

    def apply(call: BaseCall) -> None:
        _scan(call, "Reversed").reversed = True

    return apply


def attribute(key: str, val: bytes) -> Option:
    """Attach a named attribute to the scan; may be given several times."""

    def apply(call: BaseCall) -> None:
        _scan(call, "Attributes").attributes.append(NameBytesPair(name=key, value=val))

    return apply