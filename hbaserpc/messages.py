"""Plain message types exchanged with region servers and the master."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class CellType(IntEnum):
    """Type byte stored with every cell."""

    MINIMUM = 0
    PUT = 4
    DELETE = 8
    DELETE_FAMILY_VERSION = 10
    DELETE_COLUMN = 12
    DELETE_FAMILY = 14
    MAXIMUM = 255


@dataclass
class Cell:
    """A single cell: one value of one qualifier at one timestamp."""

    row: bytes | None = None
    family: bytes | None = None
    qualifier: bytes | None = None
    timestamp: int | None = None
    cell_type: CellType | int | None = None
    value: bytes | None = None


@dataclass
class ResultProto:
    """Result of a Get, a Mutate or one row of a Scan."""

    cell: list[Cell] = field(default_factory=list)
    associated_cell_count: int | None = None
    exists: bool | None = None
    stale: bool | None = None
    partial: bool | None = None


class RegionSpecifierType(IntEnum):
    REGION_NAME = 1
    ENCODED_REGION_NAME = 2


@dataclass
class RegionSpecifier:
    type: RegionSpecifierType | None = None
    value: bytes | None = None


@dataclass
class TimeRange:
    """Half-open range of timestamps in milliseconds."""

    from_: int | None = None
    to: int | None = None


@dataclass
class Column:
    family: bytes | None = None
    qualifier: list[bytes] = field(default_factory=list)


@dataclass
class NameBytesPair:
    name: str | None = None
    value: bytes | None = None


@dataclass
class BytesBytesPair:
    first: bytes | None = None
    second: bytes | None = None


@dataclass
class TableName:
    namespace: bytes | None = None
    qualifier: bytes | None = None


class Consistency(IntEnum):
    STRONG = 0
    TIMELINE = 1


class CompareType(IntEnum):
    LESS = 0
    LESS_OR_EQUAL = 1
    EQUAL = 2
    NOT_EQUAL = 3
    GREATER_OR_EQUAL = 4
    GREATER = 5
    NO_OP = 6


@dataclass
class Comparator:
    name: str | None = None
    serialized_comparator: bytes | None = None


@dataclass
class Condition:
    row: bytes | None = None
    family: bytes | None = None
    qualifier: bytes | None = None
    compare_type: CompareType | None = None
    comparator: Comparator | None = None


@dataclass
class GetProto:
    row: bytes | None = None
    column: list[Column] = field(default_factory=list)
    attribute: list[NameBytesPair] = field(default_factory=list)
    filter: Any = None
    time_range: TimeRange | None = None
    max_versions: int | None = None
    cache_blocks: bool | None = None
    store_limit: int | None = None
    store_offset: int | None = None
    existence_only: bool | None = None
    consistency: Consistency | None = None


@dataclass
class GetRequest:
    region: RegionSpecifier | None = None
    get: GetProto | None = None


@dataclass
class GetResponse:
    result: ResultProto | None = None


@dataclass
class ScanProto:
    column: list[Column] = field(default_factory=list)
    attribute: list[NameBytesPair] = field(default_factory=list)
    start_row: bytes | None = None
    stop_row: bytes | None = None
    filter: Any = None
    time_range: TimeRange | None = None
    max_versions: int | None = None
    cache_blocks: bool | None = None
    batch_size: int | None = None
    max_result_size: int | None = None
    store_limit: int | None = None
    store_offset: int | None = None
    reversed: bool | None = None
    consistency: Consistency | None = None


@dataclass
class ScanRequest:
    region: RegionSpecifier | None = None
    scan: ScanProto | None = None
    scanner_id: int | None = None
    number_of_rows: int | None = None
    close_scanner: bool | None = None
    next_call_seq: int | None = None
    client_handles_partials: bool | None = None
    client_handles_heartbeats: bool | None = None
    track_scan_metrics: bool | None = None


@dataclass
class ScanResponse:
    cells_per_result: list[int] = field(default_factory=list)
    scanner_id: int | None = None
    more_results: bool | None = None
    ttl: int | None = None
    results: list[ResultProto] = field(default_factory=list)
    stale: bool | None = None
    partial_flag_per_result: list[bool] = field(default_factory=list)
    more_results_in_region: bool | None = None
    heartbeat_message: bool | None = None
    scan_metrics: dict[str, int] | None = None


class MutationType(IntEnum):
    APPEND = 0
    INCREMENT = 1
    PUT = 2
    DELETE = 3


class DeleteType(IntEnum):
    DELETE_ONE_VERSION = 0
    DELETE_MULTIPLE_VERSIONS = 1
    DELETE_FAMILY = 2
    DELETE_FAMILY_VERSION = 3


class Durability(IntEnum):
    USE_DEFAULT = 0
    SKIP_WAL = 1
    ASYNC_WAL = 2
    SYNC_WAL = 3
    FSYNC_WAL = 4


@dataclass
class QualifierValue:
    qualifier: bytes | None = None
    value: bytes | None = None
    timestamp: int | None = None
    delete_type: DeleteType | None = None


@dataclass
class ColumnValue:
    family: bytes | None = None
    qualifier_value: list[QualifierValue] = field(default_factory=list)


@dataclass
class MutationProto:
    row: bytes | None = None
    mutate_type: MutationType | None = None
    column_value: list[ColumnValue] = field(default_factory=list)
    timestamp: int | None = None
    attribute: list[NameBytesPair] = field(default_factory=list)
    durability: Durability | None = None
    associated_cell_count: int | None = None


@dataclass
class MutateRequest:
    region: RegionSpecifier | None = None
    mutation: MutationProto | None = None
    condition: Condition | None = None
    nonce_group: int | None = None


@dataclass
class MutateResponse:
    result: ResultProto | None = None
    processed: bool | None = None