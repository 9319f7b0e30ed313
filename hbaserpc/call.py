"""Common parts of every RPC call and decoding of cell blocks."""

import abc
import queue
import struct
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Iterable, Protocol, runtime_checkable

from hbaserpc.messages import (
    Cell,
    CellType,
    RegionSpecifier,
    RegionSpecifierType,
    ResultProto,
)

_U32 = 0xFFFFFFFF


class OptionError(ValueError):
    """An option was given to a call it does not apply to, or with a bad value."""


@runtime_checkable
class RegionInfo(Protocol):
    """What a call needs to know about the region it is sent to."""

    @property
    def name(self) -> bytes:
        """Full region name."""

    @property
    def table(self) -> bytes:
        """Table the region belongs to."""

    @property
    def start_key(self) -> bytes:
        """First key of the region."""

    @property
    def stop_key(self) -> bytes:
        """Key just past the region."""


Option = Callable[["BaseCall"], None]


class BaseCall(abc.ABC):
    """State shared by all calls: table, row key, options, region and result queue."""

    rpc_name: ClassVar[str] = ""
    response_type: ClassVar[type | None] = None

    def __init__(self, table: bytes = b"", key: bytes = b"") -> None:
        self.table = table
        self.key = key
        self.options: list[Option] = []
        self.region: Any = None
        self.result_queue: "queue.Queue[RPCResult]" = queue.Queue(maxsize=1)

    def name(self) -> str:
        """Name of the remote method."""
        return self.rpc_name

    def description(self) -> str:
        """Label used for tracing and metrics."""
        return self.name()

    def region_specifier(self) -> RegionSpecifier:
        """Specifier of the region this call is addressed to."""
        if self.region is None:
            raise ValueError(f"{self.name()} call has no region")
        custom = getattr(self.region, "region_specifier", None)
        if callable(custom):
            return custom()
        return RegionSpecifier(type=RegionSpecifierType.REGION_NAME, value=self.region.name)

    @abc.abstractmethod
    def to_proto(self) -> Any:
        """Build the request message for this call."""

    def new_response(self) -> Any:
        """An empty response message to decode the reply into."""
        if self.response_type is None:
            raise TypeError(f"{type(self).__name__} has no response type")
        return self.response_type()


class Batchable:
    """Mixin for calls that may be grouped into a multi request."""

    skip_batch: bool = False


def skip_batch() -> Option:
    """Option that sends a batchable call on its own, right away."""

    def apply(call: BaseCall) -> None:
        if not isinstance(call, Batchable):
            raise OptionError("'SkipBatch' option only works with Get and Mutate requests")
        call.skip_batch = True

    return apply


def can_batch(call: Any) -> bool:
    """True if the call may be included in a multi request."""
    return isinstance(call, Batchable) and not call.skip_batch


def apply_options(call: BaseCall, options: Iterable[Option]) -> None:
    """Record the options on the call and apply them in order."""
    call.options = list(options)
    for option in call.options:
        option(call)


@dataclass
class RPCResult:
    """Response message of a call together with any error it produced."""

    msg: Any = None
    error: BaseException | None = None


@dataclass
class Result:
    """Cells of a row and details about how they were returned."""

    cells: list[Cell] = field(default_factory=list)
    stale: bool = False
    partial: bool = False
    exists: bool | None = None

    def __str__(self) -> str:
        return (
            f"cells:{self.cells} stale:{self.stale} "
            f"partial:{self.partial} exists:{self.exists}"
        )


def to_local_result(pbr: ResultProto | None) -> Result:
    """Turn a result message into a Result."""
    if pbr is None:
        return Result()
    return Result(
        cells=pbr.cell,
        stale=bool(pbr.stale),
        partial=bool(pbr.partial),
        exists=pbr.exists,
    )


def _cell_type(value: int) -> CellType | int:
    try:
        return CellType(value)
    except ValueError:
        return value


def _parse_cell(buf: memoryview) -> tuple[Cell, int]:
    if len(buf) < 4:
        raise ValueError(f"buffer is too small: expected 4, got {len(buf)}")
    (kv_len,) = struct.unpack_from(">I", buf)
    if len(buf) < kv_len + 4:
        raise ValueError(f"buffer is too small: expected {kv_len + 4}, got {len(buf)}")
    try:
        row_key_len, value_len, key_len = struct.unpack_from(">IIH", buf, 4)
        pos = 14
        row = bytes(buf[pos:pos + key_len])
        pos += key_len
        family_len = buf[pos]
        pos += 1
        family = bytes(buf[pos:pos + family_len])
        pos += family_len

        qualifier_len = (row_key_len - key_len - family_len - 2 - 1 - 8 - 1) & _U32
        total = (4 + 4 + 2 + key_len + 1 + family_len + qualifier_len + 8 + 1 + value_len) & _U32
        if total != kv_len:
            raise ValueError(
                f"HBase has lied about KeyValue length: expected {kv_len}, got {total}"
            )
        qualifier = bytes(buf[pos:pos + qualifier_len])
        pos += qualifier_len
        (timestamp,) = struct.unpack_from(">Q", buf, pos)
        pos += 8
        cell_type = buf[pos]
        pos += 1
        value = bytes(buf[pos:pos + value_len])
    except (struct.error, IndexError) as exc:
        raise ValueError("malformed cell block") from exc

    cell = Cell(
        row=row,
        family=family,
        qualifier=qualifier,
        timestamp=timestamp,
        value=value,
        cell_type=_cell_type(cell_type),
    )
    return cell, kv_len + 4


def cell_from_cell_block(b: bytes) -> tuple[Cell, int]:
    """Decode one cell from the start of b; returns the cell and bytes consumed."""
    return _parse_cell(memoryview(b))


def deserialize_cell_blocks(b: bytes, cells_len: int) -> tuple[list[Cell], int]:
    """Decode cells_len consecutive cells; returns them and the bytes consumed."""
    view = memoryview(b)
    cells: list[Cell] = []
    read = 0
    for _ in range(cells_len):
        cell, size = _parse_cell(view[read:])
        cells.append(cell)
        read += size
    return cells, read