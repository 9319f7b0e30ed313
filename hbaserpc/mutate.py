"""Mutations of a single row: put, delete, append and increment."""

import struct
from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any, Iterator

from hbaserpc.call import Batchable, BaseCall, Option, OptionError, apply_options
from hbaserpc.call import deserialize_cell_blocks as _deserialize
from hbaserpc.messages import (
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
)
from hbaserpc.query import MAX_TIMESTAMP

ATTRIBUTE_NAME_TTL = "_ttl"

# Long.MAX_VALUE, the server's marker for "latest timestamp".
_LATEST_TIMESTAMP = 2**63 - 1
_U64 = 2**64 - 1
_EMPTY_QUALIFIER: dict[str, bytes | None] = {"": None}
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Values = dict[str, dict[str, bytes | None] | None]


class DurabilityType(IntEnum):
    """Write-ahead-log durability requested for a mutation."""

    USE_DEFAULT = 0
    SKIP_WAL = 1
    ASYNC_WAL = 2
    SYNC_WAL = 3
    FSYNC_WAL = 4


def _as_bytes(value: str | bytes | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode()
    return bytes(value)


def _millis_toward_zero(micros: int) -> int:
    return micros // 1000 if micros >= 0 else -((-micros) // 1000)


def _cellblock(row: bytes, family: bytes, qualifier: bytes, value: bytes,
               ts: int, typ: int) -> bytes:
    if len(row) > 0xFFFF:
        raise ValueError(f"row key is too long for a cell block: {len(row)} bytes")
    if len(family) > 0xFF:
        raise ValueError(f"family name is too long for a cell block: {len(family)} bytes")
    key_length = 2 + len(row) + 1 + len(family) + len(qualifier) + 8 + 1
    key_value_length = 4 + 4 + key_length + len(value)
    return b"".join((
        struct.pack(">IIIH", key_value_length, key_length, len(value), len(row)),
        row,
        struct.pack(">B", len(family)),
        family,
        qualifier,
        struct.pack(">QB", ts, typ),
        value,
    ))


class Mutate(BaseCall, Batchable):
    """A put, delete, append or increment of cells in one row."""

    rpc_name = "Mutate"
    response_type = MutateResponse

    def __init__(self, table: str | bytes | None, key: str | bytes | None,
                 values: Values | None, mutation_type: MutationType,
                 *args: Option) -> None:
        BaseCall.__init__(self, _as_bytes(table), _as_bytes(key))
        self.values = values
        self.mutation_type = MutationType(mutation_type)
        self.ttl = b""
        self.timestamp = MAX_TIMESTAMP
        self.durability = DurabilityType.USE_DEFAULT
        self.delete_one_version = False
        self.skip_batch = False
        apply_options(self, args)

    def description(self) -> str:
        """The kind of mutation: PUT, DELETE, APPEND or INCREMENT."""
        return self.mutation_type.name

    def _families(self) -> Iterator[tuple[str, dict[str, bytes | None],
                                          DeleteType | None, CellType]]:
        """Each family with its qualifiers, delete type and cell type."""
        one = self.delete_one_version
        for family, qualifiers in (self.values or {}).items():
            if self.mutation_type is not MutationType.DELETE:
                yield family, qualifiers or {}, None, CellType.PUT
            elif not qualifiers:
                if one:
                    kinds = DeleteType.DELETE_FAMILY_VERSION, CellType.DELETE_FAMILY_VERSION
                else:
                    kinds = DeleteType.DELETE_FAMILY, CellType.DELETE_FAMILY
                resolved = _EMPTY_QUALIFIER if qualifiers is None else {}
                yield family, resolved, kinds[0], kinds[1]
            elif one:
                yield family, qualifiers, DeleteType.DELETE_ONE_VERSION, CellType.DELETE
            else:
                yield (family, qualifiers, DeleteType.DELETE_MULTIPLE_VERSIONS,
                       CellType.DELETE_COLUMN)

    def _values_to_proto(self, ts: int | None) -> list[ColumnValue]:
        return [
            ColumnValue(
                family=family.encode(),
                qualifier_value=[
                    QualifierValue(qualifier=q.encode(), value=v, timestamp=ts,
                                   delete_type=delete_type)
                    for q, v in qualifiers.items()
                ],
            )
            for family, qualifiers, delete_type, _ in self._families()
        ]

    def _values_to_cellblocks(self) -> tuple[bytes, int]:
        if not self.values:
            return b"", 0
        ts = _LATEST_TIMESTAMP if self.timestamp == MAX_TIMESTAMP else self.timestamp
        blocks = [
            _cellblock(self.key, family.encode(), q.encode(), v or b"", ts, cell_type)
            for family, qualifiers, _, cell_type in self._families()
            for q, v in qualifiers.items()
        ]
        return b"".join(blocks), len(blocks)

    def _to_proto(self, cellblocks: bool,
                  cbs: list[bytes] | None) -> tuple[MutateRequest, list[bytes], int]:
        out = list(cbs or [])
        ts = None if self.timestamp == MAX_TIMESTAMP else self.timestamp
        mutation = MutationProto(
            row=self.key,
            mutate_type=self.mutation_type,
            durability=Durability(self.durability),
            timestamp=ts,
        )
        size = 0
        if cellblocks:
            data, count = self._values_to_cellblocks()
            mutation.associated_cell_count = count
            size = len(data)
            if size:
                out.append(data)
        else:
            mutation.column_value = self._values_to_proto(ts)
        if self.ttl:
            mutation.attribute.append(NameBytesPair(name=ATTRIBUTE_NAME_TTL, value=self.ttl))
        return MutateRequest(region=self.region_specifier(), mutation=mutation), out, size

    def to_proto(self) -> MutateRequest:
        """Build the MutateRequest with the values inline."""
        request, _, _ = self._to_proto(False, None)
        return request

    def new_response(self) -> MutateResponse:
        """An empty MutateResponse."""
        return MutateResponse()

    def serialize_cell_blocks(self, cbs: list[bytes] | None
                              ) -> tuple[MutateRequest, list[bytes], int]:
        """Build the request with values moved to cell blocks appended to cbs.

        Returns the request, the cell blocks and the size of the added data.
        """
        return self._to_proto(True, cbs)

    def deserialize_cell_blocks(self, response: Any, b: bytes) -> int:
        """Append the cells carried in cell blocks to the response; returns bytes read."""
        result = response.result
        if result is None:
            return 0
        cells, read = _deserialize(b, result.associated_cell_count or 0)
        result.cell.extend(cells)
        return read

    def cell_blocks_enabled(self) -> bool:
        """Mutations are sent with cell blocks."""
        return True


def new_put(table: str | bytes | None, key: str | bytes | None,
            values: Values | None, *args: Option) -> Mutate:
    """Insert the given family-qualifier-values into a row."""
    return Mutate(table, key, values, MutationType.PUT, *args)


def new_del(table: str | bytes | None, key: str | bytes | None,
            values: Values | None, *args: Option) -> Mutate:
    """Delete a row, whole families (qualifiers None) or specific qualifiers."""
    m = Mutate(table, key, values, MutationType.DELETE, *args)
    if not m.values and m.delete_one_version:
        raise OptionError(
            "'DeleteOneVersion' option cannot be specified for delete entire row request")
    return m


def new_app(table: str | bytes | None, key: str | bytes | None,
            values: Values | None, *args: Option) -> Mutate:
    """Append the given values to existing cells, creating them if needed."""
    return Mutate(table, key, values, MutationType.APPEND, *args)


def new_inc(table: str | bytes | None, key: str | bytes | None,
            values: Values | None, *args: Option) -> Mutate:
    """Increment the given cells by the 8-byte big-endian amounts in values."""
    return Mutate(table, key, values, MutationType.INCREMENT, *args)


def new_inc_single(table: str | bytes | None, key: str | bytes | None, family: str,
                   qualifier: str, amount: int, *args: Option) -> Mutate:
    """Increment one cell by amount."""
    value = struct.pack(">Q", amount & _U64)
    return new_inc(table, key, {family: {qualifier: value}}, *args)


def _mutate(call: BaseCall, option_name: str) -> Mutate:
    if not isinstance(call, Mutate):
        raise OptionError(f"'{option_name}' option can only be used with mutation queries")
    return call


def ttl(duration: timedelta) -> Option:
    """Time to live of the written cells, at millisecond resolution."""

    def apply(call: BaseCall) -> None:
        m = _mutate(call, "TTL")
        millis = _millis_toward_zero(duration // timedelta(microseconds=1))
        m.ttl = struct.pack(">Q", millis & _U64)

    return apply


def timestamp(ts: datetime) -> Option:
    """Timestamp of the mutation, rounded to milliseconds."""

    def apply(call: BaseCall) -> None:
        m = _mutate(call, "Timestamp")
        micros = (ts.astimezone(timezone.utc) - _EPOCH) // timedelta(microseconds=1)
        m.timestamp = _millis_toward_zero(micros) & _U64

    return apply


def timestamp_uint64(ts: int) -> Option:
    """Timestamp of the mutation as a raw number."""

    def apply(call: BaseCall) -> None:
        _mutate(call, "TimestampUint64").timestamp = ts

    return apply


def durability(d: DurabilityType | int) -> Option:
    """Write-ahead-log durability of the mutation."""

    def apply(call: BaseCall) -> None:
        m = _mutate(call, "Durability")
        if d < DurabilityType.USE_DEFAULT or d > DurabilityType.FSYNC_WAL:
            raise OptionError("invalid durability value")
        m.durability = DurabilityType(d)

    return apply


def delete_one_version() -> Option:
    """Delete only one version: the latest, or the one at the given timestamp."""

    def apply(call: BaseCall) -> None:
        _mutate(call, "DeleteOneVersion").delete_one_version = True

    return apply