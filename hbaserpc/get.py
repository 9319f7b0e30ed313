"""Get requests: read a single row."""

from typing import Any

from hbaserpc.call import Batchable, BaseCall, Option, apply_options
from hbaserpc.call import deserialize_cell_blocks as _deserialize
from hbaserpc.messages import Column, GetProto, GetRequest, GetResponse, TimeRange
from hbaserpc.query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    BaseQuery,
    ConsistencyType,
)


def _as_bytes(value: str | bytes | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode()
    return bytes(value)


def families_to_column(families: dict[str, list[str]] | None) -> list[Column]:
    """Turn a family-to-qualifiers mapping into column messages."""
    if not families:
        return []
    return [
        Column(family=family.encode(), qualifier=[q.encode() for q in qualifiers or []])
        for family, qualifiers in families.items()
    ]


class Get(BaseCall, BaseQuery, Batchable):
    """Read one row of a table."""

    rpc_name = "Get"
    response_type = GetResponse

    def __init__(self, table: str | bytes | None, key: str | bytes | None,
                 *args: Option) -> None:
        BaseCall.__init__(self, _as_bytes(table), _as_bytes(key))
        BaseQuery.__init__(self)
        self.existence_only = False
        apply_options(self, args)

    def exists_only(self) -> None:
        """Only report whether the row exists, without returning cells."""
        self.existence_only = True

    def to_proto(self) -> GetRequest:
        """Build the GetRequest message."""
        get = GetProto(
            row=self.key,
            column=families_to_column(self.families),
            time_range=TimeRange(),
        )
        if self.store_limit != DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY:
            get.store_limit = self.store_limit
        if self.store_offset != 0:
            get.store_offset = self.store_offset
        if self.max_versions != DEFAULT_MAX_VERSIONS:
            get.max_versions = self.max_versions
        if self.from_timestamp != MIN_TIMESTAMP:
            get.time_range.from_ = self.from_timestamp
        if self.to_timestamp != MAX_TIMESTAMP:
            get.time_range.to = self.to_timestamp
        if self.existence_only:
            get.existence_only = True
        if self.cache_blocks != DEFAULT_CACHE_BLOCKS:
            get.cache_blocks = self.cache_blocks
        if self.consistency != ConsistencyType.DEFAULT:
            get.consistency = self.consistency.to_proto()
        get.filter = self.filter
        return GetRequest(region=self.region_specifier(), get=get)

    def new_response(self) -> GetResponse:
        """An empty GetResponse."""
        return GetResponse()

    def deserialize_cell_blocks(self, response: Any, b: bytes) -> int:
        """Append the cells carried in cell blocks to the response; returns bytes read."""
        result = response.result
        if result is None:
            return 0
        cells, read = _deserialize(b, result.associated_cell_count or 0)
        result.cell.extend(cells)
        return read