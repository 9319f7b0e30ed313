"""Options shared by Get and Scan requests."""

from datetime import datetime, timedelta, timezone
from enum import IntEnum
from typing import Any

from hbaserpc.call import BaseCall, Option, OptionError
from hbaserpc.messages import Consistency

DEFAULT_MAX_VERSIONS = 1
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 2**64 - 1
DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY = 2**31 - 1
DEFAULT_CACHE_BLOCKS = True

_MAX_INT32 = 2**31 - 1
_U64 = 2**64 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ConsistencyType(IntEnum):
    """Consistency of data required by a read."""

    DEFAULT = 0
    STRONG = 1
    TIMELINE = 2

    def to_proto(self) -> Consistency:
        """The wire value; the default has none as it depends on the server."""
        if self is ConsistencyType.TIMELINE:
            return Consistency.TIMELINE
        if self is ConsistencyType.STRONG:
            return Consistency.STRONG
        raise ValueError("default consistency depends on context")


class BaseQuery:
    """Settings common to Get and Scan requests."""

    def __init__(self) -> None:
        self.families: dict[str, list[str]] | None = None
        self.filter: Any = None
        self.from_timestamp = MIN_TIMESTAMP
        self.to_timestamp = MAX_TIMESTAMP
        self.max_versions = DEFAULT_MAX_VERSIONS
        self.store_limit = DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY
        self.store_offset = 0
        self.priority = 0
        self.cache_blocks = DEFAULT_CACHE_BLOCKS
        self.consistency = ConsistencyType.DEFAULT


def get_priority(call: Any) -> int:
    """Priority of a call, 0 for calls that have none."""
    if isinstance(call, BaseQuery):
        return call.priority
    return 0


def _query(call: BaseCall, option_name: str, requests: str = "request") -> BaseQuery:
    if not isinstance(call, BaseQuery):
        raise OptionError(f"'{option_name}' option can only be used with Get or Scan {requests}")
    return call


def families(f: dict[str, list[str]]) -> Option:
    """Restrict a Get or Scan to the given families and qualifiers."""

    def apply(call: BaseCall) -> None:
        _query(call, "Families").families = f

    return apply


def filters(f: Any) -> Option:
    """Attach a filter, any object with construct_pb_filter(), to a Get or Scan."""

    def apply(call: BaseCall) -> None:
        query = _query(call, "Filters")
        query.filter = f.construct_pb_filter()

    return apply


def _unix_millis(moment: datetime) -> int:
    micros = (moment.astimezone(timezone.utc) - _EPOCH) // timedelta(microseconds=1)
    millis = micros // 1000 if micros >= 0 else -((-micros) // 1000)
    return millis & _U64


def time_range(start: datetime, end: datetime) -> Option:
    """Only return cells with timestamps in [start, end)."""
    return time_range_uint64(_unix_millis(start), _unix_millis(end))


def time_range_uint64(start: int, end: int) -> Option:
    """Only return cells with millisecond timestamps in [start, end)."""

    def apply(call: BaseCall) -> None:
        query = _query(call, "TimeRange")
        if start >= end:
            raise OptionError("'from' timestamp is greater or equal to 'to' timestamp")
        query.from_timestamp = start
        query.to_timestamp = end

    return apply


def max_versions(versions: int) -> Option:
    """Return at most this many versions of each cell."""

    def apply(call: BaseCall) -> None:
        query = _query(call, "MaxVersions")
        if versions > _MAX_INT32:
            raise OptionError("'MaxVersions' exceeds supported number of versions")
        query.max_versions = versions

    return apply


def max_results_per_column_family(maxresults: int) -> Option:
    """Return at most this many cells per column family in a row."""

    def apply(call: BaseCall) -> None:
        query = _query(call, "MaxResultsPerColumnFamily")
        if maxresults > _MAX_INT32:
            raise OptionError(
                "'MaxResultsPerColumnFamily' exceeds supported number of value results")
        query.store_limit = maxresults

    return apply


def result_offset(offset: int) -> Option:
    """Skip this many cells within each column family."""

    def apply(call: BaseCall) -> None:
        query = _query(call, "ResultOffset")
        if offset > _MAX_INT32:
            raise OptionError("'ResultOffset' exceeds supported offset value")
        query.store_offset = offset

    return apply


def cache_blocks(cache_blocks: bool) -> Option:
    """Enable or disable the server block cache for the request."""

    def apply(call: BaseCall) -> None:
        _query(call, "CacheBlocks").cache_blocks = cache_blocks

    return apply


def consistency(consistency: ConsistencyType) -> Option:
    """Request the given consistency of data."""

    def apply(call: BaseCall) -> None:
        _query(call, "Consistency", "requests").consistency = consistency

    return apply


def priority(priority: int) -> Option:
    """Set the priority of a Get or Scan."""

    def apply(call: BaseCall) -> None:
        _query(call, "Priority", "requests").priority = priority

    return apply