"""Options shared by Get and Scan requests, and their defaults."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any, Callable

from .call import Call, OptionError
from .messages import Consistency, Filter

DEFAULT_MAX_VERSIONS = 1
MIN_TIMESTAMP = 0
MAX_TIMESTAMP = 2**64 - 1
DEFAULT_MAX_RESULT_SIZE = 2097152
DEFAULT_NUMBER_OF_ROWS = 2**31 - 1
DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY = 2**31 - 1
DEFAULT_CACHE_BLOCKS = True

_MAX_INT32 = 2**31 - 1
_MASK64 = 2**64 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

Option = Callable[[Call], None]


class ConsistencyType(enum.IntEnum):
    """Required consistency of the data read."""

    DEFAULT = 0
    STRONG = 1
    TIMELINE = 2

    def to_proto(self) -> Consistency:
        """The wire value; the default has none."""
        if self is ConsistencyType.TIMELINE:
            return Consistency.TIMELINE
        if self is ConsistencyType.STRONG:
            return Consistency.STRONG
        raise ValueError("default consistency depends on context")


class QueryOptions:
    """Settings common to Get and Scan requests."""

    def __init__(self) -> None:
        self.families: dict[str, list[str]] | None = None
        self.filter: Filter | None = None
        self.from_timestamp = MIN_TIMESTAMP
        self.to_timestamp = MAX_TIMESTAMP
        self.max_versions = DEFAULT_MAX_VERSIONS
        self.store_limit = DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY
        self.store_offset = 0
        self.priority = 0
        self.cache_blocks = DEFAULT_CACHE_BLOCKS
        self.consistency = ConsistencyType.DEFAULT


def _query(call: Call, message: str) -> QueryOptions:
    if not isinstance(call, QueryOptions):
        raise OptionError(message)
    return call


def _to_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    delta = moment - _EPOCH
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    millis = micros // 1000 if micros >= 0 else -((-micros) // 1000)
    return millis & _MASK64


def get_priority(call: Any) -> int:
    """Priority of a call, 0 where none can be set."""
    if isinstance(call, QueryOptions):
        return call.priority
    return 0


def families(mapping: dict[str, list[str]]) -> Option:
    """Restrict a Get or Scan to the given families and qualifiers."""

    def option(call: Call) -> None:
        _query(call, "'Families' option can only be used with Get or Scan request").families = mapping

    return option


def filters(flt: Any) -> Option:
    """Apply a filter, given as a Filter message or an object that builds one."""

    def option(call: Call) -> None:
        target = _query(call, "'Filters' option can only be used with Get or Scan request")
        target.filter = flt if isinstance(flt, Filter) else flt.construct_pb_filter()

    return option


def time_range(start: datetime, end: datetime) -> Option:
    """Only read cells whose timestamp lies in [start, end)."""
    return time_range_uint64(_to_millis(start), _to_millis(end))


def time_range_uint64(start: int, end: int) -> Option:
    """Only read cells whose millisecond timestamp lies in [start, end)."""

    def option(call: Call) -> None:
        target = _query(call, "'TimeRange' option can only be used with Get or Scan request")
        if start >= end:
            raise OptionError("'from' timestamp is greater or equal to 'to' timestamp")
        target.from_timestamp = start
        target.to_timestamp = end

    return option


def max_versions(versions: int) -> Option:
    """Return at most this many versions of each cell."""

    def option(call: Call) -> None:
        target = _query(call, "'MaxVersions' option can only be used with Get or Scan request")
        if versions > _MAX_INT32:
            raise OptionError("'MaxVersions' exceeds supported number of versions")
        target.max_versions = versions

    return option


def max_results_per_column_family(max_results: int) -> Option:
    """Return at most this many cells per column family in a row."""

    def option(call: Call) -> None:
        target = _query(
            call,
            "'MaxResultsPerColumnFamily' option can only be used with Get or Scan request")
        if max_results > _MAX_INT32:
            raise OptionError(
                "'MaxResultsPerColumnFamily' exceeds supported number of value results")
        target.store_limit = max_results

    return option


def result_offset(offset: int) -> Option:
    """Skip this many cells within each column family."""

    def option(call: Call) -> None:
        target = _query(call, "'ResultOffset' option can only be used with Get or Scan request")
        if offset > _MAX_INT32:
            raise OptionError("'ResultOffset' exceeds supported offset value")
        target.store_offset = offset

    return option


def cache_blocks(enabled: bool) -> Option:
    """Enable or disable the block cache for the request."""

    def option(call: Call) -> None:
        _query(call, "'CacheBlocks' option can only be used with Get or Scan request"
               ).cache_blocks = enabled

    return option


def consistency(level: ConsistencyType) -> Option:
    """Request the given consistency of data."""

    def option(call: Call) -> None:
        _query(call, "'Consistency' option can only be used with Get or Scan requests"
               ).consistency = ConsistencyType(level)

    return option


def priority(value: int) -> Option:
    """Set the priority of the request."""

    def option(call: Call) -> None:
        _query(call, "'Priority' option can only be used with Get or Scan requests"
               ).priority = value

    return option