"""Get request: read a single row."""

from __future__ import annotations

from typing import Any, Callable

from . import messages as pb
from .call import Call
from .call import deserialize_cell_blocks as _decode_cells
from .query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    ConsistencyType,
    QueryOptions,
)


def _encode(value: bytes | str) -> bytes:
    return value.encode() if isinstance(value, str) else bytes(value)


def families_to_column(families: dict[str, list[str]] | None) -> list[pb.Column]:
    """Convert a family -> qualifiers mapping into column messages."""
    if not families:
        return []
    return [
        pb.Column(family=_encode(family), qualifiers=[_encode(q) for q in qualifiers or ()])
        for family, qualifiers in families.items()
    ]


class Get(QueryOptions, Call):
    """A Get call for one row of a table."""

    batchable = True

    def __init__(self, table: bytes | str | None, key: bytes | str | None,
                 *args: Callable[[Call], None], ctx: Any = None) -> None:
        Call.__init__(self, table, key, ctx)
        QueryOptions.__init__(self)
        self.existence_only = False
        self.skip_batch = False
        self.apply_options(args)

    def name(self) -> str:
        return "Get"

    def exists_only(self) -> None:
        """Only ask whether the row exists; return no cells."""
        self.existence_only = True

    def to_proto(self) -> pb.GetRequest:
        get = pb.Get(
            row=self.key,
            columns=families_to_column(self.families),
            time_range=pb.TimeRange(),
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
        return pb.GetRequest(region=self.region_specifier(), get=get)

    def new_response(self) -> pb.GetResponse:
        return pb.GetResponse()

    def deserialize_cell_blocks(self, response: pb.GetResponse, data: bytes) -> int:
        """Append the cells held in ``data`` to the response; return bytes read."""
        result = response.result
        if result is None:
            return 0
        cells, read = _decode_cells(data, result.associated_cell_count or 0)
        result.cells.extend(cells)
        return read