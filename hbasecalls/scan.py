"""Scan request: read rows sequentially from a table."""

from __future__ import annotations

from typing import Any, Callable

from . import messages as pb
from .call import Call, CellBlockError, OptionError
from .call import deserialize_cell_blocks as _decode_cells
from .get import families_to_column
from .query import (
    DEFAULT_CACHE_BLOCKS,
    DEFAULT_MAX_RESULT_SIZE,
    DEFAULT_MAX_RESULTS_PER_COLUMN_FAMILY,
    DEFAULT_MAX_VERSIONS,
    DEFAULT_NUMBER_OF_ROWS,
    MAX_TIMESTAMP,
    MIN_TIMESTAMP,
    ConsistencyType,
    QueryOptions,
)

NO_SCANNER_ID = 2**64 - 1

Option = Callable[[Call], None]


def _optional_bytes(value: bytes | str | None) -> bytes | None:
    if value is None:
        return None
    return value.encode() if isinstance(value, str) else bytes(value)


class Scan(QueryOptions, Call):
    """A scanner over a table, optionally limited to [start_row, stop_row)."""

    def __init__(self, table: bytes | str | None, *args: Option,
                 start_row: bytes | str | None = None, stop_row: bytes | str | None = None,
                 ctx: Any = None) -> None:
        self.start_row = _optional_bytes(start_row)
        self.stop_row = _optional_bytes(stop_row)
        Call.__init__(self, table, self.start_row, ctx)
        QueryOptions.__init__(self)
        self.scanner_id = NO_SCANNER_ID
        self.max_result_size = DEFAULT_MAX_RESULT_SIZE
        self.number_of_rows = DEFAULT_NUMBER_OF_ROWS
        self.reversed = False
        self.attributes: list[pb.NameBytesPair] = []
        self.track_scan_metrics = False
        self.close_scanner = False
        self.allow_partial_results = False
        self.apply_options(args)

    def __str__(self) -> str:
        return (f"Scan{{Table={self.table!r} StartRow={self.start_row!r} "
                f"StopRow={self.stop_row!r} TimeRange=({self.from_timestamp}, "
                f"{self.to_timestamp}) MaxVersions={self.max_versions} "
                f"NumberOfRows={self.number_of_rows} MaxResultSize={self.max_result_size} "
                f"Familes={self.families} Filter={self.filter} "
                f"StoreLimit={self.store_limit} StoreOffset={self.store_offset} "
                f"ScannerID={self.scanner_id} Close={self.close_scanner}}}")

    def name(self) -> str:
        return "Scan"

    def to_proto(self) -> pb.ScanRequest:
        request = pb.ScanRequest(
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
        scan = pb.Scan(
            columns=families_to_column(self.families),
            start_row=self.start_row,
            stop_row=self.stop_row,
            time_range=pb.TimeRange(),
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
        scan.attributes = list(self.attributes)
        scan.filter = self.filter
        request.scan = scan
        return request

    def new_response(self) -> pb.ScanResponse:
        return pb.ScanResponse()

    def deserialize_cell_blocks(self, response: pb.ScanResponse, data: bytes) -> int:
        """Fill the response's results from ``data``; return bytes read."""
        partials = response.partial_flag_per_result
        counts = response.cells_per_result
        if len(counts) > len(partials):
            raise CellBlockError(
                f"cells per result ({len(counts)}) exceed partial flags ({len(partials)})")
        view = memoryview(data)
        results: list[pb.Result] = []
        read = 0
        for count, partial in zip(counts, partials):
            cells, length = _decode_cells(view[read:], count)
            results.append(pb.Result(cells=cells, partial=partial))
            read += length
        response.results = results
        return read


def _scan(call: Call, message: str) -> Scan:
    if not isinstance(call, Scan):
        raise OptionError(message)
    return call


def scanner_id(scanner: int) -> Option:
    """Continue the ongoing scan with this scanner id."""

    def option(call: Call) -> None:
        _scan(call, "'ScannerID' option can only be used with Scan queries").scanner_id = scanner

    return option


def close_scanner() -> Option:
    """Close the scanner after the first response."""

    def option(call: Call) -> None:
        _scan(call, "'Close' option can only be used with Scan queries").close_scanner = True

    return option


def max_result_size(size: int) -> Option:
    """Maximum number of bytes fetched per response."""

    def option(call: Call) -> None:
        target = _scan(call, "'MaxResultSize' option can only be used with Scan queries")
        if size == 0:
            raise OptionError("'MaxResultSize' option must be greater than 0")
        target.max_result_size = size

    return option


def number_of_rows(rows: int) -> Option:
    """How many rows are fetched with each request to the region server."""

    def option(call: Call) -> None:
        _scan(call, "'NumberOfRows' option can only be used with Scan queries"
              ).number_of_rows = rows

    return option


def allow_partial_results() -> Option:
    """Let the scanner return partial rows."""

    def option(call: Call) -> None:
        _scan(call, "'AllowPartialResults' option can only be used with Scan queries"
              ).allow_partial_results = True

    return option


def track_scan_metrics() -> Option:
    """Ask the server to track scan metrics."""

    def option(call: Call) -> None:
        _scan(call, "'TrackScanMetrics' option can only be used with Scan queries"
              ).track_scan_metrics = True

    return option


def reversed_scan() -> Option:
    """Scan in reverse key order."""

    def option(call: Call) -> None:
        _scan(call, "'Reversed' option can only be used with Scan queries").reversed = True

    return option


def attribute(key: str, value: bytes) -> Option:
    """Attach a named attribute to the scan; may be given several times."""

    def option(call: Call) -> None:
        target = _scan(call, "'Attributes' option can only be used with Scan queries")
        target.attributes.append(pb.NameBytesPair(name=key, value=value))

    return option