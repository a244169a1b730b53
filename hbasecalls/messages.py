"""Protocol messages exchanged with HBase servers.

Every message is a plain dataclass. Optional scalar fields default to
``None`` (unset) and repeated fields default to an empty list.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


class CellType(enum.IntEnum):
    """Kind of a key/value cell."""

    MINIMUM = 0
    PUT = 4
    DELETE = 8
    DELETE_FAMILY_VERSION = 10
    DELETE_COLUMN = 12
    DELETE_FAMILY = 14
    MAXIMUM = 255


@dataclass
class Cell:
    """A single cell: one value of one qualifier in one row."""

    row: bytes | None = None
    family: bytes | None = None
    qualifier: bytes | None = None
    timestamp: int | None = None
    cell_type: CellType | int | None = None
    value: bytes | None = None


class RegionSpecifierType(enum.IntEnum):
    """How a region is identified."""

    REGION_NAME = 1
    ENCODED_REGION_NAME = 2


@dataclass
class RegionSpecifier:
    type: RegionSpecifierType | None = None
    value: bytes | None = None


@dataclass
class NameBytesPair:
    name: str | None = None
    value: bytes | None = None


@dataclass
class BytesBytesPair:
    first: bytes | None = None
    second: bytes | None = None


@dataclass
class Column:
    family: bytes | None = None
    qualifiers: list[bytes] = field(default_factory=list)


@dataclass
class TimeRange:
    from_: int | None = None
    to: int | None = None


@dataclass
class Filter:
    name: str | None = None
    serialized_filter: bytes | None = None


@dataclass
class Comparator:
    name: str | None = None
    serialized_comparator: bytes | None = None


class Consistency(enum.IntEnum):
    STRONG = 0
    TIMELINE = 1


@dataclass
class Result:
    cells: list[Cell] = field(default_factory=list)
    associated_cell_count: int | None = None
    exists: bool | None = None
    stale: bool | None = None
    partial: bool | None = None


@dataclass
class Get:
    row: bytes | None = None
    columns: list[Column] = field(default_factory=list)
    attributes: list[NameBytesPair] = field(default_factory=list)
    filter: Filter | None = None
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
    get: Get | None = None


@dataclass
class GetResponse:
    result: Result | None = None


@dataclass
class Scan:
    columns: list[Column] = field(default_factory=list)
    attributes: list[NameBytesPair] = field(default_factory=list)
    start_row: bytes | None = None
    stop_row: bytes | None = None
    filter: Filter | None = None
    time_range: TimeRange | None = None
    max_versions: int | None = None
    cache_blocks: bool | None = None
    max_result_size: int | None = None
    store_limit: int | None = None
    store_offset: int | None = None
    reversed: bool | None = None
    consistency: Consistency | None = None


@dataclass
class ScanRequest:
    region: RegionSpecifier | None = None
    scan: Scan | None = None
    scanner_id: int | None = None
    number_of_rows: int | None = None
    close_scanner: bool | None = None
    client_handles_partials: bool | None = None
    client_handles_heartbeats: bool | None = None
    track_scan_metrics: bool | None = None


@dataclass
class ScanResponse:
    cells_per_result: list[int] = field(default_factory=list)
    scanner_id: int | None = None
    more_results: bool | None = None
    results: list[Result] = field(default_factory=list)
    stale: bool | None = None
    partial_flag_per_result: list[bool] = field(default_factory=list)
    more_results_in_region: bool | None = None
    heartbeat_message: bool | None = None
    scan_metrics: dict[str, int] = field(default_factory=dict)


class MutationType(enum.IntEnum):
    APPEND = 0
    INCREMENT = 1
    PUT = 2
    DELETE = 3


class DeleteType(enum.IntEnum):
    DELETE_ONE_VERSION = 0
    DELETE_MULTIPLE_VERSIONS = 1
    DELETE_FAMILY = 2
    DELETE_FAMILY_VERSION = 3


class Durability(enum.IntEnum):
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
    qualifier_values: list[QualifierValue] = field(default_factory=list)


@dataclass
class MutationProto:
    row: bytes | None = None
    mutate_type: MutationType | None = None
    column_values: list[ColumnValue] = field(default_factory=list)
    timestamp: int | None = None
    attributes: list[NameBytesPair] = field(default_factory=list)
    durability: Durability | None = None
    time_range: TimeRange | None = None
    associated_cell_count: int | None = None


class CompareType(enum.IntEnum):
    LESS = 0
    LESS_OR_EQUAL = 1
    EQUAL = 2
    NOT_EQUAL = 3
    GREATER_OR_EQUAL = 4
    GREATER = 5
    NO_OP = 6


@dataclass
class Condition:
    row: bytes | None = None
    family: bytes | None = None
    qualifier: bytes | None = None
    compare_type: CompareType | None = None
    comparator: Comparator | None = None


@dataclass
class MutateRequest:
    region: RegionSpecifier | None = None
    mutation: MutationProto | None = None
    condition: Condition | None = None


@dataclass
class MutateResponse:
    result: Result | None = None
    processed: bool | None = None


@dataclass
class TableName:
    namespace: bytes | None = None
    qualifier: bytes | None = None


@dataclass
class ColumnFamilySchema:
    name: bytes | None = None
    attributes: list[BytesBytesPair] = field(default_factory=list)


@dataclass
class TableSchema:
    table_name: TableName | None = None
    attributes: list[BytesBytesPair] = field(default_factory=list)
    column_families: list[ColumnFamilySchema] = field(default_factory=list)


@dataclass
class CreateTableRequest:
    table_schema: TableSchema | None = None
    split_keys: list[bytes] = field(default_factory=list)


@dataclass
class DeleteTableRequest:
    table_name: TableName | None = None


@dataclass
class DisableTableRequest:
    table_name: TableName | None = None


@dataclass
class EnableTableRequest:
    table_name: TableName | None = None


@dataclass
class SetBalancerRunningRequest:
    on: bool | None = None
    synchronous: bool | None = None


@dataclass
class ServerName:
    host_name: str | None = None
    port: int | None = None
    start_code: int | None = None


@dataclass
class MoveRegionRequest:
    region: RegionSpecifier | None = None
    dest_server_name: ServerName | None = None


@dataclass
class GetProcedureResultRequest:
    proc_id: int | None = None


@dataclass
class GetClusterStatusRequest:
    """Request for the cluster status; it carries no fields."""


@dataclass
class ListNamespaceDescriptorsRequest:
    """Request for all namespace descriptors; it carries no fields."""


@dataclass
class GetTableNamesRequest:
    regex: str | None = None
    include_sys_tables: bool | None = None
    namespace: str | None = None


@dataclass
class GetTableDescriptorsRequest:
    table_names: list[TableName] = field(default_factory=list)
    regex: str | None = None
    include_sys_tables: bool | None = None
    namespace: str | None = None


class SnapshotType(enum.IntEnum):
    DISABLED = 0
    FLUSH = 1
    SKIPFLUSH = 2


@dataclass
class SnapshotDescription:
    name: str | None = None
    table: str | None = None
    creation_time: int | None = None
    type: SnapshotType | None = None
    version: int | None = None
    owner: str | None = None


@dataclass
class SnapshotRequest:
    snapshot: SnapshotDescription | None = None


@dataclass
class GetCompletedSnapshotsRequest:
    """Request for all completed snapshots; it carries no fields."""


@dataclass
class RPCTInfo:
    """Tracing information carried in a request header."""

    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class RequestHeader:
    call_id: int | None = None
    trace_info: RPCTInfo | None = None
    method_name: str | None = None
    request_param: bool | None = None
    priority: int | None = None
    timeout: int | None = None


@dataclass
class AdminResponse:
    """Response of an administrative RPC, keyed by its method name."""

    method: str = ""
    fields: dict[str, Any] = field(default_factory=dict)