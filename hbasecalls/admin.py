"""Administrative calls: table lifecycle, balancer, procedures and cluster status."""

from __future__ import annotations

from typing import Any, Callable, Mapping

from . import messages as pb
from .call import Call

DEFAULT_NAMESPACE = b"default"

DEFAULT_FAMILY_ATTRIBUTES: Mapping[str, str] = {
    "BLOOMFILTER": "ROW",
    "VERSIONS": "3",
    "IN_MEMORY": "false",
    "KEEP_DELETED_CELLS": "false",
    "DATA_BLOCK_ENCODING": "FAST_DIFF",
    "TTL": "2147483647",
    "COMPRESSION": "NONE",
    "MIN_VERSIONS": "0",
    "BLOCKCACHE": "true",
    "BLOCKSIZE": "65536",
    "REPLICATION_SCOPE": "0",
}

CreateTableOption = Callable[["CreateTable"], None]


def _encode(value: bytes | str) -> bytes:
    return value.encode() if isinstance(value, str) else bytes(value)


def _pairs(attrs: Mapping[str, str]) -> list[pb.BytesBytesPair]:
    return [pb.BytesBytesPair(first=_encode(k), second=_encode(v)) for k, v in attrs.items()]


def _default_table_name(table: bytes) -> pb.TableName:
    return pb.TableName(namespace=DEFAULT_NAMESPACE, qualifier=table)


class CreateTable(Call):
    """Create a table with the given column families.

    Each family is given exactly the known default attributes, with the
    values supplied for it taking precedence; other keys are ignored.
    """

    def __init__(self, table: bytes | str | None,
                 families: Mapping[str, Mapping[str, str] | None] | None,
                 *args: CreateTableOption, ctx: Any = None) -> None:
        super().__init__(table, b"", ctx)
        self.attributes: dict[str, str] = {}
        self.split_keys: list[bytes] = []
        for option in args:
            option(self)
        self.families: dict[str, dict[str, str]] = {}
        for family, attrs in (families or {}).items():
            given = attrs or {}
            self.families[family] = {
                key: given.get(key, default)
                for key, default in DEFAULT_FAMILY_ATTRIBUTES.items()
            }

    def name(self) -> str:
        return "CreateTable"

    def to_proto(self) -> pb.CreateTableRequest:
        column_families = [
            pb.ColumnFamilySchema(name=_encode(family), attributes=_pairs(attrs))
            for family, attrs in self.families.items()
        ]
        return pb.CreateTableRequest(
            table_schema=pb.TableSchema(
                table_name=_default_table_name(self.table),
                attributes=_pairs(self.attributes),
                column_families=column_families,
            ),
            split_keys=list(self.split_keys),
        )

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


def split_keys(keys: list[bytes] | None) -> CreateTableOption:
    """Option setting the split keys of the created table."""

    def option(call: CreateTable) -> None:
        call.split_keys = [bytes(k) for k in keys or ()]

    return option


def table_attributes(attrs: Mapping[str, str] | None) -> CreateTableOption:
    """Option setting attributes on the created table."""

    def option(call: CreateTable) -> None:
        call.attributes = dict(attrs or {})

    return option


class DeleteTable(Call):
    """Delete a table."""

    def __init__(self, table: bytes | str | None, ctx: Any = None) -> None:
        super().__init__(table, b"", ctx)

    def name(self) -> str:
        return "DeleteTable"

    def to_proto(self) -> pb.DeleteTableRequest:
        return pb.DeleteTableRequest(table_name=_default_table_name(self.table))

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class DisableTable(Call):
    """Disable a table."""

    def __init__(self, table: bytes | str | None, ctx: Any = None) -> None:
        super().__init__(table, b"", ctx)

    def name(self) -> str:
        return "DisableTable"

    def to_proto(self) -> pb.DisableTableRequest:
        return pb.DisableTableRequest(table_name=_default_table_name(self.table))

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class EnableTable(Call):
    """Enable a table."""

    def __init__(self, table: bytes | str | None, ctx: Any = None) -> None:
        super().__init__(table, b"", ctx)

    def name(self) -> str:
        return "EnableTable"

    def to_proto(self) -> pb.EnableTableRequest:
        return pb.EnableTableRequest(table_name=_default_table_name(self.table))

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class SetBalancer(Call):
    """Turn the region balancer on or off."""

    def __init__(self, enabled: bool, ctx: Any = None) -> None:
        super().__init__(b"", b"", ctx)
        self.request = pb.SetBalancerRunningRequest(on=bool(enabled))

    def name(self) -> str:
        return "SetBalancerRunning"

    def to_proto(self) -> pb.SetBalancerRunningRequest:
        return self.request

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class GetProcedureState(Call):
    """Ask for the state of a procedure."""

    def __init__(self, proc_id: int, ctx: Any = None) -> None:
        super().__init__(b"", b"", ctx)
        self.proc_id = proc_id

    def name(self) -> str:
        return "getProcedureResult"

    def to_proto(self) -> pb.GetProcedureResultRequest:
        return pb.GetProcedureResultRequest(proc_id=self.proc_id)

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class ClusterStatus(Call):
    """Ask for the status of the cluster."""

    def __init__(self) -> None:
        super().__init__(b"", b"", None)

    def name(self) -> str:
        return "GetClusterStatus"

    def to_proto(self) -> pb.GetClusterStatusRequest:
        return pb.GetClusterStatusRequest()

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())