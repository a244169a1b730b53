"""Calls that list namespaces and tables, describe tables and move regions."""

from __future__ import annotations

from typing import Any, Callable

from . import messages as pb
from .call import Call, OptionError

Option = Callable[[Call], None]

_MAX_UINT32 = 2**32 - 1
_MAX_UINT64 = 2**64 - 1


class ListNamespaces(Call):
    """List the descriptors of all namespaces."""

    def __init__(self, ctx: Any = None) -> None:
        super().__init__(b"", b"", ctx)

    def name(self) -> str:
        return "ListNamespaceDescriptors"

    def to_proto(self) -> pb.ListNamespaceDescriptorsRequest:
        return pb.ListNamespaceDescriptorsRequest()

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class ListTableNames(Call):
    """List the names of tables; by default every user table matches."""

    def __init__(self, *args: Option, ctx: Any = None) -> None:
        super().__init__(b"", b"", ctx)
        self.regex = ".*"
        self.include_sys_tables = False
        self.namespace = ""
        self.apply_options(args)

    def name(self) -> str:
        return "GetTableNames"

    def to_proto(self) -> pb.GetTableNamesRequest:
        return pb.GetTableNamesRequest(
            regex=self.regex,
            include_sys_tables=self.include_sys_tables,
            namespace=self.namespace,
        )

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


def _list_call(call: Call, message: str) -> ListTableNames:
    if not isinstance(call, ListTableNames):
        raise OptionError(message)
    return call


def list_regex(regex: str) -> Option:
    """Only list tables whose name matches ``regex``."""

    def option(call: Call) -> None:
        _list_call(call, "ListRegex option can only be used with ListTableNames").regex = regex

    return option


def list_namespace(namespace: str) -> Option:
    """Only list tables of the given namespace."""

    def option(call: Call) -> None:
        _list_call(call, "ListNamespace option can only be used with ListTableNames"
                   ).namespace = namespace

    return option


def list_sys_tables(include: bool) -> Option:
    """Whether system tables are listed too."""

    def option(call: Call) -> None:
        _list_call(call, "ListSysTables option can only be used with ListTableNames"
                   ).include_sys_tables = bool(include)

    return option


class GetTableDescriptor(Call):
    """Fetch the descriptor of one table."""

    def __init__(self, namespace: str, table_name: str, ctx: Any = None) -> None:
        super().__init__(b"", b"", ctx)
        self.table_name = table_name
        self.namespace = namespace
        self.regex = ".*"
        self.include_sys_tables = False

    def name(self) -> str:
        return "GetTableDescriptors"

    def to_proto(self) -> pb.GetTableDescriptorsRequest:
        return pb.GetTableDescriptorsRequest(
            table_names=[pb.TableName(namespace=self.namespace.encode(),
                                      qualifier=self.table_name.encode())],
            regex=self.regex,
            include_sys_tables=self.include_sys_tables,
            namespace=self.namespace,
        )

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


class MoveRegion(Call):
    """Move a region, given by its encoded name, to another region server."""

    def __init__(self, region_name: bytes | str, *args: Option, ctx: Any = None) -> None:
        super().__init__(b"", b"", ctx)
        encoded = region_name.encode() if isinstance(region_name, str) else bytes(region_name)
        self.request = pb.MoveRegionRequest(
            region=pb.RegionSpecifier(type=pb.RegionSpecifierType.ENCODED_REGION_NAME,
                                      value=encoded),
        )
        self.apply_options(args)

    def name(self) -> str:
        return "MoveRegion"

    def to_proto(self) -> pb.MoveRegionRequest:
        return self.request

    def new_response(self) -> pb.AdminResponse:
        return pb.AdminResponse(method=self.name())


def _parse_unsigned(text: str, limit: int) -> int:
    if not text or not (text.isascii() and text.isdigit()):
        raise ValueError(f'parsing "{text}": invalid syntax')
    number = int(text)
    if number > limit:
        raise ValueError(f'parsing "{text}": value out of range')
    return number


def with_destination_region_server(server_name: str) -> Option:
    """Destination of a MoveRegion, as ``<host>,<port>,<startcode>``."""

    def option(call: Call) -> None:
        if not isinstance(call, MoveRegion):
            raise OptionError(
                "WithDestinationRegionServer option can only be used with MoveRegion")
        parts = server_name.split(",", 2)
        if len(parts) != 3:
            raise OptionError(
                "invalid server name, needs to be of format <host>,<port>,<startcode>")
        host, port_text, start_text = parts
        try:
            port = _parse_unsigned(port_text, _MAX_UINT32)
        except ValueError as exc:
            raise OptionError(f"failed to parse port: {exc}") from exc
        try:
            start_code = _parse_unsigned(start_text, _MAX_UINT64)
        except ValueError as exc:
            raise OptionError(f"failed to parse startcode: {exc}") from exc
        call.request.dest_server_name = pb.ServerName(
            host_name=host, port=port, start_code=start_code)

    return option