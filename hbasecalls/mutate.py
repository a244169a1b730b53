"""Mutations of a single row: put, delete, append and increment."""

from __future__ import annotations

import enum
import struct
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Mapping

from . import messages as pb
from .call import Call, OptionError
from .call import deserialize_cell_blocks as _decode_cells
from .query import MAX_TIMESTAMP

ATTRIBUTE_NAME_TTL = "_ttl"

# Java's Long.MAX_VALUE, which HBase uses as LATEST_TIMESTAMP.
_LATEST_TIMESTAMP = 2**63 - 1
_MASK64 = 2**64 - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_PUT_TYPE = 4
_DELETE_TYPE = 8
_DELETE_FAMILY_VERSION_TYPE = 10
_DELETE_COLUMN_TYPE = 12
_DELETE_FAMILY_TYPE = 14

_EMPTY_QUALIFIER: Mapping[str, bytes | None] = {"": None}

Qualifiers = Mapping[Any, Any]
Values = Mapping[Any, Qualifiers | None]
Option = Callable[[Call], None]


class DurabilityType(enum.IntEnum):
    """Write-ahead-log durability of a mutation."""

    USE_DEFAULT = 0
    SKIP_WAL = 1
    ASYNC_WAL = 2
    SYNC_WAL = 3
    FSYNC_WAL = 4


def _encode(value: bytes | str) -> bytes:
    return value.encode() if isinstance(value, str) else bytes(value)


def _truncated_millis(delta: timedelta) -> int:
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    return micros // 1000 if micros >= 0 else -((-micros) // 1000)


def _datetime_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return _truncated_millis(moment - _EPOCH) & _MASK64


def _cellblock(row: bytes, family: bytes, qualifier: bytes, value: bytes,
               ts: int, cell_type: int) -> bytes:
    key_length = 2 + len(row) + 1 + len(family) + len(qualifier) + 8 + 1
    key_value_length = 4 + 4 + key_length + len(value)
    return b"".join((
        struct.pack(">IIIH", key_value_length, key_length, len(value), len(row) & 0xFFFF),
        row,
        bytes([len(family) & 0xFF]),
        family,
        qualifier,
        struct.pack(">QB", ts, cell_type),
        value,
    ))


class Mutate(Call):
    """A mutation of one row of a table."""

    batchable = True

    def __init__(self, table: bytes | str | None, key: bytes | str | None,
                 values: Values | None, mutation_type: pb.MutationType,
                 *args: Option, ctx: Any = None) -> None:
        Call.__init__(self, table, key, ctx)
        self.values = values
        self.mutation_type = pb.MutationType(mutation_type)
        self.ttl = b""
        self.timestamp = MAX_TIMESTAMP
        self.durability = DurabilityType.USE_DEFAULT
        self.delete_one_version = False
        self.skip_batch = False
        self.apply_options(args)
        if (self.mutation_type is pb.MutationType.DELETE and not self.values
                and self.delete_one_version):
            raise OptionError(
                "'DeleteOneVersion' option cannot be specified for delete entire row request")

    def name(self) -> str:
        return "Mutate"

    def description(self) -> str:
        """The kind of mutation performed, such as ``PUT``."""
        return self.mutation_type.name

    def _family_entries(self, quals: Qualifiers | None
                        ) -> tuple[pb.DeleteType | None, int, Qualifiers]:
        """Delete type, cell type and qualifiers written for one family."""
        if self.mutation_type is not pb.MutationType.DELETE:
            return None, _PUT_TYPE, quals or {}
        if not quals:
            if self.delete_one_version:
                kind = (pb.DeleteType.DELETE_FAMILY_VERSION, _DELETE_FAMILY_VERSION_TYPE)
            else:
                kind = (pb.DeleteType.DELETE_FAMILY, _DELETE_FAMILY_TYPE)
            return kind[0], kind[1], _EMPTY_QUALIFIER if quals is None else quals
        if self.delete_one_version:
            return pb.DeleteType.DELETE_ONE_VERSION, _DELETE_TYPE, quals
        return pb.DeleteType.DELETE_MULTIPLE_VERSIONS, _DELETE_COLUMN_TYPE, quals

    def _values_to_proto(self, ts: int | None) -> list[pb.ColumnValue]:
        columns = []
        for family, quals in (self.values or {}).items():
            delete_type, _, entries = self._family_entries(quals)
            columns.append(pb.ColumnValue(
                family=_encode(family),
                qualifier_values=[
                    pb.QualifierValue(
                        qualifier=_encode(qualifier),
                        value=None if value is None else bytes(value),
                        timestamp=ts,
                        delete_type=delete_type,
                    )
                    for qualifier, value in entries.items()
                ],
            ))
        return columns

    def _values_to_cellblocks(self) -> tuple[bytes, int]:
        if not self.values:
            return b"", 0
        ts = _LATEST_TIMESTAMP if self.timestamp == MAX_TIMESTAMP else self.timestamp
        blocks = []
        for family, quals in self.values.items():
            _, cell_type, entries = self._family_entries(quals)
            encoded_family = _encode(family)
            for qualifier, value in entries.items():
                blocks.append(_cellblock(self.key, encoded_family, _encode(qualifier),
                                         b"" if value is None else bytes(value),
                                         ts, cell_type))
        return b"".join(blocks), len(blocks)

    def _build(self, cellblocks: bool) -> tuple[pb.MutateRequest, bytes]:
        ts = None if self.timestamp == MAX_TIMESTAMP else self.timestamp
        mutation = pb.MutationProto(
            row=self.key,
            mutate_type=self.mutation_type,
            durability=pb.Durability(self.durability),
            timestamp=ts,
        )
        chunk = b""
        if cellblocks:
            chunk, count = self._values_to_cellblocks()
            mutation.associated_cell_count = count
        else:
            mutation.column_values = self._values_to_proto(ts)
        if self.ttl:
            mutation.attributes.append(pb.NameBytesPair(name=ATTRIBUTE_NAME_TTL, value=self.ttl))
        return pb.MutateRequest(region=self.region_specifier(), mutation=mutation), chunk

    def to_proto(self) -> pb.MutateRequest:
        request, _ = self._build(False)
        return request

    def new_response(self) -> pb.MutateResponse:
        return pb.MutateResponse()

    def serialize_cell_blocks(self, cellblocks: Iterable[bytes] | None
                              ) -> tuple[pb.MutateRequest, list[bytes], int]:
        """Build the request with values sent as cell blocks.

        Returns the request, ``cellblocks`` extended with this call's block,
        and the size of that block.
        """
        request, chunk = self._build(True)
        blocks = list(cellblocks or [])
        if chunk:
            blocks.append(chunk)
        return request, blocks, len(chunk)

    def deserialize_cell_blocks(self, response: pb.MutateResponse, data: bytes) -> int:
        """Append the cells held in ``data`` to the response; return bytes read."""
        result = response.result
        if result is None:
            return 0
        cells, read = _decode_cells(data, result.associated_cell_count or 0)
        result.cells.extend(cells)
        return read

    def cell_blocks_enabled(self) -> bool:
        return True


def _mutate(call: Call, message: str) -> Mutate:
    if not isinstance(call, Mutate):
        raise OptionError(message)
    return call


def ttl(duration: timedelta) -> Option:
    """Time-to-live of the mutated cells, at millisecond resolution."""
    encoded = struct.pack(">Q", _truncated_millis(duration) & _MASK64)

    def option(call: Call) -> None:
        _mutate(call, "'TTL' option can only be used with mutation queries").ttl = encoded

    return option


def timestamp(moment: datetime) -> Option:
    """Timestamp of the mutation, rounded down to milliseconds."""
    millis = _datetime_millis(moment)

    def option(call: Call) -> None:
        _mutate(call, "'Timestamp' option can only be used with mutation queries"
                ).timestamp = millis

    return option


def timestamp_uint64(ts: int) -> Option:
    """Timestamp of the mutation, as given."""

    def option(call: Call) -> None:
        _mutate(call, "'TimestampUint64' option can only be used with mutation queries"
                ).timestamp = ts

    return option


def durability(level: DurabilityType | int) -> Option:
    """Durability of the mutation."""

    def option(call: Call) -> None:
        target = _mutate(call, "'Durability' option can only be used with mutation queries")
        if not DurabilityType.USE_DEFAULT <= int(level) <= DurabilityType.FSYNC_WAL:
            raise OptionError("invalid durability value")
        target.durability = DurabilityType(level)

    return option


def delete_one_version() -> Option:
    """Delete only one version of the given qualifiers or families."""

    def option(call: Call) -> None:
        _mutate(call, "'DeleteOneVersion' option can only be used with mutation queries"
                ).delete_one_version = True

    return option


def new_put(table: bytes | str | None, key: bytes | str | None,
            values: Values | None, *args: Option) -> Mutate:
    """Insert the given family/qualifier values into a row."""
    return Mutate(table, key, values, pb.MutationType.PUT, *args)


def new_del(table: bytes | str | None, key: bytes | str | None,
            values: Values | None, *args: Option) -> Mutate:
    """Delete a row, some of its families, or some of its qualifiers.

    ``None`` values delete the whole row; a family mapped to ``None`` deletes
    the whole family.
    """
    return Mutate(table, key, values, pb.MutationType.DELETE, *args)


def new_app(table: bytes | str | None, key: bytes | str | None,
            values: Values | None, *args: Option) -> Mutate:
    """Append the given values to the existing cells of a row."""
    return Mutate(table, key, values, pb.MutationType.APPEND, *args)


def new_inc(table: bytes | str | None, key: bytes | str | None,
            values: Values | None, *args: Option) -> Mutate:
    """Increment the given cells of a row."""
    return Mutate(table, key, values, pb.MutationType.INCREMENT, *args)


def new_inc_single(table: bytes | str | None, key: bytes | str | None,
                   family: str, qualifier: str, amount: int, *args: Option) -> Mutate:
    """Increment one cell by ``amount``."""
    encoded = struct.pack(">Q", amount & _MASK64)
    return new_inc(table, key, {family: {qualifier: encoded}}, *args)