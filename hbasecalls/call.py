"""Base RPC call, call options and cell block decoding."""

from __future__ import annotations

import abc
import queue
import struct
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from .messages import Cell, CellType, RegionSpecifier, RegionSpecifierType
from .messages import Result as PBResult

_MASK32 = 0xFFFFFFFF


class OptionError(ValueError):
    """An option was rejected by the call it was applied to."""


class CellBlockError(ValueError):
    """A cell block could not be decoded."""


@dataclass
class RPCResult:
    """The response message of a call, or the error it failed with."""

    msg: Any = None
    error: BaseException | None = None


def _as_bytes(value: bytes | str | None) -> bytes:
    if value is None:
        return b""
    if isinstance(value, str):
        return value.encode()
    return bytes(value)


class Call(abc.ABC):
    """An RPC call to HBase."""

    batchable = False
    skip_batch = False

    def __init__(self, table: bytes | str | None = b"", key: bytes | str | None = b"",
                 ctx: Any = None) -> None:
        self.table = _as_bytes(table)
        self.key = _as_bytes(key)
        self.ctx = ctx
        self.options: list[Callable[[Call], None]] = []
        self.region: Any = None
        self.result_queue: queue.Queue[RPCResult] = queue.Queue(maxsize=1)

    @abc.abstractmethod
    def name(self) -> str:
        """Name of the RPC method."""

    def description(self) -> str:
        """Description used for tracing and metrics."""
        return self.name()

    @abc.abstractmethod
    def to_proto(self) -> Any:
        """Build the request message."""

    @abc.abstractmethod
    def new_response(self) -> Any:
        """Create an empty message to hold the response."""

    def region_specifier(self) -> RegionSpecifier:
        """Identify the region this call is sent to."""
        region = self.region
        if region is None:
            raise ValueError("call has no region set")
        custom = getattr(region, "region_specifier", None)
        if callable(custom):
            return custom()
        return RegionSpecifier(type=RegionSpecifierType.REGION_NAME, value=region.name)

    def apply_options(self, options: Iterable[Callable[[Call], None]]) -> None:
        """Record the options and apply them in order; the first failure raises."""
        self.options = list(options)
        for option in self.options:
            option(self)


def skip_batch() -> Callable[[Call], None]:
    """Option that sends a batchable call right away instead of batching it."""

    def option(call: Call) -> None:
        if not getattr(call, "batchable", False):
            raise OptionError("'SkipBatch' option only works with Get and Mutate requests")
        call.skip_batch = True

    return option


def can_batch(call: Call) -> bool:
    """Whether the call may be included in a multi request."""
    return bool(getattr(call, "batchable", False)) and not call.skip_batch


def _cell_type(value: int) -> CellType | int:
    try:
        return CellType(value)
    except ValueError:
        return value


def cell_from_cell_block(data: bytes | memoryview) -> tuple[Cell, int]:
    """Decode one cell from the start of a cell block; return it and bytes read."""
    view = memoryview(data)
    size = len(view)
    if size < 4:
        raise CellBlockError(f"buffer is too small: expected 4, got {size}")
    (kv_len,) = struct.unpack_from(">I", view, 0)
    if size < kv_len + 4:
        raise CellBlockError(f"buffer is too small: expected {kv_len + 4}, got {size}")

    pos = 4

    def take(count: int) -> memoryview:
        nonlocal pos
        if pos + count > size:
            raise CellBlockError(f"malformed cell block: need {pos + count} bytes, got {size}")
        chunk = view[pos:pos + count]
        pos += count
        return chunk

    key_len, value_len, row_len = struct.unpack(">IIH", take(10))
    row = bytes(take(row_len))
    (family_len,) = take(1)
    family = bytes(take(family_len))

    qualifier_len = (key_len - row_len - family_len - 2 - 1 - 8 - 1) & _MASK32
    total = (4 + 4 + 2 + row_len + 1 + family_len + qualifier_len + 8 + 1 + value_len) & _MASK32
    if total != kv_len:
        raise CellBlockError(
            f"HBase has lied about KeyValue length: expected {kv_len}, got {total}")

    qualifier = bytes(take(qualifier_len))
    (timestamp,) = struct.unpack(">Q", take(8))
    (cell_type,) = take(1)
    value = bytes(take(value_len))

    cell = Cell(
        row=row,
        family=family,
        qualifier=qualifier,
        timestamp=timestamp,
        value=value,
        cell_type=_cell_type(cell_type),
    )
    return cell, kv_len + 4


def deserialize_cell_blocks(data: bytes | memoryview, count: int) -> tuple[list[Cell], int]:
    """Decode ``count`` consecutive cells; return them and the bytes read."""
    view = memoryview(data)
    cells: list[Cell] = []
    read = 0
    for _ in range(count):
        cell, length = cell_from_cell_block(view[read:])
        cells.append(cell)
        read += length
    return cells, read


@dataclass
class Result:
    """Cells of a row together with details about the response."""

    cells: list[Cell] = field(default_factory=list)
    stale: bool = False
    partial: bool = False
    exists: bool | None = None

    @classmethod
    def from_proto(cls, pbr: PBResult | None) -> Result:
        """Build a result from a result message, sharing its cell list."""
        if pbr is None:
            return cls()
        return cls(
            cells=pbr.cells,
            stale=bool(pbr.stale),
            partial=bool(pbr.partial),
            exists=pbr.exists,
        )

    def __str__(self) -> str:
        return (f"cells:{self.cells} stale:{self.stale} "
                f"partial:{self.partial} exists:{self.exists}")


def to_local_result(pbr: PBResult | None) -> Result:
    """Convert a result message into a :class:`Result`."""
    return Result.from_proto(pbr)