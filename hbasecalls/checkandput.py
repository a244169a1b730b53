"""Conditional put: apply a put only if a cell holds an expected value."""

from __future__ import annotations

from . import messages as pb
from .mutate import Mutate

_BINARY_COMPARATOR = "org.apache.hadoop.hbase.filter.BinaryComparator"


def _encode(value: bytes | str) -> bytes:
    return value.encode() if isinstance(value, str) else bytes(value)


def _varint(number: int) -> bytes:
    out = bytearray()
    while True:
        low = number & 0x7F
        number >>= 7
        if number:
            out.append(low | 0x80)
        else:
            out.append(low)
            return bytes(out)


def _length_delimited(field_number: int, payload: bytes) -> bytes:
    return bytes([field_number << 3 | 2]) + _varint(len(payload)) + payload


def _binary_comparator(expected: bytes | None) -> pb.Comparator:
    comparable = b"" if expected is None else _length_delimited(1, bytes(expected))
    return pb.Comparator(name=_BINARY_COMPARATOR,
                         serialized_comparator=_length_delimited(1, comparable))


class CheckAndPut(Mutate):
    """Apply ``put`` if family:qualifier of its row equals ``expected_value``."""

    def __init__(self, put: Mutate, family: str, qualifier: str,
                 expected_value: bytes | None) -> None:
        if put.mutation_type is not pb.MutationType.PUT:
            raise ValueError("'CheckAndPut' only takes 'Put' request")
        comparator = _binary_comparator(expected_value)
        # The multi response carries no "processed" flag, so this is never batched.
        put.skip_batch = True
        vars(self).update(vars(put))
        self.family = _encode(family)
        self.qualifier = _encode(qualifier)
        self.comparator = comparator

    def to_proto(self) -> pb.MutateRequest:
        request, _ = self._build(False)
        request.condition = pb.Condition(
            row=self.key,
            family=self.family,
            qualifier=self.qualifier,
            compare_type=pb.CompareType.EQUAL,
            comparator=self.comparator,
        )
        return request

    def cell_blocks_enabled(self) -> bool:
        return False