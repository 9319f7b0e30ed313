"""Conditional put: apply a Put only if a cell holds an expected value."""

from typing import Any

from hbaserpc.call import OptionError
from hbaserpc.messages import Comparator, CompareType, Condition, MutateRequest, MutationType
from hbaserpc.mutate import Mutate

BINARY_COMPARATOR_NAME = "org.apache.hadoop.hbase.filter.BinaryComparator"


def _varint(n: int) -> bytes:
    out = bytearray()
    while True:
        low = n & 0x7F
        n >>= 7
        if n:
            out.append(low | 0x80)
        else:
            out.append(low)
            return bytes(out)


def _length_delimited(field_number: int, payload: bytes) -> bytes:
    return _varint((field_number << 3) | 2) + _varint(len(payload)) + payload


def _binary_comparator(expected_value: bytes) -> Comparator:
    """A comparator message matching cells whose value equals expected_value."""
    comparable = _length_delimited(1, bytes(expected_value))
    serialized = _length_delimited(1, comparable)
    return Comparator(name=BINARY_COMPARATOR_NAME, serialized_comparator=serialized)


class CheckAndPut:
    """A Put applied only if family:qualifier of its row equals an expected value."""

    def __init__(self, put: Mutate, family: str, qualifier: str,
                 expected_value: bytes) -> None:
        if put.mutation_type is not MutationType.PUT:
            raise OptionError("'CheckAndPut' only takes 'Put' request")
        self.put = put
        self.family = family.encode()
        self.qualifier = qualifier.encode()
        self.comparator = _binary_comparator(expected_value)
        # The multi response carries no "processed" flag, so never batch.
        put.skip_batch = True

    def __getattr__(self, name: str) -> Any:
        return getattr(self.put, name)

    @property
    def region(self) -> Any:
        """Region of the underlying put."""
        return self.put.region

    @region.setter
    def region(self, value: Any) -> None:
        self.put.region = value

    def to_proto(self) -> MutateRequest:
        """Build the MutateRequest of the put with its condition attached."""
        request = self.put.to_proto()
        request.condition = Condition(
            row=self.put.key,
            family=self.family,
            qualifier=self.qualifier,
            compare_type=CompareType.EQUAL,
            comparator=self.comparator,
        )
        return request

    def cell_blocks_enabled(self) -> bool:
        """Conditional puts are not sent with cell blocks."""
        return False