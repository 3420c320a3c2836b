"""
Hash Layer Component: Fixed-Width Hash Functions

One capability, HashFunction, parameterized by output width, with a closed
set of variants selected at construction time:

  - Hash16(func):          16-bit function over a byte span
  - Hash32(func):          32-bit function over a byte span
  - Folded32To16(hash32):  16-bit result from a 32-bit function,
                           fold(v) = (v ^ (v >> 16)) & 0xFFFF

Wrapped callables take a bytes object and return an int. They are the
opaque polynomial implementations (see vssphys.hashes.catalog).

The fold keeps well-tested 32-bit polynomials while the container format
only stores a 2-byte checksum field. It gives up collision resistance for
that footprint.
"""

from typing import Callable


def fold32to16(value: int) -> int:
    """
    XOR the upper and lower 16-bit halves of a 32-bit value.

    Example:
        >>> hex(fold32to16(0xDEADBEEF))
        '0x6042'
    """
    value &= 0xFFFFFFFF
    return (value ^ (value >> 16)) & 0xFFFF


def resolve_span(data, offset: int = 0, limit: int | None = None) -> tuple[int, int]:
    """
    Validate [offset, limit) against data and return it with limit filled in.

    Raises:
        ValueError: If the span is negative, inverted or runs past the end.
    """
    size = len(data)
    if limit is None:
        limit = size
    if offset < 0 or offset > limit or limit > size:
        raise ValueError(
            f"Invalid span [{offset}, {limit}) over {size} bytes"
        )
    return offset, limit


class HashFunction:
    """
    Stateless fixed-width hash over a byte span.

    Instances hold no per-call state and may be shared freely.
    """

    bits = 0

    @property
    def mask(self) -> int:
        return (1 << self.bits) - 1

    def compute(self, data, offset: int = 0, limit: int | None = None) -> int:
        """
        Hash data[offset:limit] (limit exclusive, defaults to len(data)).

        A zero-length span yields the wrapped algorithm's initial value.
        """
        offset, limit = resolve_span(data, offset, limit)
        return self._compute(bytes(memoryview(data)[offset:limit])) & self.mask

    def _compute(self, span: bytes) -> int:
        raise NotImplementedError

    def __call__(self, data) -> int:
        return self.compute(data)


class Hash16(HashFunction):
    """16-bit hash function."""

    bits = 16

    def __init__(self, func: Callable[[bytes], int], name: str = "hash16"):
        self.func = func
        self.name = name

    def _compute(self, span: bytes) -> int:
        return self.func(span)

    def __repr__(self) -> str:
        return f"Hash16({self.name!r})"


class Hash32(HashFunction):
    """32-bit hash function."""

    bits = 32

    def __init__(self, func: Callable[[bytes], int], name: str = "hash32"):
        self.func = func
        self.name = name

    def _compute(self, span: bytes) -> int:
        return self.func(span)

    def __repr__(self) -> str:
        return f"Hash32({self.name!r})"


class Folded32To16(HashFunction):
    """
    16-bit hash function based on XORing the upper and lower words of a
    32-bit hash.

    Raises:
        IncompatibleHashWidthError: If hash32 is not 32 bits wide.
    """

    bits = 16

    def __init__(self, hash32: HashFunction):
        if getattr(hash32, "bits", None) != 32:
            raise IncompatibleHashWidthError(32, getattr(hash32, "bits", None))
        self.hash32 = hash32
        self.name = f"{getattr(hash32, 'name', 'hash32')}/fold16"

    def compute(self, data, offset: int = 0, limit: int | None = None) -> int:
        return fold32to16(self.hash32.compute(data, offset, limit))

    def __repr__(self) -> str:
        return f"Folded32To16({self.hash32!r})"


class IncompatibleHashWidthError(ValueError):
    """Raised when a hash of the wrong width is given to a width-specific adapter."""

    def __init__(self, expected_bits: int, actual_bits):
        self.expected_bits = expected_bits
        self.actual_bits = actual_bits
        super().__init__(
            f"Incompatible hash width: expected {expected_bits} bits, "
            f"got {actual_bits}"
        )
