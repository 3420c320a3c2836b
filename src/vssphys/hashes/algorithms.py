"""
Hash Layer Component: Incremental Hash States

Three-phase protocol shared by every checksum the reader uses:

  reset()                          clear the result
  accumulate(data, start, count)   hash data[start:start+count]
  finalize() -> bytes              serialize the result

State machine:
  fresh/reset --accumulate--> accumulated --finalize--> finalized
  finalize() requires at least one accumulate().
  accumulate() after finalize() requires reset().

finalize() emits little-endian bytes (2 for 16-bit, 4 for 32-bit), the
byte order of the container format (registry key "digest_byteorder").

States are per-computation. Do not share one across threads without a lock.
"""

from .functions import (
    HashFunction,
    IncompatibleHashWidthError,
    fold32to16,
    resolve_span,
)
from ..core.registry import param_registry


DIGEST_BYTEORDER = param_registry()["digest_byteorder"]

_FRESH = "fresh"
_ACCUMULATED = "accumulated"
_FINALIZED = "finalized"


class HashState:
    """
    Base class for incremental hash states.

    Subclasses implement _reset(), _accumulate(data, start, stop) and
    _result() -> int; this class enforces the state machine and the
    digest byte order.
    """

    bits = 0
    name = "hash"

    def __init__(self):
        self._phase = _FRESH

    @property
    def digest_size(self) -> int:
        return self.bits // 8

    def reset(self) -> None:
        self._reset()
        self._phase = _FRESH

    def accumulate(self, data, start: int = 0, count: int | None = None) -> None:
        """
        Hash data[start:start+count]; count defaults to the rest of data.

        Raises:
            HashStateError: If called after finalize() without reset().
            ValueError: If the span falls outside data.
        """
        if self._phase == _FINALIZED:
            raise HashStateError(
                f"{self.name}: accumulate() after finalize() requires reset()"
            )
        stop = None if count is None else start + count
        start, stop = resolve_span(data, start, stop)
        self._accumulate(data, start, stop)
        self._phase = _ACCUMULATED

    def finalize(self) -> bytes:
        """
        Return the result as little-endian bytes.

        Raises:
            HashStateError: If nothing has been accumulated since reset().
        """
        if self._phase == _FRESH:
            raise HashStateError(
                f"{self.name}: finalize() requires at least one accumulate()"
            )
        self._phase = _FINALIZED
        return self._result().to_bytes(self.digest_size, DIGEST_BYTEORDER)

    def compute_hash(self, data, start: int = 0, count: int | None = None) -> bytes:
        """Run reset, accumulate and finalize over one span."""
        self.reset()
        self.accumulate(data, start, count)
        return self.finalize()

    def compute_value(self, data, start: int = 0, count: int | None = None) -> int:
        """compute_hash() decoded back to an unsigned integer."""
        return int.from_bytes(self.compute_hash(data, start, count), DIGEST_BYTEORDER)

    def _reset(self) -> None:
        raise NotImplementedError

    def _accumulate(self, data, start: int, stop: int) -> None:
        raise NotImplementedError

    def _result(self) -> int:
        raise NotImplementedError


class FunctionHashState(HashState):
    """
    Adapts a stateless HashFunction (Hash16, Hash32 or Folded32To16).

    The wrapped function recomputes over the full span, so accumulate() is
    once per session: call reset() or finalize() before accumulating again.
    """

    def __init__(self, hash_function: HashFunction):
        super().__init__()
        self.hash_function = hash_function
        self.bits = hash_function.bits
        self.name = getattr(hash_function, "name", type(hash_function).__name__)
        self._value = 0

    def _reset(self) -> None:
        self._value = 0

    def _accumulate(self, data, start: int, stop: int) -> None:
        if self._phase == _ACCUMULATED:
            raise HashStateError(
                f"{self.name}: accumulate() may only be called once per session"
            )
        self._value = self.hash_function.compute(data, start, stop)

    def _result(self) -> int:
        return self._value


class Xor32To16Algorithm(HashState):
    """
    Folds the 32-bit digest of an already-incremental algorithm to 16 bits.

    The wrapped algorithm follows the hashlib object protocol: update(),
    digest(), digest_size and copy(). Its digest is read in
    digest_byteorder (crcmod and hashlib digests are big-endian).

    Raises:
        IncompatibleHashWidthError: If the wrapped digest is wider than 32 bits.
    """

    bits = 16

    def __init__(self, algorithm, digest_byteorder: str = "big"):
        super().__init__()
        width = algorithm.digest_size * 8
        if width > 32:
            raise IncompatibleHashWidthError(32, width)
        self.digest_byteorder = digest_byteorder
        self.name = f"{getattr(algorithm, 'name', 'hash32')}/fold16"
        self._initial = algorithm.copy()
        self._algorithm = algorithm.copy()

    def _reset(self) -> None:
        self._algorithm = self._initial.copy()

    def _accumulate(self, data, start: int, stop: int) -> None:
        self._algorithm.update(bytes(memoryview(data)[start:stop]))

    def _result(self) -> int:
        value = int.from_bytes(self._algorithm.digest(), self.digest_byteorder)
        return fold32to16(value)


class HashStateError(RuntimeError):
    """Raised when the reset/accumulate/finalize protocol is violated."""
    pass
