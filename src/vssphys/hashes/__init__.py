"""
Hash abstraction layer: fixed-width hash functions, the 32-to-16 fold, and
incremental reset/accumulate/finalize states.

Components:
  - functions: Hash16, Hash32, Folded32To16
  - algorithms: FunctionHashState, Xor32To16Algorithm
  - catalog: crcmod-backed CRC definitions
"""

from .functions import (
    HashFunction,
    Hash16,
    Hash32,
    Folded32To16,
    fold32to16,
    IncompatibleHashWidthError,
)
from .algorithms import (
    HashState,
    FunctionHashState,
    Xor32To16Algorithm,
    HashStateError,
)
from .catalog import (
    hash_function,
    new_algorithm,
    provider,
    vss_crc16,
    check_values,
)

__all__ = [
    # Functions
    "HashFunction",
    "Hash16",
    "Hash32",
    "Folded32To16",
    "fold32to16",
    "IncompatibleHashWidthError",

    # Incremental states
    "HashState",
    "FunctionHashState",
    "Xor32To16Algorithm",
    "HashStateError",

    # Catalog
    "hash_function",
    "new_algorithm",
    "provider",
    "vss_crc16",
    "check_values",
]
