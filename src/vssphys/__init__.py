"""
VSS Physical Decoder

Bounds-checked sequential decoding of the Visual SourceSafe physical
container format, with pluggable 16/32-bit checksums.
"""

__version__ = "0.1.0"

from .reader import (
    BufferReader,
    EndOfBufferError,
    InvalidRangeError,
    epoch_to_datetime,
)
from .hashes import (
    Hash16,
    Hash32,
    Folded32To16,
    fold32to16,
    FunctionHashState,
    Xor32To16Algorithm,
    IncompatibleHashWidthError,
    HashStateError,
    vss_crc16,
)

__all__ = [
    # Reader
    "BufferReader",
    "EndOfBufferError",
    "InvalidRangeError",
    "epoch_to_datetime",

    # Hash layer
    "Hash16",
    "Hash32",
    "Folded32To16",
    "fold32to16",
    "FunctionHashState",
    "Xor32To16Algorithm",
    "IncompatibleHashWidthError",
    "HashStateError",
    "vss_crc16",
]
