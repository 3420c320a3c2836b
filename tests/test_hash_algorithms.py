"""
Incremental Hash State Tests - reset / accumulate / finalize

Verifies:
  - finalize() emits little-endian digests of the declared width
  - state machine violations raise HashStateError
  - Xor32To16Algorithm folds an incremental 32-bit algorithm
  - wider-than-32-bit algorithms are refused up front
"""

import hashlib
import sys
import zlib
from pathlib import Path

import blake3
import crcmod.predefined
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from vssphys.hashes import (
    Hash32,
    Folded32To16,
    FunctionHashState,
    Xor32To16Algorithm,
    HashStateError,
    IncompatibleHashWidthError,
    hash_function,
)


CHECK = b"123456789"


def crc32_ieee(data: bytes) -> int:
    return zlib.crc32(data) & 0xFFFFFFFF


# ═══════════════════════════════════════════════════════════════════════
# FunctionHashState
# ═══════════════════════════════════════════════════════════════════════

def test_function_state_32_bit_digest_is_little_endian():
    state = FunctionHashState(Hash32(crc32_ieee, "crc-32"))

    assert state.bits == 32
    assert state.digest_size == 4
    assert state.compute_hash(CHECK) == bytes([0x26, 0x39, 0xF4, 0xCB])
    assert state.compute_value(CHECK) == 0xCBF43926


def test_function_state_folded_digest():
    state = FunctionHashState(Folded32To16(Hash32(crc32_ieee)))

    assert state.digest_size == 2
    assert state.compute_hash(CHECK) == bytes([0xD2, 0xF2])


def test_function_state_protocol():
    """reset -> accumulate(start, count) -> finalize."""
    state = FunctionHashState(Hash32(crc32_ieee))
    padded = b"xx" + CHECK + b"yy"

    state.reset()
    state.accumulate(padded, 2, 9)
    assert state.finalize() == (0xCBF43926).to_bytes(4, "little")


def test_finalize_before_accumulate_fails():
    state = FunctionHashState(Hash32(crc32_ieee))

    with pytest.raises(HashStateError):
        state.finalize()

    state.reset()
    with pytest.raises(HashStateError):
        state.finalize()


def test_accumulate_after_finalize_requires_reset():
    state = FunctionHashState(Hash32(crc32_ieee))
    state.accumulate(CHECK)
    state.finalize()

    with pytest.raises(HashStateError):
        state.accumulate(CHECK)

    state.reset()
    state.accumulate(b"")
    assert state.finalize() == bytes(4)


def test_function_state_accumulate_once_per_session():
    state = FunctionHashState(Hash32(crc32_ieee))
    state.accumulate(CHECK, 0, 4)

    with pytest.raises(HashStateError):
        state.accumulate(CHECK, 4, 5)


def test_accumulate_rejects_span_past_end():
    state = FunctionHashState(Hash32(crc32_ieee))

    with pytest.raises(ValueError):
        state.accumulate(CHECK, 5, 10)


# ═══════════════════════════════════════════════════════════════════════
# Xor32To16Algorithm
# ═══════════════════════════════════════════════════════════════════════

def test_xor_algorithm_over_crcmod():
    algo = Xor32To16Algorithm(crcmod.predefined.Crc("crc-32"))

    assert algo.bits == 16
    assert algo.compute_value(CHECK) == 0xF2D2
    assert algo.compute_hash(CHECK) == bytes([0xD2, 0xF2])


def test_xor_algorithm_streams():
    """Several accumulate() calls equal one call over the concatenation."""
    algo = Xor32To16Algorithm(crcmod.predefined.Crc("crc-32"))

    algo.reset()
    algo.accumulate(CHECK, 0, 4)
    algo.accumulate(CHECK, 4)
    streamed = algo.finalize()

    assert streamed == algo.compute_hash(CHECK)


def test_xor_algorithm_reset_restores_initial_state():
    algo = Xor32To16Algorithm(crcmod.predefined.Crc("crc-32"))

    first = algo.compute_value(b"some other bytes")
    second = algo.compute_value(CHECK)
    assert second == 0xF2D2
    assert first != second


def test_xor_algorithm_does_not_touch_caller_instance():
    crc = crcmod.predefined.Crc("crc-32")
    algo = Xor32To16Algorithm(crc)
    algo.compute_value(CHECK)

    assert crc.crcValue == crcmod.predefined.Crc("crc-32").crcValue


def test_xor_algorithm_little_endian_source():
    """digest_byteorder selects how the wrapped digest is read."""

    class LittleEndianCrc32:
        digest_size = 4

        def __init__(self):
            self.data = b""

        def update(self, data):
            self.data += data

        def digest(self):
            return crc32_ieee(self.data).to_bytes(4, "little")

        def copy(self):
            clone = LittleEndianCrc32()
            clone.data = self.data
            return clone

    algo = Xor32To16Algorithm(LittleEndianCrc32(), digest_byteorder="little")
    assert algo.compute_value(CHECK) == 0xF2D2


@pytest.mark.parametrize("factory", [hashlib.sha256, hashlib.md5, blake3.blake3])
def test_xor_algorithm_rejects_wide_digests(factory):
    with pytest.raises(IncompatibleHashWidthError) as excinfo:
        Xor32To16Algorithm(factory())

    assert excinfo.value.actual_bits > 32
    print(f"✓ {factory.__name__} refused")


def test_catalog_function_state_matches_crcmod_algorithm():
    state = FunctionHashState(Folded32To16(hash_function("vss-crc32")))
    algo = Xor32To16Algorithm(crcmod.Crc(0x104C11DB7, initCrc=0, rev=True, xorOut=0))
    data = bytes(range(256)) * 3

    assert state.compute_hash(data) == algo.compute_hash(data)
