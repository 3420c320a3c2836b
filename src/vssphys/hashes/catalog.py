"""
Hash Layer Component: CRC Catalog

Named CRC definitions backed by crcmod. The polynomials themselves are
crcmod's; this module only pins the parameters.

  crc-16            CRC-16/ARC (IBM), reflected, init 0
  crc-ccitt-false   CRC-16/CCITT-FALSE, init 0xFFFF
  crc-32            CRC-32/IEEE, init and xorout 0xFFFFFFFF
  vss-crc32         IEEE polynomial, reflected, init 0, xorout 0

The container format's 16-bit checksum is vss-crc32 folded to 16 bits.
"""

import logging

import crcmod
import crcmod.predefined

from .functions import (
    Hash16,
    Hash32,
    HashFunction,
    Folded32To16,
    IncompatibleHashWidthError,
)
from .algorithms import FunctionHashState, HashState, Xor32To16Algorithm
from ..core.registry import param_registry

logger = logging.getLogger(__name__)


CHECK_DATA = b"123456789"

# crcmod's initCrc is the register seed XORed with xorOut
_VSS_CRC32 = {"poly": 0x104C11DB7, "initCrc": 0x0, "rev": True, "xorOut": 0x0}

_PREDEFINED = {
    "crc-16": 16,
    "crc-ccitt-false": 16,
    "crc-32": 32,
}

NAMES = tuple(_PREDEFINED) + ("vss-crc32",)


def hash_function(name: str) -> HashFunction:
    """
    Return the stateless hash function registered under name.

    Raises:
        KeyError: If name is not in the catalog.
    """
    if name == "vss-crc32":
        return Hash32(crcmod.mkCrcFun(**_VSS_CRC32), name)
    if name not in _PREDEFINED:
        raise KeyError(f"Unknown CRC: {name!r}. Known: {', '.join(NAMES)}")
    func = crcmod.predefined.mkPredefinedCrcFun(name)
    if _PREDEFINED[name] == 16:
        return Hash16(func, name)
    return Hash32(func, name)


def new_algorithm(name: str):
    """
    Return a fresh hashlib-style crcmod.Crc for name.

    Raises:
        KeyError: If name is not in the catalog.
    """
    if name == "vss-crc32":
        return crcmod.Crc(**_VSS_CRC32)
    if name not in _PREDEFINED:
        raise KeyError(f"Unknown CRC: {name!r}. Known: {', '.join(NAMES)}")
    return crcmod.predefined.Crc(name)


def provider(name: str) -> HashState:
    """
    Return a fresh 16-bit HashState for a provider name.

    "<crc>/fold16" folds a 32-bit catalog CRC to 16 bits; a bare name must
    be a 16-bit catalog CRC.

    Raises:
        KeyError: If the CRC is not in the catalog.
        IncompatibleHashWidthError: If the result would not be 16 bits wide.
    """
    logger.debug("Constructing %s checksum provider", name)
    base, _, suffix = name.partition("/")
    if suffix == "fold16":
        return Xor32To16Algorithm(new_algorithm(base))
    if suffix:
        raise KeyError(f"Unknown provider suffix: {name!r}")
    function = hash_function(base)
    if function.bits != 16:
        raise IncompatibleHashWidthError(16, function.bits)
    return FunctionHashState(function)


def vss_crc16() -> HashState:
    """Checksum provider for BufferReader.crc16(), per registry crc_provider."""
    return provider(param_registry()["crc_provider"])


def check_values(data: bytes = CHECK_DATA) -> dict[str, int]:
    """
    Compute every catalog entry over data, plus the folded 32-bit entries.

    Returns:
        dict[str, int]: name -> value, in catalog order; folded entries are
        named "<name>/fold16".
    """
    values = {}
    for name in NAMES:
        values[name] = hash_function(name)(data)
    for name in NAMES:
        function = hash_function(name)
        if function.bits == 32:
            values[f"{name}/fold16"] = Folded32To16(function)(data)
    return values
