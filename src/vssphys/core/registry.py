"""
Core Component: Parameter Registry

Frozen constants for decoding the VSS physical container format.
Byte orders, text encodings, the timestamp epoch and the checksum provider
are all pinned here so that no decode depends on platform defaults.

No environment variables, no persisted state.
"""


def param_registry() -> dict:
    """
    Returns a frozen mapping of all constants used by the reader and hash layer.

    Keys and values are JSON-serializable primitives.

    Returns:
        dict: Parameter mapping with exact keys and values.

    Raises:
        RegistryError: If any required key is missing (internal consistency check).
    """
    registry = {
        # Multi-byte integer fields are little-endian on disk
        "field_byteorder": "little",

        # HashState.finalize() output order (16-bit: 2 bytes, 32-bit: 4 bytes)
        "digest_byteorder": "little",

        # Fixed-size NUL-terminated string fields
        "default_encoding": "cp1252",

        # Signatures map one byte to one character
        "signature_encoding": "latin-1",

        # Timestamps: int32 seconds since this wall-clock instant
        "epoch": "1970-01-01T00:00:00",
        "timestamp_convention": "local",  # "local" (naive) or "utc" (aware)

        # Checksum used by BufferReader.crc16()
        "crc_provider": "vss-crc32/fold16",

        # Diagnostic hex rendering, one entry per byte
        "hex_byte_format": "{:02X} ",
    }

    required_keys = {
        "field_byteorder", "digest_byteorder", "default_encoding",
        "signature_encoding", "epoch", "timestamp_convention",
        "crc_provider", "hex_byte_format"
    }

    actual_keys = set(registry.keys())
    if actual_keys != required_keys:
        missing = required_keys - actual_keys
        extra = actual_keys - required_keys
        raise RegistryError(
            f"param_registry() key mismatch. Missing: {missing}, Extra: {extra}"
        )

    return registry


class RegistryError(Exception):
    """Raised when param_registry() has missing or unexpected keys."""
    pass
