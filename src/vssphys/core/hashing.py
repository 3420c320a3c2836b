"""
Core Component: BLAKE3 Fingerprints

Content fingerprints for byte spans, used to correlate corrupt or
suspicious records across diagnostic logs.

Not part of the on-disk format; the container's own checksums live in
vssphys.hashes.
"""

import blake3


def blake3_hash(data, offset: int = 0, limit: int | None = None) -> str:
    """
    Return hex-encoded BLAKE3 digest of data[offset:limit].

    The span is hashed through a memoryview, without copying.

    Args:
        data: bytes, bytearray or memoryview.
        offset: First byte of the span.
        limit: Exclusive end of the span (default: len(data)).

    Returns:
        str: Hexadecimal digest (64 characters for BLAKE3-256).

    Raises:
        ValueError: If the span falls outside data.

    Example:
        >>> blake3_hash(b"")
        'af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262'
    """
    view = memoryview(data).cast("B")
    if limit is None:
        limit = len(view)
    if offset < 0 or offset > limit or limit > len(view):
        raise ValueError(f"Invalid span [{offset}, {limit}) over {len(view)} bytes")
    return blake3.blake3(view[offset:limit]).hexdigest()
