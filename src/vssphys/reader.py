"""
Structured Buffer Reader

Sequential, bounds-checked decoding of VSS physical data types from an
in-memory byte region.

Region invariant:
  0 <= offset <= limit <= len(data)
  remaining = limit - offset, never negative

Consuming reads check the whole field first and either advance the cursor
by exactly the field size or raise EndOfBufferError with the cursor
untouched. Diagnostic formatting clamps to the region and never raises.

Multi-byte integers are little-endian: the unsigned value is composed from
its bytes first, then its bit pattern is reinterpreted as signed.
"""

import codecs
import logging
from datetime import datetime, timedelta, timezone

from .core.hashing import blake3_hash
from .core.registry import param_registry
from .hashes.catalog import vss_crc16
from .hashes.functions import IncompatibleHashWidthError

logger = logging.getLogger(__name__)

_PARAMS = param_registry()

EPOCH = datetime.fromisoformat(_PARAMS["epoch"])
HEX_BYTE_FORMAT = _PARAMS["hex_byte_format"]
FIELD_BYTEORDER = _PARAMS["field_byteorder"]
DEFAULT_ENCODING = _PARAMS["default_encoding"]


def _compose_unsigned(raw: bytes, byteorder: str) -> int:
    """
    Build the unsigned integer stored in raw.

    "little": raw[0] | (raw[1] << 8) | ...; "big" reverses the byte order.

    Raises:
        ValueError: If byteorder is unknown.
    """
    if byteorder == "big":
        raw = raw[::-1]
    elif byteorder != "little":
        raise ValueError(f"Unknown byte order: {byteorder!r}")
    value = 0
    for i, b in enumerate(raw):
        value |= b << (8 * i)
    return value


def _to_signed(value: int, bits: int) -> int:
    """Reinterpret an unsigned bit pattern of the given width as signed."""
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


def epoch_to_datetime(
    seconds: int,
    convention: str = _PARAMS["timestamp_convention"]
) -> datetime:
    """
    Convert a stored timestamp (seconds since 1970-01-01T00:00:00) to a datetime.

    Conventions:
      - "local": naive wall-clock datetime, epoch + seconds, no zone conversion
      - "utc":   timezone-aware UTC datetime

    Raises:
        ValueError: If convention is unknown.
    """
    if convention == "local":
        return EPOCH + timedelta(seconds=seconds)
    if convention == "utc":
        return EPOCH.replace(tzinfo=timezone.utc) + timedelta(seconds=seconds)
    raise ValueError(f"Unknown timestamp convention: {convention!r}")


class BufferReader:
    """
    Reads VSS data types from a byte buffer.

    The backing storage is referenced, not copied, and is never mutated.
    Readers produced by extract() share storage, encoding and checksum
    provider with their parent but keep their own offset and limit.

    The crc provider is a 16-bit HashState (default: a fresh one per
    reader tree, built from the registry crc_provider). Its
    reset/accumulate/finalize sequence is not atomic; callers sharing a
    provider across threads must serialize crc16() calls themselves.
    """

    def __init__(
        self,
        encoding: str | None,
        data,
        offset: int = 0,
        limit: int | None = None,
        crc=None
    ):
        """
        Args:
            encoding: Codec name used by read_string(); None selects the
                registry's default_encoding.
            data: bytes, bytearray or memoryview holding the region.
            offset: First unread byte.
            limit: Exclusive end of the region (default: len(data)).
            crc: 16-bit HashState used by crc16() (default: the registry's
                crc_provider).

        Raises:
            InvalidRangeError: Unless 0 <= offset <= limit <= len(data).
            IncompatibleHashWidthError: If crc is not 16 bits wide.
            LookupError: If encoding is not a known codec.
        """
        if encoding is None:
            encoding = DEFAULT_ENCODING
        codecs.lookup(encoding)
        view = memoryview(data).cast("B")
        if limit is None:
            limit = len(view)
        if offset < 0 or offset > limit or limit > len(view):
            raise InvalidRangeError(
                f"Invalid region [{offset}, {limit}) over {len(view)} bytes"
            )
        if crc is None:
            crc = vss_crc16()
        elif crc.bits != 16:
            raise IncompatibleHashWidthError(16, crc.bits)

        self._encoding = encoding
        self._data = view
        self._offset = offset
        self._limit = limit
        self._crc = crc

    @classmethod
    def from_bytes(
        cls,
        data,
        offset: int = 0,
        limit: int | None = None,
        crc=None
    ) -> "BufferReader":
        """Reader over data using the registry's default_encoding."""
        return cls(DEFAULT_ENCODING, data, offset, limit, crc=crc)

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def offset(self) -> int:
        return self._offset

    @offset.setter
    def offset(self, value: int) -> None:
        if value < 0 or value > self._limit:
            raise InvalidRangeError(
                f"Offset {value} outside region [0, {self._limit}]"
            )
        self._offset = value

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def remaining(self) -> int:
        return self._limit - self._offset

    @property
    def crc(self):
        return self._crc

    def __repr__(self) -> str:
        return (
            f"BufferReader(offset={self._offset}, limit={self._limit}, "
            f"remaining={self.remaining})"
        )

    # ─── Checksums ──────────────────────────────────────────────────────

    def checksum16(self) -> int:
        """Additive checksum of [offset, limit), modulo 2**16."""
        return sum(self._data[self._offset:self._limit]) & 0xFFFF

    def crc16(self, count: int | None = None) -> int:
        """
        Folded CRC-32 of the region without advancing the cursor.

        With no count, covers [offset, limit): everything not yet read, not
        everything read so far. With count, covers the next count bytes.

        Raises:
            EndOfBufferError: If count exceeds remaining.
        """
        if count is None:
            count = self.remaining
        else:
            self.check_read(count)
        return self._crc.compute_value(self._data, self._offset, count)

    def fingerprint(self, count: int | None = None) -> str:
        """
        BLAKE3 hex digest over the same span as crc16(count).

        Raises:
            EndOfBufferError: If count exceeds remaining.
        """
        if count is None:
            count = self.remaining
        else:
            self.check_read(count)
        return blake3_hash(self._data, self._offset, self._offset + count)

    # ─── Consuming reads ────────────────────────────────────────────────

    def skip(self, count: int) -> None:
        self.check_read(count)
        self._offset += count

    def read_int16(self) -> int:
        value = _compose_unsigned(self._take(2), FIELD_BYTEORDER)
        return _to_signed(value, 16)

    def read_int32(self) -> int:
        value = _compose_unsigned(self._take(4), FIELD_BYTEORDER)
        return _to_signed(value, 32)

    def read_datetime(self) -> datetime:
        """int32 seconds since the epoch, see epoch_to_datetime()."""
        return epoch_to_datetime(self.read_int32())

    def read_signature(self, length: int) -> str:
        """Read length bytes as length characters, one per byte."""
        text = self._peek(length).decode(_PARAMS["signature_encoding"])
        self._offset += length
        return text

    def read_string(self, field_size: int) -> str:
        """
        Read a fixed-size, NUL-terminated string field.

        The text ends at the first zero byte (or the field end). The cursor
        always advances by field_size; bytes after the terminator are padding.
        Bytes the encoding cannot map decode to U+FFFD.
        """
        raw = self._peek(field_size).split(b"\0", 1)[0]
        text = raw.decode(self._encoding, errors="replace")
        self._offset += field_size
        return text

    def read_byte_string(self, count: int) -> str:
        """Read count bytes rendered as "XX XX ..." for display."""
        self.check_read(count)
        result = self.format_bytes(count)
        self._offset += count
        return result

    def extract(self, count: int) -> "BufferReader":
        """
        Return a reader over the next count bytes and skip past them.

        Raises:
            EndOfBufferError: If count exceeds remaining.
        """
        self.check_read(count)
        start = self._offset
        self._offset += count
        logger.debug("Extracted sub-reader [%d, %d)", start, self._offset)
        return BufferReader(
            self._encoding, self._data, start, self._offset, crc=self._crc
        )

    def get_bytes(self, count: int) -> memoryview:
        """
        Return a read-only view of the next count bytes and skip past them.

        The view aliases the backing storage; it is not a copy.
        """
        self.check_read(count)
        view = self._data[self._offset:self._offset + count].toreadonly()
        self._offset += count
        return view

    # ─── Diagnostics ────────────────────────────────────────────────────

    def format_bytes(self, count: int) -> str:
        """Hex of up to count bytes from offset, clamped to limit. Never raises."""
        format_limit = min(self._limit, self._offset + max(count, 0))
        return "".join(
            HEX_BYTE_FORMAT.format(b)
            for b in self._data[self._offset:format_limit]
        )

    def format_remaining(self) -> str:
        return self.format_bytes(self.remaining)

    def check_read(self, count: int) -> None:
        """
        Raises:
            EndOfBufferError: If count is negative or exceeds remaining.
        """
        if count < 0 or count > self.remaining:
            raise EndOfBufferError(count, self.remaining)

    def _peek(self, count: int) -> bytes:
        self.check_read(count)
        return bytes(self._data[self._offset:self._offset + count])

    def _take(self, count: int) -> bytes:
        raw = self._peek(count)
        self._offset += count
        return raw


class EndOfBufferError(ValueError):
    """Raised when a consuming read needs more bytes than remain in the region."""

    def __init__(self, requested: int, remaining: int):
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f"Attempted read of {requested} bytes with only {remaining} "
            f"bytes remaining in buffer"
        )


class InvalidRangeError(ValueError):
    """Raised when a reader is constructed or positioned outside its backing storage."""
    pass
