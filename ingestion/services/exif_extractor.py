"""
EXIF Geotag Extractor.

Implements MetadataExtractorInterface on top of piexif. The container is
walked segment by segment so that only the EXIF block is buffered:

- JPEG: markers are skipped until the APP1 "Exif" segment (before SOS)
- WebP: RIFF chunks are skipped until the "EXIF" chunk
- TIFF: the whole stream is read, IFD offsets are absolute
"""

import io
import struct
from typing import BinaryIO

import piexif

from ingestion.interfaces.errors import ExtractionError
from ingestion.interfaces.extraction import (
    GeoPoint,
    MetadataExtractorInterface,
    coordinates_in_range,
)
from logging_config import get_logger

logger = get_logger(__name__)

EXIF_HEADER = b"Exif\x00\x00"

_JPEG_SOI = b"\xff\xd8"
_JPEG_APP1 = 0xE1
_JPEG_SOS = 0xDA
_JPEG_EOI = 0xD9
# Markers that carry no length field.
_JPEG_STANDALONE = {0x01} | set(range(0xD0, 0xD8))

_TIFF_BYTE_ORDERS = (b"II*\x00", b"MM\x00*")

_SKIP_CHUNK = 64 * 1024


def _is_seekable(stream) -> bool:
    seekable = getattr(stream, "seekable", None)
    return bool(seekable is not None and seekable())


def _read_upto(stream: BinaryIO, size: int) -> bytes:
    """Reads until `size` bytes arrive or the stream is exhausted."""
    data = b""
    while len(data) < size:
        chunk = stream.read(size - len(data))
        if not chunk:
            break
        data += chunk
    return data


def _read_all(stream: BinaryIO) -> bytes:
    chunks = []
    while True:
        chunk = stream.read(_SKIP_CHUNK)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = _read_upto(stream, size)
    if len(data) < size:
        raise ExtractionError(
            "Stream ended before the metadata segment was found",
            reason="missing_metadata",
        )
    return data


def _skip(stream: BinaryIO, size: int) -> None:
    """Advances past `size` bytes without keeping them."""
    if size <= 0:
        return
    if _is_seekable(stream):
        stream.seek(size, io.SEEK_CUR)
        return
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(remaining, _SKIP_CHUNK))
        if not chunk:
            raise ExtractionError(
                "Stream ended inside a segment", reason="missing_metadata"
            )
        remaining -= len(chunk)


def _jpeg_exif_segment(stream: BinaryIO) -> bytes:
    """Returns the APP1 payload (starting with the Exif header) of a JPEG stream."""
    while True:
        if _read_exact(stream, 1) != b"\xff":
            raise ExtractionError(
                "Corrupt JPEG: expected a segment marker", reason="malformed_metadata"
            )
        marker = _read_exact(stream, 1)[0]
        while marker == 0xFF:  # fill bytes
            marker = _read_exact(stream, 1)[0]

        if marker in (_JPEG_SOS, _JPEG_EOI):
            raise ExtractionError(
                "JPEG has no EXIF segment", reason="missing_metadata"
            )
        if marker in _JPEG_STANDALONE:
            continue

        (length,) = struct.unpack(">H", _read_exact(stream, 2))
        if length < 2:
            raise ExtractionError(
                f"Corrupt JPEG segment length {length}", reason="malformed_metadata"
            )
        payload_size = length - 2

        if marker == _JPEG_APP1:
            payload = _read_exact(stream, payload_size)
            if payload.startswith(EXIF_HEADER):
                return payload
            # XMP and other APP1 users
            continue

        _skip(stream, payload_size)


def _webp_exif_chunk(stream: BinaryIO) -> bytes:
    """Returns the EXIF chunk of a WebP stream (after the 12 byte RIFF header)."""
    while True:
        header = _read_upto(stream, 8)
        if len(header) < 8:
            raise ExtractionError("WebP has no EXIF chunk", reason="missing_metadata")
        fourcc = header[:4]
        (size,) = struct.unpack("<I", header[4:])
        if fourcc == b"EXIF":
            data = _read_exact(stream, size)
            return data if data.startswith(EXIF_HEADER) else EXIF_HEADER + data
        # Chunks are padded to an even size.
        _skip(stream, size + (size & 1))


def read_exif_block(stream: BinaryIO) -> bytes:
    """
    Locates the EXIF block of an image stream.

    Returns:
        The EXIF bytes prefixed with the "Exif\\0\\0" header, as piexif expects.

    Raises:
        ExtractionError: Unknown container or no EXIF block.
    """
    head = _read_upto(stream, 4)
    if len(head) < 4:
        raise ExtractionError("Stream is too short to be an image", reason="unrecognized_format")

    if head[:2] == _JPEG_SOI:
        # Re-feed the two bytes after SOI that were consumed by the sniff.
        return _jpeg_exif_segment(_Prefixed(head[2:], stream))
    if head == b"RIFF":
        riff = _read_exact(stream, 8)
        if riff[4:] != b"WEBP":
            raise ExtractionError("RIFF container is not WebP", reason="unrecognized_format")
        return _webp_exif_chunk(stream)
    if head in _TIFF_BYTE_ORDERS:
        return EXIF_HEADER + head + _read_all(stream)

    raise ExtractionError(
        f"Unrecognized image format (magic {head[:4]!r})", reason="unrecognized_format"
    )


class _Prefixed:
    """Read-only view that replays `prefix` before continuing with `stream`."""

    def __init__(self, prefix: bytes, stream: BinaryIO):
        self._prefix = prefix
        self._stream = stream

    def read(self, size: int = -1) -> bytes:
        if not self._prefix:
            return self._stream.read(size)
        if size is None or size < 0:
            data, self._prefix = self._prefix + self._stream.read(), b""
            return data
        data, self._prefix = self._prefix[:size], self._prefix[size:]
        if len(data) < size:
            data += self._stream.read(size - len(data))
        return data

    def seekable(self) -> bool:
        return not self._prefix and _is_seekable(self._stream)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        return self._stream.seek(offset, whence)


def _rational(value) -> float:
    if isinstance(value, (tuple, list)) and len(value) == 2:
        num, den = value
        if den == 0:
            raise ExtractionError(
                "GPS rational has a zero denominator", reason="invalid_geotag"
            )
        return num / den
    return float(value)


def dms_to_degrees(dms, ref, allowed_refs: str = "NSEW") -> float:
    """
    Converts an EXIF degree/minute/second triple to signed decimal degrees.

    Args:
        dms: Three rationals, each a (numerator, denominator) pair.
        ref: Hemisphere reference (bytes or str).
        allowed_refs: Valid reference letters, "NS" for latitude, "EW" for longitude.
    """
    if not isinstance(ref, (str, bytes)):
        raise ExtractionError(f"Invalid GPS reference {ref!r}", reason="invalid_geotag")
    if isinstance(ref, bytes):
        ref = ref.decode("ascii", errors="replace")
    ref = ref.strip("\x00 ").upper()
    if len(ref) != 1 or ref not in allowed_refs:
        raise ExtractionError(f"Invalid GPS reference {ref!r}", reason="invalid_geotag")

    try:
        degrees, minutes, seconds = (_rational(part) for part in dms)
    except (TypeError, ValueError) as e:
        raise ExtractionError(f"Invalid GPS value {dms!r}", reason="invalid_geotag") from e

    value = degrees + minutes / 60.0 + seconds / 3600.0
    return -value if ref in ("S", "W") else value


class ExifGeoExtractor(MetadataExtractorInterface):
    """
    Reads GPSLatitude/GPSLongitude (with their reference tags) from EXIF.

    Stateless; one instance can serve concurrent callers.
    """

    def extract(self, stream: BinaryIO) -> GeoPoint:
        exif_block = read_exif_block(stream)

        try:
            exif_dict = piexif.load(exif_block)
        except Exception as e:
            raise ExtractionError(
                f"Could not parse EXIF block: {e}", reason="malformed_metadata"
            ) from e

        gps = exif_dict.get("GPS") or {}
        required = (
            piexif.GPSIFD.GPSLatitude,
            piexif.GPSIFD.GPSLatitudeRef,
            piexif.GPSIFD.GPSLongitude,
            piexif.GPSIFD.GPSLongitudeRef,
        )
        if any(tag not in gps for tag in required):
            raise ExtractionError("EXIF block has no GPS position", reason="missing_geotag")

        latitude = dms_to_degrees(
            gps[piexif.GPSIFD.GPSLatitude], gps[piexif.GPSIFD.GPSLatitudeRef], "NS"
        )
        longitude = dms_to_degrees(
            gps[piexif.GPSIFD.GPSLongitude], gps[piexif.GPSIFD.GPSLongitudeRef], "EW"
        )

        if not coordinates_in_range(latitude, longitude):
            raise ExtractionError(
                f"GPS position out of range: ({latitude}, {longitude})",
                reason="invalid_geotag",
            )

        logger.debug(f"Extracted geotag ({latitude:.6f}, {longitude:.6f})")
        return GeoPoint(latitude=latitude, longitude=longitude)
