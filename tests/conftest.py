"""Shared builders for geotagged test images."""

import io

import piexif
import pytest
from PIL import Image


def _degrees_to_dms_rational(degrees_float: float):
    degrees_float = abs(degrees_float)
    d = int(degrees_float)
    m_float = (degrees_float - d) * 60
    m = int(m_float)
    s_int = max(0, round((m_float - m) * 60 * 10000))
    return [(d, 1), (m, 1), (s_int, 10000)]


def _gps_ifd(lat: float, lon: float) -> dict:
    return {
        piexif.GPSIFD.GPSLatitudeRef: "N" if lat >= 0 else "S",
        piexif.GPSIFD.GPSLatitude: _degrees_to_dms_rational(lat),
        piexif.GPSIFD.GPSLongitudeRef: "E" if lon >= 0 else "W",
        piexif.GPSIFD.GPSLongitude: _degrees_to_dms_rational(lon),
    }


def _exif_bytes(gps: tuple[float, float] | None = None, gps_ifd: dict | None = None) -> bytes:
    exif_dict = {"0th": {piexif.ImageIFD.Make: "TestCam"}, "Exif": {}, "GPS": {}}
    if gps is not None:
        exif_dict["GPS"] = _gps_ifd(*gps)
    if gps_ifd is not None:
        exif_dict["GPS"] = gps_ifd
    return piexif.dump(exif_dict)


def _jpeg_bytes(
    gps: tuple[float, float] | None = None,
    gps_ifd: dict | None = None,
    with_exif: bool = True,
) -> bytes:
    buf = io.BytesIO()
    img = Image.new("RGB", (16, 16), color=(90, 140, 60))
    if with_exif:
        img.save(buf, format="JPEG", exif=_exif_bytes(gps, gps_ifd))
    else:
        img.save(buf, format="JPEG")
    return buf.getvalue()


@pytest.fixture
def make_jpeg():
    """Factory: make_jpeg(gps=(lat, lon) | None, gps_ifd=dict | None, with_exif=True) -> bytes."""
    return _jpeg_bytes


@pytest.fixture
def make_exif():
    """Factory: make_exif(gps=(lat, lon) | None, gps_ifd=dict | None) -> b'Exif\\0\\0' + TIFF bytes."""
    return _exif_bytes


@pytest.fixture
def gps_ifd():
    """Factory: gps_ifd(lat, lon) -> piexif GPS IFD dict."""
    return _gps_ifd
