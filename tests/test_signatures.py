import pytest

from loaders import signatures
from loaders.signatures import (
    BMP,
    GIF,
    JPEG,
    PNG,
    UNKNOWN,
    find_embedded,
    format_extension,
    is_image_header,
    mime_type,
    sniff,
    sniff_at,
)


@pytest.mark.parametrize(
    "data, tag",
    [
        (b"\x89PNG\r\n\x1a\n rest", PNG),
        (b"\xff\xd8\xff\xe0", JPEG),
        (b"GIF87a....", GIF),
        (b"GIF89a....", GIF),
        (b"BM\x00\x00", BMP),
        (b"\x89PNG\r\n", UNKNOWN),
        (b"GIF88a", UNKNOWN),
        (b"", UNKNOWN),
        (b"\xaa" * 32, UNKNOWN),
    ],
)
def test_sniff(data, tag):
    assert sniff(data) == tag


def test_sniff_at_only_recognises_png_and_jpeg():
    data = b"xxGIF89aBM\xff\xd8\xff"
    assert sniff_at(data, 2) == UNKNOWN
    assert sniff_at(data, 8) == UNKNOWN
    assert sniff_at(data, 10) == JPEG
    assert sniff_at(data, -1) == UNKNOWN
    assert sniff_at(data, len(data)) == UNKNOWN


def test_find_embedded_scans_first_kilobyte(png_bytes):
    png = png_bytes(2, 2)
    assert find_embedded(b"\x00" * 128 + png) == 128
    assert find_embedded(b"\x01\x02\x03" + b"\xff\xd8\xff" + b"\x00" * 20) == 3


def test_find_embedded_ignores_gif_and_bmp():
    assert find_embedded(b"\x00" * 10 + b"GIF89a" + b"BM" + b"\x00" * 20) == -1


def test_find_embedded_probes_sample_offsets(png_bytes):
    png = png_bytes(2, 2)
    data = b"\x00" * 2000 + png
    assert find_embedded(data) == 2000
    # Past the scan window and not on a sample offset
    assert find_embedded(b"\x00" * 1500 + png) == -1


def test_find_embedded_short_blob():
    assert find_embedded(b"\xff\xd8\xff") == -1
    assert find_embedded(b"") == -1


def test_find_embedded_does_not_see_signature_at_zero_twice(png_bytes):
    # Offset 0 is inside the scan window, so a plain PNG reports 0
    assert find_embedded(png_bytes(1, 1)) == 0


def test_format_helpers():
    assert format_extension(PNG) == ".png"
    assert format_extension("jpg") == ".jpg"
    assert format_extension(JPEG) == ".jpg"
    assert format_extension(UNKNOWN) is None
    assert format_extension(None) is None
    assert mime_type(GIF) == "image/gif"
    assert mime_type("bmp") == "image/bmp"
    assert mime_type("tga") is None
    assert is_image_header(b"BM")
    assert not is_image_header(b"B")


def test_signature_table_order_is_stable():
    assert [tag for tag, _sig in signatures.SIGNATURES] == [PNG, JPEG, GIF, GIF, BMP]
