import pytest

from src.logofit.errors import InvalidInput
from src.logofit.keying import key_out
from src.logofit.models import Bitmap, KeyingSpec, parse_hex_color


def _pixels(bitmap):
    data = bitmap.pixels
    return [tuple(data[i:i + 4]) for i in range(0, len(data), 4)]


def test_two_by_two_exact_and_far_pixels():
    pixels = bytes(
        (255, 255, 255, 255)  # exact target
        + (0, 0, 0, 200)  # far from target
        + (250, 250, 250, 255)  # distance ~8.66
        + (200, 200, 200, 128)  # distance ~95
    )
    bitmap = Bitmap(2, 2, pixels)
    result = key_out(bitmap, KeyingSpec((255, 255, 255), 30))

    assert result.size == (2, 2)
    out = _pixels(result)
    assert out[0] == (255, 255, 255, 0)
    assert out[1] == (0, 0, 0, 200)
    assert out[2][3] == 0
    assert out[3] == (200, 200, 200, 128)


def test_source_bitmap_is_not_modified(make_bitmap):
    bitmap = make_bitmap(3, 2, (255, 255, 255, 255))
    before = bitmap.pixels
    result = key_out(bitmap, KeyingSpec((255, 255, 255), 1))
    assert bitmap.pixels == before
    assert all(p[3] == 0 for p in _pixels(result))


def test_distance_threshold_is_strict():
    # distance between (0,0,0) and (3,4,0) is exactly 5
    bitmap = Bitmap(1, 1, bytes((3, 4, 0, 255)))
    assert _pixels(key_out(bitmap, KeyingSpec((0, 0, 0), 5)))[0][3] == 255
    assert _pixels(key_out(bitmap, KeyingSpec((0, 0, 0), 5.01)))[0][3] == 0


def test_zero_tolerance_keys_nothing(make_bitmap):
    bitmap = make_bitmap(4, 4, (255, 255, 255, 255))
    result = key_out(bitmap, KeyingSpec((255, 255, 255), 0))
    assert result.pixels == bitmap.pixels


def test_isolated_pixels_inside_foreground_are_keyed():
    red, white = (255, 0, 0, 255), (255, 255, 255, 255)
    rows = [red, red, red, red, white, red, red, red, red]
    bitmap = Bitmap(3, 3, bytes(c for px in rows for c in px))
    out = _pixels(key_out(bitmap, KeyingSpec((255, 255, 255), 10)))
    assert out[4][3] == 0
    assert all(p[3] == 255 for i, p in enumerate(out) if i != 4)


def test_preserves_dimensions_on_non_square(make_bitmap):
    bitmap = make_bitmap(7, 3)
    assert key_out(bitmap, KeyingSpec((0, 0, 0), 50)).size == (7, 3)


def test_rejects_negative_tolerance():
    with pytest.raises(InvalidInput):
        KeyingSpec((0, 0, 0), -1)


def test_rejects_malformed_bitmap():
    with pytest.raises(InvalidInput):
        key_out(Bitmap(2, 2, b"\x00" * 3), KeyingSpec())


def test_parse_hex_color():
    assert parse_hex_color("#FFFFFF") == (255, 255, 255)
    assert parse_hex_color("10a0Ff") == (16, 160, 255)
    with pytest.raises(InvalidInput):
        parse_hex_color("#FFF")
    with pytest.raises(InvalidInput):
        parse_hex_color("#GGGGGG")
