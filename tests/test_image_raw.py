import pytest

from ppgso.image import Image, Pixel
from ppgso.image_raw import load_raw, save_raw


def _pattern(width, height):
    image = Image(width, height)
    for y in range(height):
        for x in range(width):
            image.set_pixel_rgb(x, y, x * 30, y * 60, x + y)
    return image


@pytest.mark.parametrize("width,height", [(1, 1), (3, 2), (8, 4)])
def test_round_trip(tmp_path, width, height):
    path = tmp_path / "img.raw"
    image = _pattern(width, height)
    save_raw(image, path)
    loaded = load_raw(path, width, height)
    assert (loaded.width, loaded.height) == (width, height)
    assert loaded.framebuffer == image.framebuffer


def test_saved_bytes_match_framebuffer(tmp_path):
    path = tmp_path / "img.raw"
    image = _pattern(4, 3)
    save_raw(image, path)
    assert path.read_bytes() == image.to_bytes()
    assert path.stat().st_size == 4 * 3 * 3


def test_load_layout(tmp_path):
    path = tmp_path / "img.raw"
    path.write_bytes(bytes([1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12]))
    image = load_raw(path, 2, 2)
    assert image.get_pixel(0, 0) == Pixel(1, 2, 3)
    assert image.get_pixel(1, 0) == Pixel(4, 5, 6)
    assert image.get_pixel(0, 1) == Pixel(7, 8, 9)
    assert image.get_pixel(1, 1) == Pixel(10, 11, 12)


def test_short_file_leaves_black(tmp_path):
    path = tmp_path / "img.raw"
    path.write_bytes(bytes([9, 9, 9, 7]))
    image = load_raw(path, 2, 1)
    assert image.get_pixel(0, 0) == Pixel(9, 9, 9)
    assert image.get_pixel(1, 0) == Pixel(7, 0, 0)


def test_extra_bytes_ignored(tmp_path):
    path = tmp_path / "img.raw"
    path.write_bytes(bytes([1, 2, 3, 4, 5, 6]))
    image = load_raw(path, 1, 1)
    assert image.framebuffer == [Pixel(1, 2, 3)]


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_raw(tmp_path / "missing.raw", 2, 2)