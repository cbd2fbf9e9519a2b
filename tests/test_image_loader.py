import pytest
from PIL import Image

from glowbox.image_loader import ImageLoadError, PNGImage, flip_rows, load_png_file

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 128)
WHITE = (255, 255, 255, 255)


def test_flip_rows_reverses_row_order():
    top = bytes(range(8))
    bottom = bytes(range(8, 16))
    assert flip_rows(top + bottom, 2, 2) == bottom + top


def test_flip_rows_twice_is_identity():
    data = bytes(range(4 * 3 * 5))
    assert flip_rows(flip_rows(data, 3, 5), 3, 5) == data


def test_flip_rows_single_row_unchanged():
    data = bytes(range(12))
    assert flip_rows(data, 3, 1) == data


def test_flip_rows_rejects_wrong_length():
    with pytest.raises(ValueError):
        flip_rows(bytes(10), 2, 2)


def test_load_png_places_bottom_row_first(tmp_path):
    img = Image.new("RGBA", (2, 3))
    img.putdata([RED, GREEN, WHITE, WHITE, BLUE, RED])
    path = tmp_path / "texture.png"
    img.save(path)

    loaded = load_png_file(path)
    assert (loaded.width, loaded.height) == (2, 3)
    assert len(loaded.pixels) == 4 * 2 * 3
    assert loaded.pixels[:8] == bytes(BLUE + RED)
    assert loaded.pixels[-8:] == bytes(RED + GREEN)


def test_load_png_converts_rgb_to_opaque_rgba(tmp_path):
    img = Image.new("RGB", (2, 2), (10, 20, 30))
    path = tmp_path / "rgb.png"
    img.save(path)

    loaded = load_png_file(str(path))
    assert loaded == PNGImage(2, 2, bytes((10, 20, 30, 255)) * 4)


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(ImageLoadError):
        load_png_file(tmp_path / "missing.png")


def test_load_garbage_file_raises(tmp_path):
    path = tmp_path / "broken.png"
    path.write_bytes(b"this is not an image")
    with pytest.raises(ImageLoadError):
        load_png_file(path)