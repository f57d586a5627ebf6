import io

import pytest
from PIL import Image

from category_api.utils.image import (
    ImageResizer,
    InvalidImageError,
    is_image_filename,
    scaled_height,
)
from .conftest import make_image, make_png_claiming_size


def _size(data):
    with Image.open(io.BytesIO(data)) as img:
        return img.size, img.format


def test_scaled_height_keeps_aspect_ratio():
    assert scaled_height(400, 200, 50) == 25
    assert scaled_height(400, 200, 1200) == 600
    assert scaled_height(1000, 1, 50) == 1


def test_render_produces_each_width_in_source_format():
    out = ImageResizer().render(make_image(400, 300), [50, 150, 600])

    assert sorted(out) == [50, 150, 600]
    assert _size(out[50]) == ((50, 38), "PNG")
    assert _size(out[150]) == ((150, 112), "PNG")
    # Narrower sources are scaled up
    assert _size(out[600]) == ((600, 450), "PNG")


def test_resize_jpeg():
    data = ImageResizer().resize(make_image(800, 400, fmt="JPEG"), 300)
    assert _size(data) == ((300, 150), "JPEG")


def test_resize_gif_palette_image():
    data = ImageResizer().resize(make_image(100, 50, fmt="GIF", mode="P", color=3), 50)
    assert _size(data) == ((50, 25), "GIF")


@pytest.mark.parametrize("data", [b"", b"definitely not an image"])
def test_invalid_data_is_rejected(data):
    with pytest.raises(InvalidImageError):
        ImageResizer().render(data, [50])


def test_detect_extension():
    resizer = ImageResizer()
    assert resizer.detect_extension(make_image(fmt="PNG")) == ".png"
    assert resizer.detect_extension(make_image(fmt="JPEG")) == ".jpg"


def test_is_image_filename():
    assert is_image_filename("photo.JPG")
    assert is_image_filename(".webp")
    assert not is_image_filename("notes.txt")


def test_decompression_bomb_is_rejected():
    with pytest.raises(InvalidImageError):
        ImageResizer().render(make_png_claiming_size(20000, 20000), [50])


def test_tall_sliver_is_not_scaled_past_the_pixel_limit():
    # 1x2000 at width 1200 would be 1200x2400000
    with pytest.raises(InvalidImageError):
        ImageResizer().render(make_image(1, 2000), [50, 1200])


def test_max_pixels_applies_to_every_width():
    resizer = ImageResizer(max_pixels=100)

    assert _size(resizer.resize(make_image(40, 20), 10))[0] == (10, 5)
    with pytest.raises(InvalidImageError):
        resizer.render(make_image(40, 20), [10, 20])
