from app.utils.pixels import PixelBuffer
from app.utils.postprocess import BoundingBox, auto_crop, find_bounding_box

from conftest import make_pixels


def test_all_white_image_is_returned_unchanged():
    buf = PixelBuffer(make_pixels(40, 30))
    result = auto_crop(buf)
    assert result.buffer is buf
    assert result.box is None
    assert result.offset == (0, 0)


def test_fully_transparent_image_is_returned_unchanged():
    buf = PixelBuffer(make_pixels(20, 20, fill=(0, 0, 0, 0)))
    assert auto_crop(buf).buffer is buf


def test_single_pixel_gets_padding():
    px = make_pixels(100, 100)
    px[40, 50] = (0, 0, 0, 255)
    result = auto_crop(PixelBuffer(px))
    # pad = floor(100 * 0.02) = 2
    assert result.box == BoundingBox(min_x=48, min_y=38, max_x=52, max_y=42)
    assert (result.buffer.width, result.buffer.height) == (5, 5)
    assert result.offset == (48, 38)


def test_padding_is_clamped_to_image_bounds():
    px = make_pixels(100, 100)
    px[0, 0] = (200, 0, 0, 255)
    px[99, 99] = (200, 0, 0, 255)
    box = find_bounding_box(PixelBuffer(px))
    assert box == BoundingBox(min_x=0, min_y=0, max_x=99, max_y=99)


def test_padding_follows_longer_side():
    px = make_pixels(200, 50)
    px[25, 100] = (0, 0, 255, 255)
    box = find_bounding_box(PixelBuffer(px))
    # pad = floor(200 * 0.02) = 4
    assert box == BoundingBox(min_x=96, min_y=21, max_x=104, max_y=29)


def test_near_white_and_transparent_pixels_are_background():
    px = make_pixels(50, 50)
    px[5, 5] = (246, 250, 255, 255)
    px[6, 6] = (0, 0, 0, 5)
    px[30, 20] = (245, 250, 250, 255)
    box = find_bounding_box(PixelBuffer(px))
    # only (x=20, y=30) counts: 245 is not above the near-white threshold
    assert box == BoundingBox(min_x=19, min_y=29, max_x=21, max_y=31)


def test_crop_never_grows_and_keeps_content():
    px = make_pixels(64, 48)
    px[10:20, 30:40] = (0, 0, 0, 255)
    buf = PixelBuffer(px)
    result = auto_crop(buf)
    assert 0 < result.buffer.width <= buf.width
    assert 0 < result.buffer.height <= buf.height
    assert (result.buffer.pixels[..., :3] == 0).all(axis=-1).sum() == 100
