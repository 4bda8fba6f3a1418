from PIL import Image

from eink_convert.processing.geometry import (
    make_thumbnail,
    prepare_for_display,
    resize_cover,
    rotate_90_clockwise,
)


def test_rotate_clockwise_moves_left_column_to_top():
    img = Image.new("RGB", (2, 1))
    img.putpixel((0, 0), (255, 0, 0))
    img.putpixel((1, 0), (0, 0, 255))

    rotated = rotate_90_clockwise(img)

    assert rotated.size == (1, 2)
    assert rotated.getpixel((0, 0)) == (255, 0, 0)
    assert rotated.getpixel((0, 1)) == (0, 0, 255)


def test_resize_cover_fills_target():
    resized = resize_cover(Image.new("RGB", (300, 100), (9, 9, 9)), 80, 48)

    assert resized.size == (80, 48)


def test_portrait_sources_are_rotated_to_landscape():
    prepared = prepare_for_display(Image.new("RGB", (60, 100)), 80, 48)

    assert prepared.size == (80, 48)


def test_skip_rotation_keeps_portrait_orientation():
    prepared = prepare_for_display(Image.new("RGB", (60, 100)), 80, 48, skip_rotation=True)

    assert prepared.size == (48, 80)


def test_thumbnail_orientation_follows_source():
    assert make_thumbnail(Image.new("RGB", (300, 200)), 40, 24).size == (40, 24)
    assert make_thumbnail(Image.new("RGB", (200, 300)), 40, 24).size == (24, 40)
