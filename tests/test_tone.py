import pytest
from PIL import Image

from eink_convert.processing.colorspace import rgb_to_lab
from eink_convert.processing.palette import SPECTRA6
from eink_convert.processing.params import ProcessingParams, ToneMode
from eink_convert.processing.tone import (
    adjust_tone,
    apply_contrast,
    apply_exposure,
    apply_saturation,
    apply_scurve,
    compress_dynamic_range,
    lightness_range,
    saturate,
    scurve_value,
)


def _pattern(mode="RGB", size=(12, 8)):
    img = Image.new(mode, size)
    width, height = size
    pixels = img.load()
    for y in range(height):
        for x in range(width):
            rgb = ((x * 23) % 256, (y * 37) % 256, (x * y * 11) % 256)
            pixels[x, y] = rgb + ((77,) if mode == "RGBA" else ())
    return img


def test_default_adjustments_leave_pixels_untouched():
    img = _pattern()
    before = img.tobytes()

    adjust_tone(img, ProcessingParams(compress_dynamic_range=False), SPECTRA6.perceived)

    assert img.tobytes() == before


def test_exposure_scales_and_clamps():
    img = Image.new("RGB", (1, 1), (100, 200, 10))

    apply_exposure(img, 2.0)

    assert img.getpixel((0, 0)) == (200, 255, 20)


def test_contrast_pivots_around_mid_gray():
    img = Image.new("RGB", (1, 1), (100, 128, 200))

    apply_contrast(img, 2.0)

    assert img.getpixel((0, 0)) == (72, 128, 255)


def test_zero_saturation_produces_gray():
    img = Image.new("RGB", (1, 1), (200, 100, 50))

    apply_saturation(img, 0.0)

    assert img.getpixel((0, 0)) == (125, 125, 125)


def test_saturation_leaves_gray_pixels_alone():
    assert saturate((90, 90, 90), 2.0) == (90, 90, 90)


def test_saturation_boost_widens_channel_spread():
    r, g, b = saturate((200, 100, 50), 1.5)

    assert 237 <= r <= 238
    assert 87 <= g <= 88
    assert 12 <= b <= 13


def test_scurve_keeps_end_points_and_compresses_highlights():
    assert scurve_value(0, 0.9, 0.0, 1.5, 0.5) == 0
    assert scurve_value(255, 0.9, 0.0, 1.5, 0.5) == 255
    assert scurve_value(64, 0.9, 0.0, 1.5, 0.5) == 64
    assert scurve_value(200, 0.9, 0.0, 1.5, 0.5) < 200


def test_scurve_shadow_boost_lifts_shadows():
    assert scurve_value(64, 0.8, 0.5, 1.5, 0.5) > 64


def test_scurve_with_zero_strength_is_identity():
    img = _pattern()
    before = img.tobytes()

    apply_scurve(img, 0, 0.3, 1.5, 0.5)

    assert img.tobytes() == before


def test_invalid_scurve_exponent_is_an_arithmetic_error():
    with pytest.raises(ArithmeticError):
        scurve_value(0, 1.0, 2.0, 1.5, 0.5)


def test_dynamic_range_compression_maps_to_ink_lightness():
    black_l, white_l = lightness_range(SPECTRA6.perceived)
    img = Image.new("RGB", (2, 1))
    img.putpixel((0, 0), (255, 255, 255))
    img.putpixel((1, 0), (0, 0, 0))

    compress_dynamic_range(img, SPECTRA6.perceived)

    assert rgb_to_lab(*img.getpixel((0, 0)))[0] == pytest.approx(white_l, abs=1)
    assert rgb_to_lab(*img.getpixel((1, 0)))[0] == pytest.approx(black_l, abs=1)


def test_dynamic_range_compression_needs_a_reference_palette():
    img = _pattern()
    before = img.tobytes()

    adjust_tone(img, ProcessingParams(compress_dynamic_range=True), None)

    assert img.tobytes() == before


def test_alpha_channel_passes_through():
    img = _pattern("RGBA")
    params = ProcessingParams(
        exposure=1.5,
        saturation=1.4,
        tone_mode=ToneMode.SCURVE,
        strength=0.7,
        shadow_boost=0.1,
    )

    adjust_tone(img, params, SPECTRA6.perceived)

    assert set(img.getchannel("A").getdata()) == {77}
