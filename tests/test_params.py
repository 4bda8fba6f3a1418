import pytest

from eink_convert.errors import ConfigurationError
from eink_convert.processing.params import (
    ColorMethod,
    DitherAlgorithm,
    ProcessingParams,
    ToneMode,
)
from eink_convert.processing.presets import (
    dither_options,
    get_preset,
    preset_names,
    preset_options,
)


def test_defaults_match_compressed_dynamic_range_preset():
    params = ProcessingParams()

    assert params.tone_mode is ToneMode.CONTRAST
    assert params.color_method is ColorMethod.RGB
    assert params.dither_algorithm is DitherAlgorithm.FLOYD_STEINBERG
    assert params.compress_dynamic_range is True
    assert get_preset("cdr") == params


def test_merge_overlays_fields_and_accepts_interchange_names():
    merged = ProcessingParams().merge(
        {"exposure": "1.2", "toneMode": "scurve", "shadowBoost": 0.2, "compressDynamicRange": "false"}
    )

    assert merged.exposure == pytest.approx(1.2)
    assert merged.tone_mode is ToneMode.SCURVE
    assert merged.shadow_boost == pytest.approx(0.2)
    assert merged.compress_dynamic_range is False
    # Untouched fields keep their values.
    assert merged.saturation == 1.0


def test_merge_rejects_unknown_keys():
    with pytest.raises(ConfigurationError) as excinfo:
        ProcessingParams().merge({"brightness": 2})

    assert excinfo.value.field == "brightness"


def test_merge_reports_non_numeric_values():
    with pytest.raises(ConfigurationError) as excinfo:
        ProcessingParams().merge({"contrast": "lots"})

    assert excinfo.value.field == "contrast"


@pytest.mark.parametrize(
    "field, value",
    [
        ("exposure", 3.0),
        ("saturation", -0.1),
        ("contrast", 0.1),
        ("strength", 1.5),
        ("midpoint", 0.9),
        ("highlight_compress", float("nan")),
    ],
)
def test_out_of_range_values_are_rejected(field, value):
    with pytest.raises(ConfigurationError) as excinfo:
        ProcessingParams(**{field: value})

    assert excinfo.value.field == field


def test_shadow_exponent_must_stay_positive():
    with pytest.raises(ConfigurationError) as excinfo:
        ProcessingParams(strength=1.0, shadow_boost=1.0)

    assert excinfo.value.field == "shadow_boost"


def test_unknown_tone_mode_is_rejected():
    with pytest.raises(ConfigurationError) as excinfo:
        ProcessingParams(tone_mode="hdr")

    assert excinfo.value.field == "tone_mode"


def test_compress_dynamic_range_is_coerced_to_bool():
    assert ProcessingParams(compress_dynamic_range="false").compress_dynamic_range is False
    assert ProcessingParams(compress_dynamic_range="on").compress_dynamic_range is True

    with pytest.raises(ConfigurationError) as excinfo:
        ProcessingParams(compress_dynamic_range="maybe")

    assert excinfo.value.field == "compress_dynamic_range"


def test_unknown_dither_algorithm_falls_back_to_floyd_steinberg():
    params = ProcessingParams(dither_algorithm="atkinson")

    assert params.dither_algorithm is DitherAlgorithm.FLOYD_STEINBERG
    assert DitherAlgorithm.parse("Sierra") is DitherAlgorithm.SIERRA


def test_to_dict_uses_plain_values():
    data = get_preset("grayscale").to_dict()

    assert data["color_method"] == "lab"
    assert data["tone_mode"] == "scurve"
    assert data["saturation"] == 0.0


def test_presets_are_registered():
    assert preset_names() == ["cdr", "scurve", "vivid", "soft", "grayscale"]
    assert [option["value"] for option in preset_options()] == preset_names()
    assert get_preset("soft").dither_algorithm is DitherAlgorithm.STUCKI
    assert get_preset("VIVID").exposure == pytest.approx(1.1)
    assert [option["value"] for option in dither_options()] == [
        "floyd-steinberg",
        "stucki",
        "burkes",
        "sierra",
    ]


def test_unknown_preset_is_a_configuration_error():
    with pytest.raises(ConfigurationError) as excinfo:
        get_preset("dramatic")

    assert excinfo.value.field == "preset"
