from __future__ import annotations

import logging
from dataclasses import asdict, fields
from typing import Any, Dict, Mapping, Optional

from flask import Flask, jsonify, request
from PIL import UnidentifiedImageError

from .config import SETTINGS, ConverterSettings, configure_logging
from .errors import ConfigurationError, EncodingError
from .infrastructure.cache import CACHE, ResponseCache, last_good, remember_last_good
from .infrastructure.network import FETCHER, SourceFetcher, decode_image
from .infrastructure.responses import MIMETYPES, render, send_bytes, send_image
from .processing.geometry import apply_exif_orientation, make_thumbnail, prepare_for_display
from .processing.palette import PalettePair, get_palette, palette_options, parse_palette
from .processing.params import PARAM_ALIASES, ProcessingParams
from .processing.pipeline import ConversionResult, process_image
from .processing.presets import dither_options, get_preset, preset_options

APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)

_PARAM_KEYS = {field.name for field in fields(ProcessingParams)} | set(PARAM_ALIASES)
_TRUE = {"1", "true", "yes", "on"}


def _flag(args: Mapping[str, str], name: str, default: bool = False) -> bool:
    value = args.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE


def _dimension(args: Mapping[str, str], name: str, default: int) -> int:
    raw = args.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(name, f"Expected an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigurationError(name, "Must be positive")
    return value


def resolve_params(args: Mapping[str, str], settings: ConverterSettings = SETTINGS) -> ProcessingParams:
    base = get_preset(args.get("preset") or settings.preset)
    overrides = {key: args[key] for key in args if key in _PARAM_KEYS}
    return base.merge(overrides)


def resolve_palette(
    args: Mapping[str, str],
    form: Optional[Mapping[str, str]] = None,
    settings: ConverterSettings = SETTINGS,
) -> PalettePair:
    custom = (form or {}).get("palette_json") or args.get("palette_json")
    if custom:
        return parse_palette(custom)
    return get_palette(args.get("palette") or settings.palette)


def create_app(
    settings: ConverterSettings = SETTINGS,
    fetcher: SourceFetcher | None = None,
    cache: ResponseCache | None = None,
) -> Flask:
    configure_logging(settings)
    app = Flask(__name__)
    fetcher = fetcher or FETCHER
    cache = cache if cache is not None else CACHE

    def convert(img, args: Mapping[str, str], form: Optional[Mapping[str, str]] = None) -> ConversionResult:
        # Validate everything before touching pixels.
        params = resolve_params(args, settings)
        palette = resolve_palette(args, form, settings)
        width = _dimension(args, "width", settings.display_width)
        height = _dimension(args, "height", settings.display_height)
        skip_rotation = _flag(args, "skip_rotation", settings.skip_rotation)

        prepared = prepare_for_display(img, width, height, skip_rotation=skip_rotation)
        return process_image(
            prepared,
            palette=palette,
            params=params,
            skip_dithering=_flag(args, "skip_dithering"),
            use_perceived_output=_flag(args, "perceived"),
        )

    def output_format(args: Mapping[str, str]) -> str:
        fmt = (args.get("format") or "png").lower()
        if fmt not in MIMETYPES:
            raise ConfigurationError("format", f"Unsupported output format {fmt!r}")
        return fmt

    @app.errorhandler(ConfigurationError)
    def configuration_error(exc: ConfigurationError):
        return jsonify(error=exc.message, field=exc.field), 400

    @app.errorhandler(EncodingError)
    def encoding_error(exc: EncodingError):
        return jsonify(error=str(exc)), 400

    @app.route("/convert", methods=["GET"])
    def convert_source():
        args = request.args
        fmt = output_format(args)
        key = request.full_path
        cached = cache.get(key)
        if cached:
            return send_bytes(*cached)

        try:
            src = fetcher.fetch_source(args.get("source_url"))
        except RuntimeError as exc:
            logger.error("Source unavailable: %s", exc)
            fallback = last_good(MIMETYPES[fmt])
            if fallback:
                return send_bytes(*fallback)
            return (f"Source Error: {exc}", 502)

        result = convert(src, args)
        mimetype, data = render(result.image, fmt)
        cache.put(key, mimetype, data)
        remember_last_good(mimetype, data)
        return send_bytes(mimetype, data)

    @app.route("/convert", methods=["POST"])
    def convert_upload():
        args = request.args
        fmt = output_format(args)
        upload = request.files.get("image")
        data = upload.read() if upload is not None else request.get_data()
        if not data:
            return jsonify(error="No image supplied", field="image"), 400
        try:
            src = decode_image(data)
        except UnidentifiedImageError:
            return jsonify(error="Unrecognised image data", field="image"), 400

        result = convert(src, args, request.form)
        return send_image(result.image, fmt)

    @app.route("/thumbnail")
    def thumbnail():
        args = request.args
        try:
            src = fetcher.fetch_source(args.get("source_url"))
        except RuntimeError as exc:
            return (f"Source Error: {exc}", 502)
        thumb = make_thumbnail(
            apply_exif_orientation(src).convert("RGB"),
            _dimension(args, "width", settings.thumbnail_width),
            _dimension(args, "height", settings.thumbnail_height),
        )
        return send_bytes(*render(thumb))

    @app.route("/palettes")
    def palettes():
        return jsonify(
            options=palette_options(),
            default=settings.palette,
            palette=get_palette(settings.palette).to_dict(),
        )

    @app.route("/presets")
    def presets():
        return jsonify(
            options=preset_options(),
            dither_algorithms=dither_options(),
            default=settings.preset,
            params=get_preset(settings.preset).to_dict(),
        )

    @app.route("/health")
    def health():
        return jsonify(ok=True, version=APP_VERSION, palette=settings.palette, preset=settings.preset)

    @app.route("/settings")
    def settings_view():
        payload: Dict[str, Any] = asdict(settings)
        return jsonify(payload)

    return app


# Module-level application for WSGI servers (``eink_convert.app:app``).
app = create_app()
application = app
