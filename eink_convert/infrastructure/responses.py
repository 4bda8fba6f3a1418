from __future__ import annotations

import io

from flask import send_file
from PIL import Image

from ..processing.bitmap import encode_bmp
from .cache import remember_last_good

PNG_MIMETYPE = "image/png"
BMP_MIMETYPE = "image/bmp"
MIMETYPES = {"png": PNG_MIMETYPE, "bmp": BMP_MIMETYPE}


def png_bytes(img: Image.Image) -> bytes:
    buffer = io.BytesIO()
    img.save(buffer, "PNG", optimize=True)
    return buffer.getvalue()


def render(img: Image.Image, fmt: str = "png") -> tuple[str, bytes]:
    if fmt == "bmp":
        return BMP_MIMETYPE, encode_bmp(img)
    return PNG_MIMETYPE, png_bytes(img)


def send_bytes(mimetype: str, data: bytes):
    return send_file(io.BytesIO(data), mimetype=mimetype)


def send_image(img: Image.Image, fmt: str = "png"):
    mimetype, data = render(img, fmt)
    remember_last_good(mimetype, data)
    return send_bytes(mimetype, data)
