from __future__ import annotations

import struct

from PIL import Image

from ..errors import EncodingError

HEADER_SIZE = 54
INFO_HEADER_SIZE = 40
PIXELS_PER_METER = 2835  # ~72 DPI


def _row_stride(width: int) -> int:
    return (width * 3 + 3) // 4 * 4


def encode_bmp(img: Image.Image) -> bytes:
    """Serialize ``img`` as an uncompressed 24-bit bottom-up BMP."""
    width, height = img.size
    if width <= 0 or height <= 0:
        raise EncodingError(f"Cannot encode an empty {width}x{height} image")

    rgb = img.convert("RGB")
    r, g, b = rgb.split()
    bgr = Image.merge("RGB", (b, g, r)).tobytes()

    stride = _row_stride(width)
    row_bytes = width * 3
    padding = b"\x00" * (stride - row_bytes)
    image_size = stride * height
    file_size = HEADER_SIZE + image_size

    header = struct.pack(
        "<2sIIIIiiHHIIiiII",
        b"BM",
        file_size,
        0,
        HEADER_SIZE,
        INFO_HEADER_SIZE,
        width,
        height,
        1,
        24,
        0,
        image_size,
        PIXELS_PER_METER,
        PIXELS_PER_METER,
        0,
        0,
    )

    rows = [
        bgr[y * row_bytes:(y + 1) * row_bytes] + padding
        for y in range(height - 1, -1, -1)
    ]
    return header + b"".join(rows)
