"""Orientation and sizing done before the pixel pipeline runs."""

from __future__ import annotations

from typing import Tuple

from PIL import Image, ImageOps

DEFAULT_DISPLAY_WIDTH = 800
DEFAULT_DISPLAY_HEIGHT = 480
DEFAULT_THUMBNAIL_WIDTH = 400
DEFAULT_THUMBNAIL_HEIGHT = 240


def apply_exif_orientation(img: Image.Image) -> Image.Image:
    return ImageOps.exif_transpose(img)


def rotate_90_clockwise(img: Image.Image) -> Image.Image:
    return img.transpose(Image.Transpose.ROTATE_270)


def resize_cover(img: Image.Image, width: int, height: int) -> Image.Image:
    """Scale to fill ``width`` x ``height`` and centre-crop the overflow."""
    if img.size == (width, height):
        return img
    return ImageOps.fit(img, (width, height), method=Image.Resampling.LANCZOS)


def target_size(
    img: Image.Image,
    width: int,
    height: int,
    skip_rotation: bool = False,
) -> Tuple[int, int]:
    is_portrait = img.height > img.width
    if is_portrait and skip_rotation and width > height:
        return height, width
    return width, height


def prepare_for_display(
    img: Image.Image,
    width: int = DEFAULT_DISPLAY_WIDTH,
    height: int = DEFAULT_DISPLAY_HEIGHT,
    skip_rotation: bool = False,
) -> Image.Image:
    img = apply_exif_orientation(img)
    final_width, final_height = target_size(img, width, height, skip_rotation)
    if img.height > img.width and not skip_rotation:
        img = rotate_90_clockwise(img)
    return resize_cover(img, final_width, final_height)


def make_thumbnail(
    img: Image.Image,
    width: int = DEFAULT_THUMBNAIL_WIDTH,
    height: int = DEFAULT_THUMBNAIL_HEIGHT,
) -> Image.Image:
    if img.height > img.width:
        width, height = height, width
    return ImageOps.fit(img, (width, height), method=Image.Resampling.LANCZOS)
