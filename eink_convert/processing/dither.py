from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Sequence, Tuple

from PIL import Image

from .colorspace import RGB
from .palette import Palette, closest_lab, closest_rgb, slots_to_lab
from .params import ColorMethod, DitherAlgorithm, ProcessingParams

# (dx, dy, weight) relative to the pixel being quantized.
DiffusionKernel = Tuple[Tuple[int, int, float], ...]

FLOYD_STEINBERG: DiffusionKernel = (
    (1, 0, 7 / 16),
    (-1, 1, 3 / 16),
    (0, 1, 5 / 16),
    (1, 1, 1 / 16),
)

STUCKI: DiffusionKernel = (
    (1, 0, 8 / 42),
    (2, 0, 4 / 42),
    (-2, 1, 2 / 42),
    (-1, 1, 4 / 42),
    (0, 1, 8 / 42),
    (1, 1, 4 / 42),
    (2, 1, 2 / 42),
    (-2, 2, 1 / 42),
    (-1, 2, 2 / 42),
    (0, 2, 4 / 42),
    (1, 2, 2 / 42),
    (2, 2, 1 / 42),
)

BURKES: DiffusionKernel = (
    (1, 0, 8 / 32),
    (2, 0, 4 / 32),
    (-2, 1, 2 / 32),
    (-1, 1, 4 / 32),
    (0, 1, 8 / 32),
    (1, 1, 4 / 32),
    (2, 1, 2 / 32),
)

SIERRA: DiffusionKernel = (
    (1, 0, 5 / 32),
    (2, 0, 3 / 32),
    (-2, 1, 2 / 32),
    (-1, 1, 4 / 32),
    (0, 1, 5 / 32),
    (1, 1, 4 / 32),
    (2, 1, 2 / 32),
    (-1, 2, 2 / 32),
    (0, 2, 3 / 32),
    (1, 2, 2 / 32),
)

DIFFUSION_KERNELS: Mapping[DitherAlgorithm, DiffusionKernel] = MappingProxyType(
    {
        DitherAlgorithm.FLOYD_STEINBERG: FLOYD_STEINBERG,
        DitherAlgorithm.STUCKI: STUCKI,
        DitherAlgorithm.BURKES: BURKES,
        DitherAlgorithm.SIERRA: SIERRA,
    }
)


def kernel_for(algorithm: "str | DitherAlgorithm") -> DiffusionKernel:
    return DIFFUSION_KERNELS[DitherAlgorithm.parse(algorithm)]


def error_diffusion_dither(
    img: Image.Image,
    method: ColorMethod,
    output_slots: Sequence[RGB],
    dither_slots: Sequence[RGB],
    algorithm: "str | DitherAlgorithm" = DitherAlgorithm.FLOYD_STEINBERG,
) -> None:
    """Quantize ``img`` in place with raster-order error diffusion.

    Matching and the diffused error are computed against ``dither_slots`` (what
    the inks look like); the colour written is the same slot of
    ``output_slots`` (what the driver expects).
    """

    width, height = img.size
    pixels = img.load()
    kernel = kernel_for(algorithm)
    use_lab = ColorMethod(method) is ColorMethod.LAB
    dither_lab = slots_to_lab(dither_slots) if use_lab else None
    errors = [0.0] * (width * height * 3)

    for y in range(height):
        for x in range(width):
            pixel = pixels[x, y]
            offset = (y * width + x) * 3
            old_r = max(0.0, min(255.0, pixel[0] + errors[offset]))
            old_g = max(0.0, min(255.0, pixel[1] + errors[offset + 1]))
            old_b = max(0.0, min(255.0, pixel[2] + errors[offset + 2]))
            working = (old_r, old_g, old_b)

            if use_lab:
                index = closest_lab(working, dither_lab)
            else:
                index = closest_rgb(working, dither_slots)

            pixels[x, y] = tuple(output_slots[index]) + pixel[3:]

            dither_r, dither_g, dither_b = dither_slots[index]
            err_r = old_r - dither_r
            err_g = old_g - dither_g
            err_b = old_b - dither_b

            for dx, dy, weight in kernel:
                nx = x + dx
                ny = y + dy
                if 0 <= nx < width and ny < height:
                    target = (ny * width + nx) * 3
                    errors[target] += err_r * weight
                    errors[target + 1] += err_g * weight
                    errors[target + 2] += err_b * weight


def dither(
    img: Image.Image,
    params: ProcessingParams,
    output_palette: Palette,
    dither_palette: Palette,
) -> None:
    error_diffusion_dither(
        img,
        params.color_method,
        output_palette.slots(),
        dither_palette.slots(),
        params.dither_algorithm,
    )
