import numpy as np
import numpy.typing as npt
from PIL import Image
from typing import Tuple

# Type aliases for clarity
FloatArray = npt.NDArray[np.float32 | np.float64]
UInt8Array = npt.NDArray[np.uint8]
BoolArray = npt.NDArray[np.bool_]

MISSING_TEXTURE_SIZE = 64
MISSING_TEXTURE_COLORS: Tuple[Tuple[int, int, int, int], Tuple[int, int, int, int]] = (
    (255, 0, 255, 255),
    (0, 0, 0, 255),
)


def apply_opacity(base: Image.Image, opacity: float) -> Image.Image:
    """
    Return a copy of ``base`` with every pixel's alpha multiplied by ``opacity``.
    Colour channels are untouched. Opacity 1.0 returns the RGBA image as-is.
    """
    if base.mode != "RGBA":
        base = base.convert("RGBA")
    if opacity >= 1.0:
        return base

    arr: UInt8Array = np.array(base, dtype=np.uint8)
    alpha: FloatArray = arr[..., 3].astype(np.float32) * np.float32(max(opacity, 0.0))
    out: UInt8Array = arr.copy()
    out[..., 3] = np.clip(np.rint(alpha), 0, 255).astype(np.uint8)
    return Image.fromarray(out)


def missing_texture(
    size: int = MISSING_TEXTURE_SIZE, tiles: int = 4
) -> Image.Image:
    """
    Build the magenta/black checkerboard used in place of an asset that failed
    to load. ``tiles`` squares per side; ``size`` must be divisible by ``tiles``.
    """
    if size <= 0 or tiles <= 0 or size % tiles != 0:
        raise ValueError(f"Invalid checkerboard: size={size}, tiles={tiles}")
    tile = size // tiles
    idx: npt.NDArray[np.intp] = np.arange(size) // tile
    checker: BoolArray = (idx[:, None] + idx[None, :]) % 2 == 0

    out: UInt8Array = np.empty((size, size, 4), dtype=np.uint8)
    out[checker] = MISSING_TEXTURE_COLORS[0]
    out[~checker] = MISSING_TEXTURE_COLORS[1]
    return Image.fromarray(out)
