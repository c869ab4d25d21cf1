"""
Decoded, in-memory pixel grid shared by the resolver and the algorithms.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

# dtype -> channel bit depth
SUPPORTED_DTYPES = {
    np.dtype(np.uint8): 8,
    np.dtype(np.uint16): 16,
}


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """
    Immutable grid of pixels.

    Pixels are stored as a numpy array of shape (height, width, channels)
    with channel order R, G, B[, A] (or a single luminance channel).
    Channel values are unsigned integers of a fixed bit depth: 8 (uint8)
    or 16 (uint16).
    """
    pixels: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.pixels)
        if arr.dtype not in SUPPORTED_DTYPES:
            raise ValueError(f"Unsupported channel dtype: {arr.dtype} (expected uint8 or uint16)")
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]
        if arr.ndim != 3:
            raise ValueError(f"Pixel array must be (H, W) or (H, W, C), got shape {arr.shape}")
        if arr.size == 0:
            raise ValueError(f"Pixel array must not be empty, got shape {arr.shape}")

        arr = np.array(arr, copy=True, order="C")
        arr.setflags(write=False)
        object.__setattr__(self, "pixels", arr)

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def channel_count(self) -> int:
        return int(self.pixels.shape[2])

    @property
    def bit_depth(self) -> int:
        return SUPPORTED_DTYPES[self.pixels.dtype]

    @property
    def max_value(self) -> int:
        """Largest representable channel value (255 for 8-bit channels)."""
        return (1 << self.bit_depth) - 1

    @property
    def data(self) -> np.ndarray:
        """Flat read-only view; len(data) == width * height * channel_count."""
        return self.pixels.reshape(-1)

    @property
    def layout(self) -> Tuple[int, int, int, str]:
        return (self.height, self.width, self.channel_count, str(self.pixels.dtype))

    def pixel(self, x: int, y: int) -> Tuple[int, ...]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} buffer")
        return tuple(int(v) for v in self.pixels[y, x])

    def __repr__(self) -> str:
        return f"PixelBuffer({self.width}x{self.height}, channels={self.channel_count}, bit_depth={self.bit_depth})"
