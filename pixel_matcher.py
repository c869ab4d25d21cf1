"""
Pixel matching: mean normalized absolute channel difference.
"""

import numpy as np

from algorithm_base import Algorithm
from errors import DimensionMismatchError
from pixel_buffer import PixelBuffer


def normalized_channel_diff(a: np.ndarray, b: np.ndarray, max_value: int) -> np.ndarray:
    """
    Per-channel absolute difference scaled to [0, 1].

    Args:
        a: First pixel array (H, W, C)
        b: Second pixel array of the same shape and dtype
        max_value: Largest representable channel value

    Returns:
        float64 array of the same shape
    """
    diff = np.abs(a.astype(np.float64) - b.astype(np.float64))
    return diff / float(max_value)


class Pixel_Matcher(Algorithm):
    """
    Matcher comparing two images channel by channel.

    Score = sum over all pixels and channels of |a - b| / max_value,
    divided by width * height * channels. Range [0.0, 1.0]; 0.0 only when
    every channel of every pixel is equal.

    Both buffers must share width, height, channel count and bit depth.
    Nothing is resized or converted.
    """

    def __init__(self, tolerance: float = 0.0):
        """
        Initialize pixel matcher.

        Args:
            tolerance: Normalized per-channel differences at or below this
                       value count as 0. Must be in [0.0, 1.0).
        """
        super().__init__()
        if not 0.0 <= tolerance < 1.0:
            raise ValueError(f"tolerance must be in [0.0, 1.0), got {tolerance}")
        self.tolerance = tolerance

    def compare(self, a: PixelBuffer, b: PixelBuffer) -> float:
        """
        Compute the mean normalized absolute channel difference.

        Raises:
            DimensionMismatchError: geometry, channel count or bit depth differ
        """
        if a.layout != b.layout:
            raise DimensionMismatchError(a.layout, b.layout)

        diff = normalized_channel_diff(a.pixels, b.pixels, a.max_value)
        if self.tolerance > 0.0:
            diff[diff <= self.tolerance] = 0.0

        return float(diff.sum() / diff.size)

    def __repr__(self) -> str:
        return f"Pixel_Matcher(tolerance={self.tolerance})"


def default_algorithm() -> Algorithm:
    """Algorithm used when the caller does not pass one."""
    return Pixel_Matcher()
