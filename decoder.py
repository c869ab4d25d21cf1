"""
Decoding of encoded image bytes into a PixelBuffer using OpenCV.
"""

from typing import Optional

import cv2
import numpy as np

from errors import DecodeError
from pixel_buffer import PixelBuffer, SUPPORTED_DTYPES

# OpenCV channel order -> RGB(A)
_TO_RGB = {
    3: cv2.COLOR_BGR2RGB,
    4: cv2.COLOR_BGRA2RGBA,
}


def decode_image(data: bytes, origin: Optional[str] = None) -> PixelBuffer:
    """
    Decode an encoded image (PNG, JPEG, BMP, ...) into a PixelBuffer.

    The image is read unchanged, so 16-bit PNGs keep their depth and alpha
    channels are preserved.

    Args:
        data: Encoded image bytes
        origin: File path or URI of the bytes, for error messages

    Returns:
        PixelBuffer in RGB(A) or grayscale channel order

    Raises:
        DecodeError: the bytes are empty or not a recognized image format
    """
    if not data:
        raise DecodeError("No image data", origin)

    buf = np.frombuffer(data, dtype=np.uint8)
    try:
        arr = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED)
    except cv2.error as err:
        raise DecodeError(f"Image decoding failed: {err}", origin) from err
    if arr is None:
        raise DecodeError("Bytes are not a recognized image format", origin)
    if arr.dtype not in SUPPORTED_DTYPES:
        raise DecodeError(f"Unsupported channel depth: {arr.dtype}", origin)

    if arr.ndim == 3 and arr.shape[2] in _TO_RGB:
        arr = cv2.cvtColor(arr, _TO_RGB[arr.shape[2]])

    return PixelBuffer(arr)
