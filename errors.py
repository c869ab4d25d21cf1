"""
Exception taxonomy for image comparison.

Every error raised by the resolver, the algorithms and the batch comparator
derives from ImageCompareError, so callers can catch the whole family at once.
"""

from typing import Any, Optional


class ImageCompareError(Exception):
    """Base class for all image comparison failures."""


class UnsupportedSourceError(ImageCompareError, TypeError):
    """
    The value passed as an image source is not one of the supported variants.

    Attributes:
        value: The offending value
        value_type: Name of its runtime type
    """

    def __init__(self, value: Any):
        self.value = value
        self.value_type = type(value).__name__
        super().__init__(
            f"The source ({value!r}) of type ({self.value_type}) passed in is unsupported"
        )


class DecodeError(ImageCompareError):
    """
    Bytes could not be turned into a pixel buffer.

    Attributes:
        origin: File path or URI the bytes came from, if known
    """

    def __init__(self, message: str, origin: Optional[str] = None):
        self.origin = origin
        if origin:
            message = f"{message} (origin: {origin})"
        super().__init__(message)


class NetworkError(ImageCompareError):
    """
    Transport failure or unsuccessful status while fetching a remote image.

    Attributes:
        uri: Requested URI
        status: HTTP status code, or None when the request never got a response
    """

    def __init__(self, uri: str, reason: str, status: Optional[int] = None):
        self.uri = uri
        self.status = status
        self.reason = reason
        super().__init__(f"Failed to fetch {uri}: {reason}")


class DimensionMismatchError(ImageCompareError, ValueError):
    """
    Two buffers are not geometrically or channel compatible.

    Attributes:
        layout_a: (height, width, channels, dtype) of the first buffer
        layout_b: (height, width, channels, dtype) of the second buffer
    """

    def __init__(self, layout_a: tuple, layout_b: tuple):
        self.layout_a = layout_a
        self.layout_b = layout_b
        super().__init__(
            f"Buffers are not compatible: {_describe(layout_a)} vs {_describe(layout_b)}"
        )


class BatchItemError(ImageCompareError):
    """
    A single candidate of a batch failed; the original error is the __cause__.

    Attributes:
        index: Position of the candidate in the input list
        candidate: The candidate source itself
    """

    def __init__(self, index: int, candidate: Any, error: BaseException):
        self.index = index
        self.candidate = candidate
        self.error = error
        super().__init__(f"Comparison against candidate #{index} ({candidate!r}) failed: {error}")


def _describe(layout: tuple) -> str:
    h, w, c, dtype = layout
    return f"{w}x{h}x{c} ({dtype})"
