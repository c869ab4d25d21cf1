"""
The four forms an image may arrive in before decoding.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union
from urllib.parse import urlparse

import numpy as np

from errors import UnsupportedSourceError
from pixel_buffer import PixelBuffer

NETWORK_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class RawBytes:
    """Encoded image bytes (PNG, JPEG, ...)."""
    data: bytes

    def __post_init__(self):
        if not isinstance(self.data, (bytes, bytearray, memoryview)):
            raise UnsupportedSourceError(self.data)
        object.__setattr__(self, "data", bytes(self.data))

    def __repr__(self) -> str:
        return f"RawBytes(<{len(self.data)} bytes>)"


@dataclass(frozen=True)
class FileReference:
    """Path to an encoded image on the local file system."""
    path: Path

    def __post_init__(self):
        if not isinstance(self.path, (str, os.PathLike)):
            raise UnsupportedSourceError(self.path)
        object.__setattr__(self, "path", Path(self.path))


@dataclass(frozen=True)
class NetworkReference:
    """URI of an encoded image, fetched with a GET request."""
    uri: str

    def __post_init__(self):
        if not isinstance(self.uri, str):
            raise UnsupportedSourceError(self.uri)


@dataclass(frozen=True, eq=False)
class DecodedBuffer:
    """Already decoded image; resolution is a pass-through."""
    buffer: PixelBuffer

    def __post_init__(self):
        if not isinstance(self.buffer, PixelBuffer):
            raise UnsupportedSourceError(self.buffer)


ImageSource = Union[RawBytes, FileReference, NetworkReference, DecodedBuffer]

SOURCE_TYPES = (RawBytes, FileReference, NetworkReference, DecodedBuffer)


def as_source(value: Any) -> ImageSource:
    """
    Lift a plain Python value into an ImageSource variant.

    Args:
        value: bytes-like, Path, str (URL or file path), PixelBuffer,
               numpy array, or an ImageSource variant

    Returns:
        The matching ImageSource variant

    Raises:
        UnsupportedSourceError: value has none of the accepted forms
    """
    if isinstance(value, SOURCE_TYPES):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return RawBytes(bytes(value))
    if isinstance(value, Path):
        return FileReference(value)
    if isinstance(value, str):
        if urlparse(value).scheme.lower() in NETWORK_SCHEMES:
            return NetworkReference(value)
        return FileReference(Path(value))
    if isinstance(value, PixelBuffer):
        return DecodedBuffer(value)
    if isinstance(value, np.ndarray):
        try:
            return DecodedBuffer(PixelBuffer(value))
        except ValueError as err:
            raise UnsupportedSourceError(value) from err
    raise UnsupportedSourceError(value)


def describe_source(source: ImageSource) -> str:
    """Short human-readable label used in logs and CLI output."""
    if isinstance(source, FileReference):
        return str(source.path)
    if isinstance(source, NetworkReference):
        return source.uri
    if isinstance(source, RawBytes):
        return f"<{len(source.data)} bytes>"
    if isinstance(source, DecodedBuffer):
        return repr(source.buffer)
    return repr(source)
