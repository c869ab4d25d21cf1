from pathlib import Path

import numpy as np
import pytest

from errors import UnsupportedSourceError
from image_source import (
    DecodedBuffer,
    FileReference,
    NetworkReference,
    RawBytes,
    as_source,
    describe_source,
)
from pixel_buffer import PixelBuffer


def test_bytes_like_become_raw_bytes():
    assert as_source(b"abc") == RawBytes(b"abc")
    assert as_source(bytearray(b"abc")) == RawBytes(b"abc")
    assert as_source(memoryview(b"abc")) == RawBytes(b"abc")


def test_paths_become_file_references():
    assert as_source(Path("a/b.png")) == FileReference(Path("a/b.png"))
    assert as_source("a/b.png") == FileReference(Path("a/b.png"))


@pytest.mark.parametrize("uri", ["http://example.com/a.png", "HTTPS://example.com/a.png"])
def test_urls_become_network_references(uri):
    assert as_source(uri) == NetworkReference(uri)


def test_buffers_become_decoded_buffers(gray_image):
    src = as_source(gray_image)
    assert isinstance(src, DecodedBuffer)
    assert src.buffer is gray_image

    src = as_source(np.zeros((2, 2, 3), dtype=np.uint8))
    assert isinstance(src, DecodedBuffer)
    assert src.buffer.layout == (2, 2, 3, "uint8")


def test_variants_pass_through(gray_image):
    for src in (RawBytes(b"x"), FileReference(Path("x")), NetworkReference("http://x"), DecodedBuffer(gray_image)):
        assert as_source(src) is src


@pytest.mark.parametrize("value", [42, None, 3.5, object(), ["a.png"]])
def test_unsupported_values(value):
    with pytest.raises(UnsupportedSourceError) as excinfo:
        as_source(value)
    assert excinfo.value.value is value
    assert excinfo.value.value_type == type(value).__name__
    assert type(value).__name__ in str(excinfo.value)


def test_unsupported_array_dtype():
    with pytest.raises(UnsupportedSourceError):
        as_source(np.zeros((2, 2, 3), dtype=np.float64))


def test_unsupported_source_error_is_type_error():
    with pytest.raises(TypeError):
        as_source(42)


def test_describe_source(gray_image):
    assert describe_source(FileReference(Path("img.png"))) == "img.png"
    assert describe_source(NetworkReference("http://x/a.png")) == "http://x/a.png"
    assert describe_source(RawBytes(b"1234")) == "<4 bytes>"
    assert describe_source(DecodedBuffer(gray_image)).startswith("PixelBuffer(4x3")


@pytest.mark.parametrize("make, payload", [
    (RawBytes, "not bytes"),
    (RawBytes, None),
    (FileReference, 12),
    (FileReference, None),
    (NetworkReference, b"http://example.com/a.png"),
    (DecodedBuffer, np.zeros((2, 2, 3), dtype=np.uint8)),
    (DecodedBuffer, None),
])
def test_variants_reject_wrong_payloads(make, payload):
    with pytest.raises(UnsupportedSourceError) as excinfo:
        make(payload)
    assert excinfo.value.value is payload
    assert excinfo.value.value_type == type(payload).__name__


def test_variants_normalize_payloads():
    assert RawBytes(bytearray(b"ab")).data == b"ab"
    assert FileReference("a/b.png").path == Path("a/b.png")
