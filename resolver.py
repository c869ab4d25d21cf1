"""
Normalization of any ImageSource into a decoded PixelBuffer.
"""

import asyncio
import logging
from typing import Callable, Optional

from config import CompareConfig
from decoder import decode_image
from errors import NetworkError, UnsupportedSourceError
from fetchers import fetch, read_all_bytes
from image_source import (
    DecodedBuffer,
    FileReference,
    ImageSource,
    NetworkReference,
    RawBytes,
)
from pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)


class ImageSourceResolver:
    """
    Turns image sources into pixel buffers.

    Blocking work (file reads, HTTP requests, decoding) runs in worker threads,
    so several resolutions awaited together proceed concurrently. Network
    fetches are abandoned with NetworkError once config.fetch_timeout has
    passed. Nothing is cached: resolving the same source twice reads and
    decodes it twice.
    """

    def __init__(
        self,
        config: Optional[CompareConfig] = None,
        decoder: Callable[..., PixelBuffer] = decode_image,
        file_reader: Callable[..., bytes] = read_all_bytes,
        fetcher: Callable[..., bytes] = fetch,
    ):
        """
        Args:
            config: Timeouts and request headers (defaults to CompareConfig())
            decoder: decode(data, origin) -> PixelBuffer
            file_reader: read(path) -> bytes
            fetcher: fetch(uri, timeout, headers) -> bytes
        """
        self.config = config or CompareConfig()
        self.decoder = decoder
        self.file_reader = file_reader
        self.fetcher = fetcher

    async def resolve(self, source: ImageSource) -> PixelBuffer:
        if isinstance(source, DecodedBuffer):
            return source.buffer
        if isinstance(source, RawBytes):
            logger.debug("Decoding %d raw bytes", len(source.data))
            return await asyncio.to_thread(self.decoder, source.data, None)
        if isinstance(source, FileReference):
            return await self._resolve_file(source)
        if isinstance(source, NetworkReference):
            return await self._resolve_network(source)
        raise UnsupportedSourceError(source)

    async def _resolve_file(self, source: FileReference) -> PixelBuffer:
        origin = str(source.path)
        logger.debug("Reading image file %s", origin)
        data = await asyncio.to_thread(self.file_reader, source.path)
        return await asyncio.to_thread(self.decoder, data, origin)

    async def _resolve_network(self, source: NetworkReference) -> PixelBuffer:
        timeout = self.config.fetch_timeout
        logger.debug("Fetching image %s", source.uri)
        try:
            data = await asyncio.wait_for(
                asyncio.to_thread(
                    self.fetcher,
                    source.uri,
                    timeout,
                    {"User-Agent": self.config.user_agent},
                ),
                timeout,
            )
        except asyncio.TimeoutError as err:
            raise NetworkError(source.uri, f"timed out after {timeout}s") from err
        logger.debug("Fetched %d bytes from %s", len(data), source.uri)
        return await asyncio.to_thread(self.decoder, data, source.uri)


async def resolve(source: ImageSource, config: Optional[CompareConfig] = None) -> PixelBuffer:
    """Resolve one source with the default collaborators."""
    return await ImageSourceResolver(config).resolve(source)
