"""
Blocking byte fetchers for file and network sources.

Both are called from worker threads by the resolver.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Union

import urllib3
from urllib3 import Retry
from urllib3.exceptions import HTTPError

from errors import DecodeError, NetworkError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

# Shared connection pool for image downloads. Redirects are followed, nothing is retried.
_POOL = urllib3.PoolManager(
    num_pools=10,
    maxsize=10,
    retries=Retry(total=None, connect=0, read=0, status=0, other=0, redirect=5),
)


def read_all_bytes(path: Union[str, Path]) -> bytes:
    """
    Read a whole file into memory.

    Raises:
        DecodeError: the file does not exist or cannot be read
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except OSError as err:
        raise DecodeError(f"Image file unreadable: {err.strerror or err}", str(path)) from err


def fetch(
    uri: str,
    timeout: Optional[float] = None,
    headers: Optional[dict] = None,
    pool: Optional[urllib3.PoolManager] = None,
) -> bytes:
    """
    GET a URI and return the full response body.

    Args:
        uri: http(s) URI to fetch
        timeout: Deadline for the whole request, body included, in seconds
                 (None: no limit). Checked between body chunks.
        headers: Extra request headers
        pool: Connection pool to use instead of the shared one

    Returns:
        Response body bytes

    Raises:
        NetworkError: transport failure, non-2xx status or deadline exceeded
    """
    pool = pool or _POOL
    deadline = None if timeout is None else time.monotonic() + timeout
    logger.debug("GET %s (timeout=%s)", uri, timeout)
    try:
        resp = pool.request(
            "GET",
            uri,
            headers=headers,
            timeout=urllib3.Timeout(connect=timeout, read=timeout),
            preload_content=False,
        )
        try:
            if not 200 <= resp.status < 300:
                raise NetworkError(uri, f"HTTP status {resp.status}", status=resp.status)
            chunks = []
            for chunk in resp.stream(CHUNK_SIZE):
                chunks.append(chunk)
                if deadline is not None and time.monotonic() > deadline:
                    raise NetworkError(uri, f"timed out after {timeout}s")
            data = b"".join(chunks)
        except BaseException:
            resp.close()
            raise
        resp.release_conn()
        return data
    except HTTPError as err:
        raise NetworkError(uri, str(err)) from err
    except OSError as err:
        raise NetworkError(uri, str(err)) from err
