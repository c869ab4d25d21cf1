"""
Runtime settings for resolving and comparing images.
"""

import os
from dataclasses import dataclass

DEFAULT_FETCH_TIMEOUT = 30.0
DEFAULT_MAX_CONCURRENCY = 8
DEFAULT_USER_AGENT = "image-compare/1.0"


@dataclass
class CompareConfig:
    """
    Settings shared by compare_images and list_compare.

    Attributes:
        fetch_timeout: Total timeout of one network fetch, in seconds
        max_concurrency: Maximum number of comparisons in flight in a batch
        user_agent: User-Agent header sent with network fetches
    """
    fetch_timeout: float = DEFAULT_FETCH_TIMEOUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        if self.fetch_timeout <= 0:
            raise ValueError(f"fetch_timeout must be positive, got {self.fetch_timeout}")
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")

    @classmethod
    def from_env(cls) -> "CompareConfig":
        """Build a config from IMAGE_COMPARE_* environment variables."""
        return cls(
            fetch_timeout=float(os.getenv("IMAGE_COMPARE_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT)),
            max_concurrency=int(os.getenv("IMAGE_COMPARE_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY)),
            user_agent=os.getenv("IMAGE_COMPARE_USER_AGENT", DEFAULT_USER_AGENT),
        )
