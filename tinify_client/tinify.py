"""Configuration entry point: holds the API key and builds clients."""

from typing import Optional

import httpx
import requests

from .aio import AsyncClient
from .client import API_ENDPOINT, DEFAULT_TIMEOUT, Client


class Tinify:
    """
    Tinify configuration.

    Args:
        key: Your Tinify API key (can also be set later with set_key)
        base_url: Base URL of the Tinify API (default: https://api.tinify.com)
        timeout: Request timeout in seconds (default: 300)
        strict_transform: Reject a transform that is not combined with a
            convert instead of forwarding it to the API (default: True)

    Example:
        >>> client = Tinify().set_key("your_api_key").get_client()
    """

    def __init__(
        self,
        key: str = "",
        base_url: str = API_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        strict_transform: bool = True,
    ):
        self.key = key
        self.base_url = base_url
        self.timeout = timeout
        self.strict_transform = strict_transform

    def set_key(self, key: str) -> "Tinify":
        """Set the API key. Returns self for chaining."""
        self.key = key
        return self

    def get_client(self, session: Optional[requests.Session] = None) -> Client:
        """
        Get a new blocking client.

        Raises:
            ClientError: If no API key has been set
        """
        return Client(
            self.key,
            base_url=self.base_url,
            timeout=self.timeout,
            strict_transform=self.strict_transform,
            session=session,
        )

    def get_async_client(
        self, transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> AsyncClient:
        """
        Get a new asyncio client.

        The client holds open connections until it is closed, so use it as
        `async with tinify.get_async_client() as client:` or call
        `await client.aclose()` when done.

        Raises:
            ClientError: If no API key has been set
        """
        return AsyncClient(
            self.key,
            base_url=self.base_url,
            timeout=self.timeout,
            strict_transform=self.strict_transform,
            transport=transport,
        )
