"""
asyncio Tinify client built on httpx.

AsyncClient and AsyncSource mirror Client and Source: every network call
and every file access is awaited, the operation chain itself stays
synchronous.
"""

import inspect
from pathlib import Path
from typing import Optional, Union

import aiofiles
import httpx

from .client import API_ENDPOINT, DEFAULT_TIMEOUT, BaseSource, PathOrFile, check_key
from .errors import ReadError, TransportError, WriteError


class AsyncSource(BaseSource):
    """
    One compression job on the asyncio client.

    Example:
        >>> source = await client.from_file("unoptimized.png")
        >>> await source.resize(fit(400, 200)).to_file("resized.png")
    """

    def __init__(
        self,
        key: str,
        http: httpx.AsyncClient,
        base_url: str = API_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        strict_transform: bool = True,
    ):
        super().__init__(key, base_url, timeout, strict_transform)
        self.http = http

    async def _request(
        self, method: str, url: str, authenticated: bool = True, **kwargs
    ) -> httpx.Response:
        if authenticated:
            kwargs["auth"] = self.auth
        try:
            response = await self.http.request(
                method, url, timeout=self.timeout, **kwargs
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        self._handle_errors(response)
        return response

    async def _from_response(self, response: httpx.Response) -> "AsyncSource":
        location = response.headers.get("Location")
        if location:
            result = await self._request("GET", location)
            self._store(result.content, location)
        else:
            self._store(response.content, None)
        return self

    async def from_buffer(self, buffer: bytes) -> "AsyncSource":
        response = await self._request("POST", self.shrink_url, content=bytes(buffer))
        return await self._from_response(response)

    async def from_file(self, file_path: PathOrFile) -> "AsyncSource":
        try:
            if isinstance(file_path, (str, Path)):
                async with aiofiles.open(file_path, "rb") as f:
                    file_data = await f.read()
            else:
                # plain binary files and aiofiles handles
                file_data = file_path.read()
                if inspect.isawaitable(file_data):
                    file_data = await file_data
        except OSError as e:
            raise ReadError(f"Could not read {file_path}: {e}", str(file_path)) from e
        return await self.from_buffer(file_data)

    async def from_url(self, url: str) -> "AsyncSource":
        response = await self._request(
            "GET", url, authenticated=False, follow_redirects=True
        )
        return await self.from_buffer(response.content)

    async def _flush(self):
        if self.operations.is_empty():
            return
        body = self._prepare_flush()
        response = await self._request(
            "POST",
            self.url,
            content=body,
            headers={"Content-Type": "application/json"},
        )
        await self._from_response(response)
        self.operations.clear()

    async def to_buffer(self) -> bytes:
        """Apply pending operations and return the resulting image bytes."""
        await self._flush()
        return self._result()

    async def to_file(self, file_path: Union[str, Path]):
        """Apply pending operations and write the resulting image to file_path."""
        data = await self.to_buffer()
        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(data)
                await f.flush()
        except OSError as e:
            raise WriteError(f"Could not write {file_path}: {e}", str(file_path)) from e


class AsyncClient:
    """
    asyncio Tinify API client.

    Args:
        key: Your Tinify API key
        base_url: Base URL of the Tinify API (default: https://api.tinify.com)
        timeout: Request timeout in seconds (default: 300)
        strict_transform: Reject a transform without a convert (default: True)
        transport: Optional httpx transport for the underlying AsyncClient

    The client owns an httpx.AsyncClient. Use it as an async context manager
    or call aclose() when done so its connections are released.

    Example:
        >>> async with AsyncClient("your_api_key") as client:
        ...     source = await client.from_url("https://tinypng.com/images/panda-happy.png")
        ...     await source.to_file("panda.png")
    """

    def __init__(
        self,
        key: str,
        base_url: str = API_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        strict_transform: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.key = check_key(key)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.strict_transform = strict_transform
        self.http = httpx.AsyncClient(timeout=timeout, transport=transport)

    def _source(self) -> AsyncSource:
        return AsyncSource(
            self.key,
            self.http,
            base_url=self.base_url,
            timeout=self.timeout,
            strict_transform=self.strict_transform,
        )

    async def from_file(self, file_path: PathOrFile) -> AsyncSource:
        """Choose a file (path, binary file or aiofiles handle) to compress."""
        return await self._source().from_file(file_path)

    async def from_buffer(self, buffer: bytes) -> AsyncSource:
        """Choose a buffer to compress."""
        return await self._source().from_buffer(buffer)

    async def from_url(self, url: str) -> AsyncSource:
        """Choose an image URL to compress."""
        return await self._source().from_url(url)

    async def aclose(self):
        await self.http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
