"""
Blocking Tinify client implementation.

This module contains the Client and Source classes built on requests.
For usage examples, see the package docstring: help(tinify_client)
"""

from pathlib import Path
from typing import BinaryIO, Optional, Tuple, Union

import requests

from .errors import (
    ClientError,
    ReadError,
    TransportError,
    Upstream,
    WriteError,
    error_for_status,
)
from .operations import Convert, Operations, Resize, Transform

API_ENDPOINT = "https://api.tinify.com"
DEFAULT_TIMEOUT = 300

PathOrFile = Union[str, Path, BinaryIO]


def check_key(key: Optional[str]) -> str:
    if not key:
        raise ClientError("Provide an API key with set_key(key)")
    return key


class BaseSource:
    """
    State shared by the blocking and asyncio sources.

    Holds the API key, the most recent image bytes, the URL of the most
    recent result and the operations waiting to be flushed. The operation
    methods only record what to do; nothing is sent until the result is
    written out.
    """

    def __init__(
        self,
        key: str,
        base_url: str = API_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        strict_transform: bool = True,
    ):
        self.key = key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.strict_transform = strict_transform
        self.buffer: Optional[bytes] = None
        self.url: Optional[str] = None
        self.operations = Operations()

    @property
    def auth(self) -> Tuple[str, str]:
        return ("api", self.key)

    @property
    def shrink_url(self) -> str:
        return f"{self.base_url}/shrink"

    @property
    def result_url(self) -> Optional[str]:
        """Location of the most recent result on the Tinify servers, if any."""
        return self.url

    def resize(self, resize: Resize):
        """
        Resize the compressed image.

        Args:
            resize: Resize descriptor, e.g. Resize(ResizeMethod.FIT, 400, 200)

        Returns:
            This source, for chaining
        """
        self.operations.resize = resize
        return self

    def convert(self, convert: Convert):
        """
        Convert the compressed image to another type.

        Args:
            convert: Convert descriptor, e.g. Convert(ImageType.WEBP, ImageType.PNG)

        Returns:
            This source, for chaining
        """
        self.operations.convert = convert
        return self

    def transform(self, transform: Transform):
        """
        Fill the transparent background of the image.

        Must be combined with convert() unless the client was created with
        strict_transform=False.

        Returns:
            This source, for chaining
        """
        self.operations.transform = transform
        return self

    def _prepare_flush(self) -> bytes:
        self.operations.validate(self.strict_transform)
        if self.url is None:
            raise ClientError("No result location to apply operations to")
        return self.operations.encode()

    def _handle_errors(self, response):
        """Handle HTTP errors."""
        error = error_for_status(
            response.status_code, Upstream.from_body(response.content)
        )
        if error is not None:
            raise error

    def _store(self, buffer: bytes, url: Optional[str]):
        self.buffer = buffer
        self.url = url

    def _result(self) -> bytes:
        if self.buffer is None:
            raise ClientError("No image has been uploaded yet")
        return bytes(self.buffer)

    def __repr__(self):
        size = None if self.buffer is None else len(self.buffer)
        return f"{type(self).__name__}(url={self.url!r}, size={size}, {self.operations!r})"


class Source(BaseSource):
    """
    One compression job.

    A Source is returned by Client.from_file, from_buffer or from_url and is
    meant to be used for a single chain of calls. It is not safe to use one
    Source from several threads at once.

    Example:
        >>> source = client.from_file("unoptimized.png")
        >>> source.resize(fit(400, 200)).convert(Convert(ImageType.WEBP))
        >>> source.to_file("optimized.webp")
    """

    def __init__(
        self,
        key: str,
        session: requests.Session,
        base_url: str = API_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        strict_transform: bool = True,
    ):
        super().__init__(key, base_url, timeout, strict_transform)
        self.session = session

    def _get(self, url: str, authenticated: bool = True) -> requests.Response:
        """Make GET request."""
        auth = self.auth if authenticated else None
        try:
            response = self.session.get(url, auth=auth, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(f"GET {url} failed: {e}") from e
        self._handle_errors(response)
        return response

    def _post(self, url: str, data: bytes, **kwargs) -> requests.Response:
        """Make authenticated POST request."""
        try:
            response = self.session.post(
                url, data=data, auth=self.auth, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as e:
            raise TransportError(f"POST {url} failed: {e}") from e
        self._handle_errors(response)
        return response

    def _from_response(self, response: requests.Response) -> "Source":
        location = response.headers.get("Location")
        if location:
            result = self._get(location)
            self._store(result.content, location)
        else:
            self._store(response.content, None)
        return self

    def from_buffer(self, buffer: bytes) -> "Source":
        """Upload image bytes to be compressed."""
        response = self._post(self.shrink_url, bytes(buffer))
        return self._from_response(response)

    def from_file(self, file_path: PathOrFile) -> "Source":
        """Upload an image file (path or file-like object) to be compressed."""
        try:
            if isinstance(file_path, (str, Path)):
                with open(file_path, "rb") as f:
                    file_data = f.read()
            else:
                file_data = file_path.read()
        except OSError as e:
            raise ReadError(f"Could not read {file_path}: {e}", str(file_path)) from e
        return self.from_buffer(file_data)

    def from_url(self, url: str) -> "Source":
        """Download an image from url and upload it to be compressed."""
        response = self._get(url, authenticated=False)
        return self.from_buffer(response.content)

    def _flush(self):
        if self.operations.is_empty():
            return
        body = self._prepare_flush()
        response = self._post(
            self.url, body, headers={"Content-Type": "application/json"}
        )
        self._from_response(response)
        self.operations.clear()

    def to_buffer(self) -> bytes:
        """
        Apply pending operations and return the resulting image bytes.

        Returns:
            Image bytes
        """
        self._flush()
        return self._result()

    def to_file(self, file_path: Union[str, Path]):
        """
        Apply pending operations and write the resulting image to file_path.

        Example:
            >>> client.from_file("photo.jpg").to_file("photo-optimized.jpg")
        """
        data = self.to_buffer()
        try:
            with open(file_path, "wb") as f:
                f.write(data)
                f.flush()
        except OSError as e:
            raise WriteError(f"Could not write {file_path}: {e}", str(file_path)) from e


class Client:
    """
    Tinify API client for compressing images.

    Args:
        key: Your Tinify API key
        base_url: Base URL of the Tinify API (default: https://api.tinify.com)
        timeout: Request timeout in seconds (default: 300)
        strict_transform: Reject a transform without a convert (default: True)
        session: requests.Session to use (default: a new session)
    """

    def __init__(
        self,
        key: str,
        base_url: str = API_ENDPOINT,
        timeout: float = DEFAULT_TIMEOUT,
        strict_transform: bool = True,
        session: Optional[requests.Session] = None,
    ):
        self.key = check_key(key)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.strict_transform = strict_transform
        self.session = session or requests.Session()

    def _source(self) -> Source:
        return Source(
            self.key,
            self.session,
            base_url=self.base_url,
            timeout=self.timeout,
            strict_transform=self.strict_transform,
        )

    def from_file(self, file_path: PathOrFile) -> Source:
        """
        Choose a file to compress.

        Args:
            file_path: Path to image file or file-like object

        Returns:
            Source holding the compressed image

        Raises:
            ReadError: If the file cannot be read
            ClientError: If the key is invalid or the file is not a supported image
            ServerError: If the Tinify API is temporarily unavailable
            TransportError: If the request fails

        Example:
            >>> client = Client("your_api_key")
            >>> client.from_file("unoptimized.png").to_file("optimized.png")
        """
        return self._source().from_file(file_path)

    def from_buffer(self, buffer: bytes) -> Source:
        """
        Choose a buffer to compress.

        Example:
            >>> with open("unoptimized.png", "rb") as f:
            ...     data = client.from_buffer(f.read()).to_buffer()
        """
        return self._source().from_buffer(buffer)

    def from_url(self, url: str) -> Source:
        """
        Choose an image URL to compress.

        The image is downloaded first and then uploaded like a buffer.
        """
        return self._source().from_url(url)

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
