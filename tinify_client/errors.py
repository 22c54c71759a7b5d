"""
Tinify error taxonomy.

Every failure raised by the client is a TinifyError. HTTP status codes are
mapped to ClientError or ServerError by error_for_status(); network problems
surface as TransportError and local file problems as FileError.
"""

import json
from dataclasses import dataclass
from typing import Optional


ACCOUNT_MESSAGE = "There was a problem with your API key or with your API account."
CLIENT_MESSAGE = (
    "The request could not be completed because of a problem "
    "with the submitted data."
)
SERVER_MESSAGE = (
    "The request could not be completed because of a temporary problem "
    "with the Tinify API."
)


@dataclass(frozen=True)
class Upstream:
    """The `{error, message}` envelope returned by the Tinify API."""

    error: str
    message: str

    @classmethod
    def from_body(cls, body: bytes) -> Optional["Upstream"]:
        """
        Parse an error envelope from a response body.

        Returns None when the body is not a JSON object carrying the
        envelope (e.g. an HTML error page from a proxy).
        """
        if not body:
            return None
        try:
            data = json.loads(body)
        except ValueError:
            return None
        if not isinstance(data, dict) or "error" not in data:
            return None
        return cls(error=str(data["error"]), message=str(data.get("message", "")))

    def __str__(self) -> str:
        return f"{self.error}: {self.message}"


class TinifyError(Exception):
    """Base exception for Tinify client errors."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        upstream: Optional[Upstream] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.upstream = upstream

    def __str__(self) -> str:
        text = self.message
        if self.status is not None:
            text = f"{text} (HTTP {self.status})"
        if self.upstream is not None:
            text = f"{text} [{self.upstream}]"
        return text


class ClientError(TinifyError):
    """Caller-fixable error: bad credentials, unsupported input or bad parameters."""

    pass


class ServerError(TinifyError):
    """Temporary problem on the Tinify side; the request may be retried later."""

    pass


class TransportError(TinifyError):
    """Connection, timeout, DNS or TLS failure in the HTTP layer."""

    pass


class FileError(TinifyError):
    """Local filesystem error."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ReadError(FileError):
    """The source file could not be read."""

    pass


class WriteError(FileError):
    """The destination file could not be written."""

    pass


class SerializationError(TinifyError):
    """An operation payload could not be encoded as JSON."""

    pass


def error_for_status(
    status: int, upstream: Optional[Upstream] = None
) -> Optional[TinifyError]:
    """
    Map an HTTP status code to an error, or None for a successful response.

    401 and 415 are the documented client errors (bad key, unsupported
    media), 400 covers invalid operation parameters. Any other 4xx is also
    treated as client-caused and any 5xx as a temporary server problem.
    """
    if status == 401:
        return ClientError(ACCOUNT_MESSAGE, status, upstream)
    elif 400 <= status < 500:
        return ClientError(CLIENT_MESSAGE, status, upstream)
    elif 500 <= status < 600:
        return ServerError(SERVER_MESSAGE, status, upstream)
    return None
