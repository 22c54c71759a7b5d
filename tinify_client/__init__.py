"""
Tinify Python client

Client library for compressing images with the Tinify API (TinyPNG, TinyJPG).

Usage:
    from tinify_client import Tinify, Convert, ImageType, fit

    # Initialize client
    client = Tinify().set_key("your_api_key").get_client()

    # Compress a file
    client.from_file("unoptimized.png").to_file("optimized.png")

    # Resize and convert; operations are sent in one request when writing
    client.from_url("https://tinypng.com/images/panda-happy.png") \\
        .resize(fit(400, 200)) \\
        .convert(Convert(ImageType.WEBP, ImageType.PNG)) \\
        .to_file("panda")

    # asyncio
    async with Tinify("your_api_key").get_async_client() as client:
        source = await client.from_file("unoptimized.png")
        data = await source.to_buffer()
"""

from .aio import AsyncClient, AsyncSource
from .client import API_ENDPOINT, Client, Source
from .errors import (
    ClientError,
    FileError,
    ReadError,
    SerializationError,
    ServerError,
    TinifyError,
    TransportError,
    Upstream,
    WriteError,
    error_for_status,
)
from .operations import (
    Convert,
    ImageType,
    Resize,
    ResizeMethod,
    Transform,
    cover,
    fit,
    scale,
    smallest_of,
    thumbnail,
)
from .tinify import Tinify

__version__ = "1.4.1"

__all__ = [
    "API_ENDPOINT",
    "Tinify",
    "Client",
    "Source",
    "AsyncClient",
    "AsyncSource",
    "TinifyError",
    "ClientError",
    "ServerError",
    "TransportError",
    "FileError",
    "ReadError",
    "WriteError",
    "SerializationError",
    "Upstream",
    "error_for_status",
    "Resize",
    "ResizeMethod",
    "Convert",
    "ImageType",
    "Transform",
    "thumbnail",
    "fit",
    "cover",
    "scale",
    "smallest_of",
]
