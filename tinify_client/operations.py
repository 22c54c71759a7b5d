"""
Server-side operations applied after the initial compression.

Each descriptor validates its arguments on construction and knows its own
JSON shape. Operations are collected in an Operations record and sent to the
result URL together in a single request.
"""

import json
import re
from typing import Any, Dict, List, Optional

from .errors import ClientError, SerializationError


class ResizeMethod:
    """The way an image is resized."""

    #: Scale the image down proportionally. Needs exactly one dimension.
    SCALE = "scale"
    #: Scale down proportionally so the image fits within the dimensions.
    FIT = "fit"
    #: Scale proportionally and crop so the result has exactly the dimensions.
    COVER = "cover"
    #: Like cover, but detects cut out images with plain backgrounds.
    THUMB = "thumb"

    ALL = (SCALE, FIT, COVER, THUMB)


class ImageType:
    """Target MIME types for conversion."""

    PNG = "image/png"
    JPEG = "image/jpeg"
    WEBP = "image/webp"
    AVIF = "image/avif"
    WILDCARD = "*/*"


NAMED_BACKGROUNDS = ("white", "black")
_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


class Resize:
    """
    Resize the compressed image.

    Images are never scaled up: if the target dimensions are larger than the
    original ones the image keeps its size.

    Args:
        method: One of ResizeMethod.SCALE, FIT, COVER or THUMB
        width: Target width in pixels
        height: Target height in pixels

    Raises:
        ClientError: If the method is unknown or the dimensions don't match it
    """

    def __init__(
        self, method: str, width: Optional[int] = None, height: Optional[int] = None
    ):
        if method not in ResizeMethod.ALL:
            raise ClientError(f"Unknown resize method: {method!r}")

        for name, value in (("width", width), ("height", height)):
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ClientError(f"Resize {name} must be a positive integer")

        if method == ResizeMethod.SCALE:
            if (width is None) == (height is None):
                raise ClientError(
                    "Resize method 'scale' requires exactly one of width or height"
                )
        elif width is None or height is None:
            raise ClientError(f"Resize method {method!r} requires width and height")

        self.method = method
        self.width = width
        self.height = height

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"method": self.method}
        if self.width is not None:
            data["width"] = self.width
        if self.height is not None:
            data["height"] = self.height
        return data

    def __eq__(self, other):
        return isinstance(other, Resize) and self.to_json() == other.to_json()

    def __repr__(self):
        return f"Resize({self.method!r}, width={self.width}, height={self.height})"


class Convert:
    """
    Convert the image to another type.

    When more than one type is given, the smallest result is returned.
    Converting counts as one additional compression.
    """

    def __init__(self, *types: str):
        if len(types) == 1 and isinstance(types[0], (list, tuple)):
            types = tuple(types[0])
        if not types:
            raise ClientError("Convert requires at least one image type")
        for image_type in types:
            if not isinstance(image_type, str) or not image_type:
                raise ClientError(f"Invalid image type: {image_type!r}")
        self.types: List[str] = list(types)

    def to_json(self) -> Dict[str, Any]:
        # A single type goes out as a bare string, several as an array
        if len(self.types) == 1:
            return {"type": self.types[0]}
        return {"type": list(self.types)}

    def __eq__(self, other):
        return isinstance(other, Convert) and self.types == other.types

    def __repr__(self):
        return f"Convert({', '.join(repr(t) for t in self.types)})"


class Transform:
    """
    Stylistic transformation of the image.

    The background fills transparent areas and is needed when converting a
    transparent image to a type without alpha support (like JPEG). It can be
    a hex value ("#000000") or one of "white" and "black".
    """

    def __init__(self, background: str):
        if not isinstance(background, str) or not (
            background in NAMED_BACKGROUNDS or _HEX_COLOR.match(background)
        ):
            raise ClientError(f"Invalid background color: {background!r}")
        self.background = background

    def to_json(self) -> Dict[str, Any]:
        return {"background": self.background}

    def __eq__(self, other):
        return isinstance(other, Transform) and self.background == other.background

    def __repr__(self):
        return f"Transform({self.background!r})"


class Operations:
    """Pending operations of one job: at most one of each kind."""

    def __init__(self):
        self.resize: Optional[Resize] = None
        self.convert: Optional[Convert] = None
        self.transform: Optional[Transform] = None

    def is_empty(self) -> bool:
        return self.resize is None and self.convert is None and self.transform is None

    def clear(self):
        self.resize = None
        self.convert = None
        self.transform = None

    def validate(self, strict_transform: bool = True):
        """
        Check the combination of pending operations.

        A background only has an effect when converting to a type without
        transparency, so with strict_transform a transform that is not paired
        with a convert is rejected.
        """
        if strict_transform and self.transform is not None and self.convert is None:
            raise ClientError("Transform must be combined with a convert operation")

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if self.resize is not None:
            payload["resize"] = self.resize.to_json()
        if self.convert is not None:
            payload["convert"] = self.convert.to_json()
        if self.transform is not None:
            payload["transform"] = self.transform.to_json()
        return payload

    def encode(self) -> bytes:
        """Serialize the pending operations as a JSON request body."""
        try:
            return json.dumps(self.to_payload(), separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Could not encode operations: {e}") from e

    def __repr__(self):
        return (
            f"Operations(resize={self.resize!r}, convert={self.convert!r}, "
            f"transform={self.transform!r})"
        )


# Convenience constructors for common operations


def thumbnail(width: int, height: int) -> Resize:
    """Smart-cropped thumbnail of exactly width x height."""
    return Resize(ResizeMethod.THUMB, width, height)


def fit(width: int, height: int) -> Resize:
    """Scale down to fit within width x height."""
    return Resize(ResizeMethod.FIT, width, height)


def cover(width: int, height: int) -> Resize:
    """Scale and crop to exactly width x height."""
    return Resize(ResizeMethod.COVER, width, height)


def scale(width: Optional[int] = None, height: Optional[int] = None) -> Resize:
    """Scale down proportionally to the given width or height."""
    return Resize(ResizeMethod.SCALE, width, height)


def smallest_of(*types: str) -> Convert:
    """Convert to whichever of the given types is smallest (any type by default)."""
    return Convert(*(types or (ImageType.WILDCARD,)))
