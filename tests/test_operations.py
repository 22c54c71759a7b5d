import json

import pytest

from tinify_client import (
    ClientError,
    Convert,
    ImageType,
    Resize,
    ResizeMethod,
    Transform,
    fit,
    scale,
    smallest_of,
    thumbnail,
)
from tinify_client.operations import Operations


def test_resize_scale_omits_unset_dimension():
    assert Resize(ResizeMethod.SCALE, width=150).to_json() == {
        "method": "scale",
        "width": 150,
    }
    assert Resize(ResizeMethod.SCALE, height=80).to_json() == {
        "method": "scale",
        "height": 80,
    }


def test_resize_scale_with_both_dimensions_is_rejected():
    with pytest.raises(ClientError):
        Resize(ResizeMethod.SCALE, 150, 100)


def test_resize_scale_without_dimensions_is_rejected():
    with pytest.raises(ClientError):
        scale()


@pytest.mark.parametrize("method", [ResizeMethod.FIT, ResizeMethod.COVER, ResizeMethod.THUMB])
def test_resize_requires_both_dimensions(method):
    with pytest.raises(ClientError):
        Resize(method, width=100)
    assert Resize(method, 100, 50).to_json() == {
        "method": method,
        "width": 100,
        "height": 50,
    }


@pytest.mark.parametrize("width", [0, -10, 1.5, "100", True])
def test_resize_rejects_invalid_dimensions(width):
    with pytest.raises(ClientError):
        Resize(ResizeMethod.SCALE, width=width)


def test_resize_rejects_unknown_method():
    with pytest.raises(ClientError):
        Resize("stretch", 100, 100)


def test_convert_single_type_is_bare_string():
    payload = Convert(ImageType.WEBP).to_json()
    assert payload == {"type": "image/webp"}
    assert isinstance(json.loads(json.dumps(payload))["type"], str)


def test_convert_several_types_is_array():
    payload = Convert(ImageType.WEBP, ImageType.PNG).to_json()
    assert payload == {"type": ["image/webp", "image/png"]}
    assert json.loads(json.dumps(payload))["type"] == ["image/webp", "image/png"]


def test_convert_accepts_a_list():
    assert Convert([ImageType.JPEG, ImageType.PNG]).types == ["image/jpeg", "image/png"]


def test_convert_requires_a_type():
    with pytest.raises(ClientError):
        Convert()


@pytest.mark.parametrize("background", ["white", "black", "#000", "#FF5733"])
def test_transform_accepts_colors(background):
    assert Transform(background).to_json() == {"background": background}


@pytest.mark.parametrize("background", ["red", "#12345", "FF5733", ""])
def test_transform_rejects_unknown_colors(background):
    with pytest.raises(ClientError):
        Transform(background)


def test_operations_payload_contains_only_pending_operations():
    operations = Operations()
    assert operations.is_empty()
    assert operations.to_payload() == {}

    operations.resize = fit(400, 200)
    operations.convert = Convert(ImageType.JPEG)
    operations.transform = Transform("#FFFFFF")

    assert json.loads(operations.encode()) == {
        "resize": {"method": "fit", "width": 400, "height": 200},
        "convert": {"type": "image/jpeg"},
        "transform": {"background": "#FFFFFF"},
    }

    operations.clear()
    assert operations.is_empty()


def test_operations_reject_transform_without_convert():
    operations = Operations()
    operations.transform = Transform("white")

    with pytest.raises(ClientError):
        operations.validate()
    operations.validate(strict_transform=False)


def test_helpers():
    assert thumbnail(100, 100) == Resize(ResizeMethod.THUMB, 100, 100)
    assert smallest_of() == Convert(ImageType.WILDCARD)
    assert smallest_of(ImageType.AVIF, ImageType.WEBP).types == ["image/avif", "image/webp"]
