from unittest.mock import MagicMock

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from tinify_client import Client

API_KEY = "test_key"


def _response(status: int, content: bytes = b"", headers=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = content
    response.headers = CaseInsensitiveDict(headers or {})
    return response


@pytest.fixture
def make_response():
    return _response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    return Client(API_KEY, session=session)
