"""Shared test fixtures for convertio-cli."""

import pytest
from fakes import BASE_URL, FakeSession

from convertio_cli.api.client import ConvertioAPIClient


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def api_client(fake_session):
    client = ConvertioAPIClient("test-key", base_url=BASE_URL, request_timeout=5)
    client._session = fake_session
    return client


@pytest.fixture
def input_files(tmp_path):
    """Two small input files, a.jpg and b.png."""
    a = tmp_path / "a.jpg"
    b = tmp_path / "b.png"
    a.write_bytes(b"\xff\xd8\xff\xe0 fake jpeg")
    b.write_bytes(b"\x89PNG\r\n\x1a\n fake png")
    return a, b
