"""Shared pytest fixtures for all tests."""

import httpx
import pytest
from fastapi.testclient import TestClient

from cli.config import Config
from fileheap import Client
from server.main import app
from server.storage import reset_store

TEST_ADDRESS = "http://fileheap.test"


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Path to temporary .fileheap directory
    """
    config_dir = tmp_path / '.fileheap'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Args:
        temp_config_dir: Temporary config directory fixture

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file for testing uploads.

    Returns:
        Path to sample text file
    """
    file_path = tmp_path / 'test.txt'
    file_path.write_text('Sample content for testing')
    return file_path


@pytest.fixture
def store():
    """Fresh, empty server store with a small page size to exercise paging."""
    return reset_store(page_size=2)


@pytest.fixture
def server_api(store):
    """FastAPI test client against a fresh store."""
    return TestClient(app)


@pytest.fixture
def live_client(store):
    """fileheap Client whose requests are served in-process by the development server."""
    client = Client(TEST_ADDRESS)
    client.session = TestClient(app, base_url=TEST_ADDRESS)
    yield client
    client.close()


class RecordingHandler:
    """
    MockTransport handler that records requests and answers from a queue.

    Each queued response is either an httpx.Response or a callable taking the
    request and returning one.
    """

    def __init__(self):
        self.requests = []
        self.responses = []

    def add(self, response):
        self.responses.append(response)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if not self.responses:
            return httpx.Response(500, json={"code": 500, "message": "no response queued"})
        response = self.responses.pop(0)
        if callable(response):
            return response(request)
        return response


@pytest.fixture
def handler():
    return RecordingHandler()


@pytest.fixture
def mock_client(handler):
    """fileheap Client whose transport is a recording MockTransport."""
    client = Client(TEST_ADDRESS, transport=httpx.MockTransport(handler))
    yield client
    client.close()
