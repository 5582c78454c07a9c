"""Pytest shared fixtures: an authenticated client and HTTP stubs."""
import pathlib
import sys
from unittest.mock import MagicMock

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from idcfg.core.platform import PlatformClient
from tests.helpers import HOST, make_response


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_network(monkeypatch):
    """Fail loudly if a unit test reaches the real network."""
    def _blocked(*args, **kwargs):
        raise AssertionError(f"Unexpected network call: {args} {kwargs}")

    monkeypatch.setattr(requests, "request", _blocked)
    monkeypatch.setattr(requests, "post", _blocked)


@pytest.fixture
def client():
    """Authenticated client against a 7.2.0 cloud tenant."""
    platform_client = PlatformClient(HOST, realm="alpha", deployment_type="cloud", am_version="7.2.0")
    platform_client.set_bearer_token("test-token")
    return platform_client


@pytest.fixture
def mock_request(monkeypatch):
    """Replace requests.request with a MagicMock returning an empty 200."""
    mock = MagicMock(return_value=make_response({}))
    monkeypatch.setattr(requests, "request", mock)
    return mock


# ─────────────────────────────────────────────────────────────────────────────
# Pytest Configuration
# ─────────────────────────────────────────────────────────────────────────────
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (requires a live tenant)"
    )
    config.addinivalue_line(
        "markers", "critical: marks tests guarding data-loss or consistency properties"
    )
