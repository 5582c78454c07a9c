"""Identity management (IDM) system operations."""
from __future__ import annotations

from .client import PlatformClient, response_json
from ..utils import get_host_base_url


class IdmSystemService:
    """Service for IDM system-level actions."""

    def __init__(self, client: PlatformClient):
        self.client = client

    def test_connector_servers(self) -> dict:
        """Return {openicf: [{name, type, ok}, ...]} for all remote connector servers."""
        url = f"{get_host_base_url(self.client.host)}/openidm/system?_action=testConnectorServers"
        resp = self.client.post(url)
        return response_json(resp)
