"""OAuth2 client (agent) management operations."""
from __future__ import annotations
from typing import List

from .client import PlatformClient, response_json
from ..utils import delete_deep_by_key

API_VERSION = "protocol=2.1,resource=1.0"

OAUTH2_CLIENTS_PATH = "/realm-config/agents/OAuth2Client"


class OAuth2ClientService:
    """Service for managing OAuth2 clients in the current realm."""

    def __init__(self, client: PlatformClient):
        self.client = client

    def get_oauth2_clients(self) -> List[dict]:
        resp = self.client.get(
            self.client.am_path(OAUTH2_CLIENTS_PATH),
            params={"_queryFilter": "true"},
            api_version=API_VERSION,
        )
        return response_json(resp).get("result", [])

    def get_oauth2_client(self, client_id: str) -> dict:
        resp = self.client.get(self.client.am_path(f"{OAUTH2_CLIENTS_PATH}/{client_id}"), api_version=API_VERSION)
        return response_json(resp)

    def put_oauth2_client(self, client_id: str, client_data: dict) -> dict:
        """Create or replace an OAuth2 client.

        Encrypted attributes cannot be transported between tenants, so every
        key ending in ``-encrypted`` is dropped, as are ``_provider`` and ``_rev``.
        """
        payload = delete_deep_by_key(client_data, "-encrypted")
        payload.pop("_provider", None)
        payload.pop("_rev", None)
        resp = self.client.put(
            self.client.am_path(f"{OAUTH2_CLIENTS_PATH}/{client_id}"),
            json=payload,
            api_version=API_VERSION,
        )
        return response_json(resp)

    def delete_oauth2_client(self, client_id: str) -> dict:
        resp = self.client.delete(self.client.am_path(f"{OAUTH2_CLIENTS_PATH}/{client_id}"), api_version=API_VERSION)
        return response_json(resp)
