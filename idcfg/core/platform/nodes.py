"""Authentication tree node operations."""
from __future__ import annotations
from typing import List

from .client import PlatformClient, response_json

API_VERSION = "protocol=2.1,resource=1.0"

NODES_PATH = "/realm-config/authentication/authenticationtrees/nodes"


class NodeService:
    """Service for reading and deleting node configuration objects."""

    def __init__(self, client: PlatformClient):
        """Initialize node service.

        Args:
            client: Authenticated platform client
        """
        self.client = client

    def get_node_types(self) -> List[dict]:
        """Return all node types known to the platform ({_id, name, ...})."""
        resp = self.client.post(
            self.client.am_path(f"{NODES_PATH}?_action=getAllTypes"),
            json={},
            api_version=API_VERSION,
        )
        return response_json(resp).get("result", [])

    def get_nodes_by_type(self, node_type: str) -> List[dict]:
        """Return all configured instances of a node type."""
        resp = self.client.get(
            self.client.am_path(f"{NODES_PATH}/{node_type}"),
            params={"_queryFilter": "true"},
            api_version=API_VERSION,
        )
        return response_json(resp).get("result", [])

    def get_node(self, node_id: str, node_type: str) -> dict:
        resp = self.client.get(self.client.am_path(f"{NODES_PATH}/{node_type}/{node_id}"), api_version=API_VERSION)
        return response_json(resp)

    def put_node(self, node_id: str, node_type: str, node_data: dict) -> dict:
        payload = {k: v for k, v in node_data.items() if k not in ("_rev",)}
        resp = self.client.put(
            self.client.am_path(f"{NODES_PATH}/{node_type}/{node_id}"),
            json=payload,
            api_version=API_VERSION,
        )
        return response_json(resp)

    def delete_node(self, node_id: str, node_type: str) -> dict:
        resp = self.client.delete(self.client.am_path(f"{NODES_PATH}/{node_type}/{node_id}"), api_version=API_VERSION)
        return response_json(resp)
