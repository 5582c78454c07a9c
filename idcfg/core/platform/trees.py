"""Authentication tree (journey) read operations."""
from __future__ import annotations
from typing import List

from .client import PlatformClient, response_json

API_VERSION = "protocol=2.1,resource=1.0"

TREES_PATH = "/realm-config/authentication/authenticationtrees/trees"


class TreeService:
    """Service for reading authentication trees."""

    def __init__(self, client: PlatformClient):
        self.client = client

    def get_trees(self) -> List[dict]:
        """Return every tree in the realm, each with its embedded node map."""
        resp = self.client.get(
            self.client.am_path(TREES_PATH),
            params={"_queryFilter": "true"},
            api_version=API_VERSION,
        )
        return response_json(resp).get("result", [])

    def get_tree(self, tree_id: str) -> dict:
        resp = self.client.get(self.client.am_path(f"{TREES_PATH}/{tree_id}"), api_version=API_VERSION)
        return response_json(resp)
