"""Script store operations."""
from __future__ import annotations
from typing import List

from .client import PlatformClient, response_json

API_VERSION = "protocol=2.0,resource=1.0"


class ScriptService:
    """Service for reading and writing scripts.

    Script bodies travel base64-encoded in the ``script`` attribute.
    """

    def __init__(self, client: PlatformClient):
        self.client = client

    def get_scripts(self) -> List[dict]:
        resp = self.client.get(
            self.client.am_path("/scripts"),
            params={"_queryFilter": "true"},
            api_version=API_VERSION,
        )
        return response_json(resp).get("result", [])

    def get_script(self, script_id: str) -> dict:
        """Return {_id, name, script: <base64>, ...} for a script id."""
        resp = self.client.get(self.client.am_path(f"/scripts/{script_id}"), api_version=API_VERSION)
        return response_json(resp)

    def put_script(self, script_id: str, script_data: dict) -> dict:
        """Create or replace a script; script_data['script'] must be base64."""
        payload = {k: v for k, v in script_data.items() if k != "_rev"}
        resp = self.client.put(
            self.client.am_path(f"/scripts/{script_id}"),
            json=payload,
            api_version=API_VERSION,
        )
        return response_json(resp)

    def delete_script(self, script_id: str) -> dict:
        resp = self.client.delete(self.client.am_path(f"/scripts/{script_id}"), api_version=API_VERSION)
        return response_json(resp)
