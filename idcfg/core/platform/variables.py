"""Environment variable (ESV) operations."""
from __future__ import annotations
from typing import List, Optional

from .client import PlatformClient, response_json
from ..utils import encode

API_VERSION = "protocol=1.0,resource=1.0"


class VariableService:
    """Service for environment variables."""

    def __init__(self, client: PlatformClient):
        self.client = client

    def _url(self, variable_id: str = "") -> str:
        base = f"{self.client.tenant_url}/environment/variables"
        return f"{base}/{variable_id}" if variable_id else base

    def get_variables(self) -> List[dict]:
        return response_json(self.client.get(self._url(), api_version=API_VERSION)).get("result", [])

    def get_variable(self, variable_id: str) -> dict:
        return response_json(self.client.get(self._url(variable_id), api_version=API_VERSION))

    def put_variable(
        self,
        variable_id: str,
        value: Optional[str] = None,
        value_base64: Optional[str] = None,
        description: Optional[str] = None,
        expression_type: Optional[str] = None,
    ) -> dict:
        """Create or update a variable; a plain value is base64-encoded before sending."""
        body = {}
        if value_base64:
            body["valueBase64"] = value_base64
        elif value:
            body["valueBase64"] = encode(value)
        if description:
            body["description"] = description
        if expression_type:
            body["expressionType"] = expression_type
        return response_json(self.client.put(self._url(variable_id), json=body, api_version=API_VERSION))

    def set_variable_description(self, variable_id: str, description: str) -> dict:
        resp = self.client.post(
            self._url(variable_id),
            params={"_action": "setDescription"},
            json={"description": description},
            api_version=API_VERSION,
        )
        return response_json(resp)

    def delete_variable(self, variable_id: str) -> dict:
        return response_json(self.client.delete(self._url(variable_id), api_version=API_VERSION))
