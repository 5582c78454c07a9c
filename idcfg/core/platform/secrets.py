"""Environment secret (ESV) and secret version operations."""
from __future__ import annotations
from enum import Enum
from typing import List

from .client import PlatformClient, response_json
from ..utils import encode

API_VERSION = "protocol=1.0,resource=1.0"


class VersionOfSecretStatus(str, Enum):
    ENABLED = "ENABLED"
    DISABLED = "DISABLED"


class SecretService:
    """Service for environment secrets."""

    def __init__(self, client: PlatformClient):
        self.client = client

    def _url(self, suffix: str = "") -> str:
        return f"{self.client.tenant_url}/environment/secrets{suffix}"

    def get_secrets(self) -> List[dict]:
        return response_json(self.client.get(self._url(), api_version=API_VERSION)).get("result", [])

    def get_secret(self, secret_id: str) -> dict:
        return response_json(self.client.get(self._url(f"/{secret_id}"), api_version=API_VERSION))

    def put_secret(
        self,
        secret_id: str,
        value: str,
        description: str = "",
        encoding: str = "generic",
        use_in_placeholders: bool = True,
    ) -> dict:
        if encoding != "generic":
            raise ValueError(f"Unsupported secret encoding: {encoding}")
        body = {
            "valueBase64": encode(value),
            "description": description,
            "encoding": encoding,
            "useInPlaceholders": use_in_placeholders,
        }
        return response_json(self.client.put(self._url(f"/{secret_id}"), json=body, api_version=API_VERSION))

    def set_secret_description(self, secret_id: str, description: str) -> dict:
        resp = self.client.post(
            self._url(f"/{secret_id}"),
            params={"_action": "setDescription"},
            json={"description": description},
            api_version=API_VERSION,
        )
        return response_json(resp)

    def delete_secret(self, secret_id: str) -> dict:
        return response_json(self.client.delete(self._url(f"/{secret_id}"), api_version=API_VERSION))

    def get_secret_versions(self, secret_id: str) -> List[dict]:
        return response_json(self.client.get(self._url(f"/{secret_id}/versions"), api_version=API_VERSION)) or []

    def create_new_version_of_secret(self, secret_id: str, value: str) -> dict:
        resp = self.client.post(
            self._url(f"/{secret_id}/versions"),
            params={"_action": "create"},
            json={"valueBase64": encode(value)},
            api_version=API_VERSION,
        )
        return response_json(resp)

    def get_version_of_secret(self, secret_id: str, version: str) -> dict:
        return response_json(self.client.get(self._url(f"/{secret_id}/versions/{version}"), api_version=API_VERSION))

    def set_status_of_version_of_secret(self, secret_id: str, version: str, status: VersionOfSecretStatus) -> dict:
        resp = self.client.post(
            self._url(f"/{secret_id}/versions/{version}"),
            params={"_action": "changestatus"},
            json={"status": VersionOfSecretStatus(status).value},
            api_version=API_VERSION,
        )
        return response_json(resp)

    def delete_version_of_secret(self, secret_id: str, version: str) -> dict:
        return response_json(self.client.delete(self._url(f"/{secret_id}/versions/{version}"), api_version=API_VERSION))
