"""Realm management operations (global configuration)."""
from __future__ import annotations
import logging
from typing import List, Optional

from .client import PlatformClient, response_json
from .exceptions import PlatformAPIError

API_VERSION = "protocol=2.0,resource=1.0"

logger = logging.getLogger(__name__)


class RealmService:
    """Service for managing realms."""

    def __init__(self, client: PlatformClient):
        """Initialize realm service.

        Args:
            client: Authenticated platform client
        """
        self.client = client

    def get_realms(self) -> List[dict]:
        resp = self.client.get("/json/global-config/realms", params={"_queryFilter": "true"}, api_version=API_VERSION)
        return response_json(resp).get("result", [])

    def get_realm(self, realm_id: str) -> dict:
        resp = self.client.get(f"/json/global-config/realms/{realm_id}", api_version=API_VERSION)
        return response_json(resp)

    def get_realm_by_name(self, name: str) -> Optional[dict]:
        """Return the realm whose name matches exactly, if it exists.

        Args:
            name: Realm name, e.g. "alpha"

        Returns:
            Realm representation or None if not found
        """
        for realm in self.get_realms():
            if realm.get("name") == name:
                return realm
        return None

    def put_realm(self, realm_id: str, realm_data: dict) -> dict:
        resp = self.client.put(f"/json/global-config/realms/{realm_id}", json=realm_data, api_version=API_VERSION)
        return response_json(resp)

    def delete_realm(self, realm_id: str) -> Optional[dict]:
        """Delete a realm, handling missing realms gracefully.

        Args:
            realm_id: Realm id (base64 of the realm path)

        Returns:
            The deleted realm, or None if it did not exist
        """
        try:
            resp = self.client.delete(f"/json/global-config/realms/{realm_id}", api_version=API_VERSION)
        except PlatformAPIError as exc:
            if exc.status_code == 404:
                logger.info("Realm '%s' not found", realm_id)
                return None
            logger.error("Failed to delete realm '%s': %s", realm_id, exc)
            raise
        logger.info("Realm '%s' deleted", realm_id)
        return response_json(resp)
