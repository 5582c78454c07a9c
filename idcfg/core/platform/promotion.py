"""Tenant promotion (lower → upper environment) operations."""
from __future__ import annotations
from enum import Enum
from typing import List, Optional

from .client import PlatformClient, response_json

API_VERSION = "protocol=1.0,resource=1.0"


class PromotionState(str, Enum):
    READY = "READY"
    UNLOCKED = "UNLOCKED"
    IN_PROGRESS = "IN_PROGRESS"


class LockState(str, Enum):
    LOCKED = "locked"
    LOCKING = "locking"
    UNLOCKED = "unlocked"


class PromotionService:
    """Service for the environment promotion API."""

    def __init__(self, client: PlatformClient):
        self.client = client

    def _url(self, suffix: str) -> str:
        return f"{self.client.tenant_url}/environment/promotion{suffix}"

    def get_status(self) -> dict:
        return response_json(self.client.get(self._url("/promote"), api_version=API_VERSION))

    def get_lock_status(self) -> dict:
        return response_json(self.client.get(self._url("/lock/state"), api_version=API_VERSION))

    def lock(self) -> dict:
        return response_json(self.client.post(self._url("/lock"), api_version=API_VERSION))

    def unlock(self, promotion_id: str) -> dict:
        return response_json(self.client.delete(self._url(f"/lock/{promotion_id}"), api_version=API_VERSION))

    def promote(
        self,
        dry_run: bool = True,
        ignore_encrypted_secrets: Optional[bool] = None,
        unlock_environments_after_promotion: Optional[bool] = None,
        ticket_reference: Optional[str] = None,
        promoter: Optional[str] = None,
        promotion_description: Optional[str] = None,
    ) -> dict:
        """Start a promotion; unset optional fields are omitted from the request."""
        body = {
            "dryRun": dry_run,
            "ignoreEncryptedSecret": ignore_encrypted_secrets,
            "unlockEnvironmentsAfterPromotion": unlock_environments_after_promotion,
            "ticketReference": ticket_reference,
            "promoter": promoter,
            "promotionDescription": promotion_description,
        }
        body = {k: v for k, v in body.items() if v is not None}
        return response_json(self.client.post(self._url("/promote"), json=body, api_version=API_VERSION))

    def get_provisional_report(self) -> dict:
        return response_json(self.client.get(self._url("/report/provisional"), api_version=API_VERSION))

    def get_reports(self) -> List[dict]:
        return response_json(self.client.get(self._url("/reports"), api_version=API_VERSION)) or []

    def build_report(self) -> dict:
        return response_json(self.client.post(self._url("/report"), api_version=API_VERSION))

    def get_last_report(self) -> dict:
        return response_json(self.client.get(self._url("/report"), api_version=API_VERSION))

    def get_report_by_id(self, report_id: str) -> dict:
        return response_json(self.client.get(self._url(f"/report/{report_id}"), api_version=API_VERSION))
