"""Tenant promotion workflow.

Promotion copies configuration from a lower environment to an upper one. Both
environments must be locked first; a promotion can be dry-run to get a
provisional report without changing anything.
"""
from __future__ import annotations
import logging
from typing import List, Mapping, Optional

from .platform import PlatformClient, PromotionService

logger = logging.getLogger(__name__)


class PromotionOps:
    """Pass-through façade over PromotionService."""

    def __init__(self, client: PlatformClient, promotion: Optional[PromotionService] = None):
        self.client = client
        self.promotion = promotion or PromotionService(client)

    def get_lock_status(self) -> dict:
        return self.promotion.get_lock_status()

    def lock(self) -> dict:
        logger.info("Locking environments for promotion")
        return self.promotion.lock()

    def unlock(self, promotion_id: str) -> dict:
        logger.info("Unlocking environments [promotion_id=%s]", promotion_id)
        return self.promotion.unlock(promotion_id)

    def promote(self, options: Mapping, infos: Optional[Mapping] = None) -> dict:
        """Start a promotion.

        Args:
            options: dryRun, ignoreEncryptedSecret, unlockEnvironmentsAfterPromotion
            infos: ticketReference, promoter, promotionDescription
        """
        infos = infos or {}
        dry_run = options.get("dryRun", True)
        logger.info("Starting promotion [dry_run=%s]", dry_run)
        return self.promotion.promote(
            dry_run=dry_run,
            ignore_encrypted_secrets=options.get("ignoreEncryptedSecret"),
            unlock_environments_after_promotion=options.get("unlockEnvironmentsAfterPromotion"),
            ticket_reference=infos.get("ticketReference"),
            promoter=infos.get("promoter"),
            promotion_description=infos.get("promotionDescription"),
        )

    def get_status(self) -> dict:
        return self.promotion.get_status()

    def get_provisional_report(self) -> dict:
        return self.promotion.get_provisional_report()

    def get_reports(self) -> List[dict]:
        return self.promotion.get_reports()

    def build_report(self) -> dict:
        return self.promotion.build_report()

    def get_last_report(self) -> dict:
        return self.promotion.get_last_report()

    def get_report_by_id(self, report_id: str) -> dict:
        return self.promotion.get_report_by_id(report_id)
