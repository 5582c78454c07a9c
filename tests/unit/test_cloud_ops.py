"""Unit tests for idcfg/core/promotion_ops.py and idcfg/core/secrets_ops.py"""
from unittest.mock import MagicMock

import pytest

from idcfg.core.platform import VersionOfSecretStatus
from idcfg.core.promotion_ops import PromotionOps
from idcfg.core.secrets_ops import SecretsOps, VariablesOps


@pytest.fixture
def promotion(client):
    return PromotionOps(client, promotion=MagicMock())


def test_promote_maps_options_and_infos(promotion):
    promotion.promote(
        {"dryRun": False, "ignoreEncryptedSecret": True},
        {"ticketReference": "CHG-42", "promoter": "ops@example.com"},
    )
    promotion.promotion.promote.assert_called_once_with(
        dry_run=False,
        ignore_encrypted_secrets=True,
        unlock_environments_after_promotion=None,
        ticket_reference="CHG-42",
        promoter="ops@example.com",
        promotion_description=None,
    )


def test_promote_defaults_to_dry_run(promotion):
    promotion.promote({})
    assert promotion.promotion.promote.call_args[1]["dry_run"] is True


def test_lock_unlock_pass_through(promotion):
    promotion.promotion.lock.return_value = {"promotionId": "p-1"}
    assert promotion.lock() == {"promotionId": "p-1"}
    promotion.unlock("p-1")
    promotion.promotion.unlock.assert_called_once_with("p-1")
    promotion.get_report_by_id("r-1")
    promotion.promotion.get_report_by_id.assert_called_once_with("r-1")


def test_secret_version_status_is_validated(client):
    ops = SecretsOps(client, secrets=MagicMock())
    ops.set_status_of_version_of_secret("esv-a", "1", "ENABLED")
    ops.secrets.set_status_of_version_of_secret.assert_called_once_with("esv-a", "1", VersionOfSecretStatus.ENABLED)
    with pytest.raises(ValueError):
        ops.set_status_of_version_of_secret("esv-a", "1", "ARCHIVED")


def test_put_secret_defaults(client):
    ops = SecretsOps(client, secrets=MagicMock())
    ops.put_secret("esv-a", "value", "desc")
    ops.secrets.put_secret.assert_called_once_with("esv-a", "value", "desc", "generic", True)


def test_variables_pass_through(client):
    ops = VariablesOps(client, variables=MagicMock())
    ops.put_variable("esv-url", value="https://example.com")
    ops.variables.put_variable.assert_called_once_with("esv-url", "https://example.com", None, None, None)
    ops.delete_variable("esv-url")
    ops.variables.delete_variable.assert_called_once_with("esv-url")
