"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SECRETS_DIR = Path("/run/secrets")
DEFAULT_REQUEST_TIMEOUT = 30
DEFAULT_MASTER_KEY_PATH = str(Path.home() / ".idcfg" / "masterkey.key")
DEPLOYMENT_TYPES = ("cloud", "forgeops", "classic")


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = SECRETS_DIR / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.debug("Loaded %s from %s", secret_name, SECRETS_DIR)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read %s/%s: %s", SECRETS_DIR, secret_name, e)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment (fallback)", env_var)
            return secret_value

    return None


@dataclass
class PlatformConfig:
    """Connection and runtime configuration."""
    host: str
    realm: str = "alpha"
    deployment_type: str = "cloud"
    # Empty means unknown: every node type is then classified custom
    am_version: str = ""

    # Authentication
    service_account_id: str = ""
    service_account_secret: str = ""
    bearer_token: str = ""

    request_timeout: int = DEFAULT_REQUEST_TIMEOUT
    master_key_path: str = DEFAULT_MASTER_KEY_PATH
    log_level: str = "INFO"

    @property
    def has_credentials(self) -> bool:
        return bool(self.bearer_token or (self.service_account_id and self.service_account_secret))

    def apply_logging(self) -> None:
        """Configure root logging at this config's log_level."""
        configure_logging(self.log_level)


def load_settings() -> PlatformConfig:
    """Load settings from environment variables and /run/secrets.

    Raises:
        RuntimeError: IDCFG_HOST missing, or a value is invalid
    """
    host = os.environ.get("IDCFG_HOST", "").strip()
    if not host:
        raise RuntimeError("Environment variable IDCFG_HOST is required.")

    deployment_type = os.environ.get("IDCFG_DEPLOYMENT_TYPE", "cloud").strip().lower()
    if deployment_type not in DEPLOYMENT_TYPES:
        raise RuntimeError(
            f"IDCFG_DEPLOYMENT_TYPE must be one of {', '.join(DEPLOYMENT_TYPES)}, got '{deployment_type}'."
        )

    timeout_str = os.environ.get("IDCFG_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
    try:
        request_timeout = int(timeout_str)
    except ValueError:
        raise RuntimeError(f"IDCFG_REQUEST_TIMEOUT must be an integer, got '{timeout_str}'.")
    if request_timeout <= 0:
        raise RuntimeError("IDCFG_REQUEST_TIMEOUT must be positive.")

    config = PlatformConfig(
        host=host.rstrip("/"),
        realm=os.environ.get("IDCFG_REALM", "alpha").strip() or "alpha",
        deployment_type=deployment_type,
        am_version=os.environ.get("IDCFG_AM_VERSION", "").strip(),
        service_account_id=os.environ.get("IDCFG_SERVICE_ACCOUNT_ID", "").strip(),
        service_account_secret=_load_secret_from_file(
            "idcfg_service_account_secret", "IDCFG_SERVICE_ACCOUNT_SECRET"
        ) or "",
        bearer_token=_load_secret_from_file("idcfg_bearer_token", "IDCFG_BEARER_TOKEN") or "",
        request_timeout=request_timeout,
        master_key_path=os.environ.get("IDCFG_MASTER_KEY_PATH", DEFAULT_MASTER_KEY_PATH),
        log_level=os.environ.get("IDCFG_LOG_LEVEL", "INFO").strip().upper() or "INFO",
    )

    logger.info(
        "Settings loaded; host=%s realm=%s deployment=%s version=%s",
        config.host, config.realm, config.deployment_type, config.am_version or "unknown",
    )
    if not config.has_credentials:
        logger.warning("No bearer token or service account configured; requests will fail with 401.")
    return config


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for scripts using the SDK."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
