"""Low-level HTTP client for the identity platform REST API.

Handles authentication, token management, API versioning and HTTP operations.
"""
from __future__ import annotations
import logging
import os
from typing import Optional, Dict, Any
from datetime import datetime, timedelta

import requests

from .exceptions import PlatformAPIError, PlatformConnectionError, UnsupportedDeploymentError
from ..utils import get_realm_path, get_tenant_url

REQUEST_TIMEOUT = 30

logger = logging.getLogger(__name__)


class PlatformClient:
    """HTTP client for the identity platform with automatic token management.

    Features:
    - Automatic token refresh when expired (service account flow)
    - Per-request ``Accept-API-Version`` header
    - Centralized error handling
    - Realm-aware URL helpers for the AM and environment APIs

    Usage:
        client = PlatformClient("https://tenant.example.com/am", realm="alpha")
        client.set_bearer_token(token)
        response = client.get(client.am_path("/realm-config/saml2?_queryFilter=true"))
    """

    def __init__(
        self,
        host: Optional[str] = None,
        realm: str = "alpha",
        deployment_type: str = "cloud",
        am_version: str = "",
        timeout: int = REQUEST_TIMEOUT,
    ):
        """Initialize platform client.

        Args:
            host: Platform base URL including the AM context (defaults to IDCFG_HOST env var)
            realm: Realm the realm-scoped services operate on
            deployment_type: "cloud", "forgeops" or "classic"
            am_version: Platform version string, e.g. "7.2.0"
            timeout: Per-request timeout in seconds
        """
        self.host = (host or os.environ.get("IDCFG_HOST", "")).rstrip("/")
        self.realm = realm
        self.deployment_type = deployment_type
        self.am_version = am_version
        self.timeout = timeout
        self._token: Optional[str] = None
        self._token_expires_at: Optional[datetime] = None
        self._auth_method: Optional[str] = None
        self._auth_params: Dict[str, Any] = {}

    @classmethod
    def from_settings(cls, config) -> "PlatformClient":
        """Build an authenticated client from a PlatformConfig."""
        client = cls(
            config.host,
            realm=config.realm,
            deployment_type=config.deployment_type,
            am_version=config.am_version,
            timeout=config.request_timeout,
        )
        if config.bearer_token:
            client.set_bearer_token(config.bearer_token)
        elif config.service_account_id and config.service_account_secret:
            client.authenticate_service_account(config.service_account_id, config.service_account_secret)
        return client

    @property
    def realm_path(self) -> str:
        return get_realm_path(self.realm)

    @property
    def tenant_url(self) -> str:
        """Base URL of the environment APIs (secrets, variables, promotion).

        Raises:
            UnsupportedDeploymentError: Only cloud tenants expose these APIs
        """
        if self.deployment_type != "cloud":
            raise UnsupportedDeploymentError(
                f"Environment APIs require a cloud deployment, not '{self.deployment_type}'"
            )
        return get_tenant_url(self.host)

    def am_path(self, path: str) -> str:
        """Return a realm-scoped AM JSON path, e.g. /json/realms/root/realms/alpha/scripts."""
        return f"/json{self.realm_path}{path}"

    def set_bearer_token(self, token: str, expires_in: int = 3600) -> None:
        """Use a pre-obtained access token.

        Args:
            token: Access token
            expires_in: Token validity in seconds (default: 1 hour)
        """
        self._auth_method = "bearer"
        self._token = token
        self._token_expires_at = datetime.now() + timedelta(seconds=expires_in)

    def authenticate_service_account(self, client_id: str, client_secret: str, scope: str = "fr:am:* fr:idm:*") -> str:
        """Authenticate with client credentials and store them for auto-refresh.

        Args:
            client_id: Service account client ID
            client_secret: Service account client secret
            scope: Requested scopes

        Returns:
            Access token
        """
        self._auth_method = "service_account"
        self._auth_params = {"client_id": client_id, "client_secret": client_secret, "scope": scope}
        token, expires_in = self._get_service_account_token(client_id, client_secret, scope)
        self._token = token
        # Refresh a minute early
        self._token_expires_at = datetime.now() + timedelta(seconds=max(expires_in - 60, 0))
        return token

    def _ensure_authenticated(self) -> None:
        """Ensure we have a valid token, refreshing if necessary."""
        if not self._token or not self._token_expires_at:
            raise PlatformAPIError(401, "Not authenticated - call set_bearer_token or authenticate_service_account first", "")

        if datetime.now() >= self._token_expires_at - timedelta(seconds=10):
            if self._auth_method == "service_account":
                logger.debug("Refreshing service account token")
                token, expires_in = self._get_service_account_token(
                    self._auth_params["client_id"],
                    self._auth_params["client_secret"],
                    self._auth_params["scope"],
                )
                self._token = token
                self._token_expires_at = datetime.now() + timedelta(seconds=max(expires_in - 60, 0))

    def request(
        self,
        method: str,
        path: str,
        api_version: Optional[str] = None,
        **kwargs,
    ) -> requests.Response:
        """Execute a request with automatic authentication.

        Args:
            method: HTTP method
            path: Path relative to the host, or an absolute URL
            api_version: Value for the Accept-API-Version header
            **kwargs: Additional arguments for requests.request (params, json, data, headers)

        Returns:
            Response object

        Raises:
            PlatformAPIError: On HTTP error
            PlatformConnectionError: On connection failure or timeout
        """
        self._ensure_authenticated()
        url = path if path.startswith(("http://", "https://")) else f"{self.host}{path}"
        headers = kwargs.pop("headers", {}) or {}
        headers["Authorization"] = f"Bearer {self._token}"
        if api_version:
            headers["Accept-API-Version"] = api_version

        logger.debug("%s %s", method, url)
        try:
            resp = requests.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise PlatformConnectionError(f"{type(exc).__name__}: {exc}", url) from exc
        self._handle_error(resp)
        return resp

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        """Execute GET request."""
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Any] = None, data: Optional[Any] = None, **kwargs) -> requests.Response:
        """Execute POST request."""
        return self.request("POST", path, json=json, data=data, **kwargs)

    def put(self, path: str, json: Optional[Any] = None, **kwargs) -> requests.Response:
        """Execute PUT request."""
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        """Execute DELETE request."""
        return self.request("DELETE", path, **kwargs)

    def _get_service_account_token(self, client_id: str, client_secret: str, scope: str) -> tuple[str, int]:
        """Fetch an access token using the client credentials flow."""
        url = f"{self.host}/oauth2/access_token"
        data = {
            "grant_type": "client_credentials",
            "client_id": client_id,
            "client_secret": client_secret,
            "scope": scope,
        }
        try:
            resp = requests.post(url, data=data, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PlatformConnectionError(f"{type(exc).__name__}: {exc}", url) from exc
        if resp.status_code != 200:
            raise PlatformAPIError(resp.status_code, resp.text, url)
        payload = response_json(resp)
        if "access_token" not in payload:
            raise PlatformAPIError(resp.status_code, "Token response has no access_token", url)
        return payload["access_token"], int(payload.get("expires_in", 900))

    def _handle_error(self, resp: requests.Response) -> None:
        """Centralized error handling for HTTP responses.

        Raises:
            PlatformAPIError: If response status indicates error
        """
        if resp.status_code >= 400:
            raise PlatformAPIError(resp.status_code, resp.text, resp.url)


def response_json(resp: requests.Response) -> Any:
    """Return the parsed body of a response, or an empty dict for empty bodies.

    Raises:
        PlatformAPIError: Body is not JSON
    """
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError as exc:
        raise PlatformAPIError(resp.status_code, f"Response body is not JSON: {exc}", resp.url) from exc
