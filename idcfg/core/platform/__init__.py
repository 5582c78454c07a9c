"""Identity platform REST API client library.

This package provides a modular, testable interface to the platform's
configuration APIs.

Architecture:
- client.py: HTTP client with authentication, auto-refresh and API versioning
- nodes.py / trees.py: Authentication tree nodes and trees
- scripts.py: Script store
- saml2.py: SAML2 entity providers and metadata
- oauth2.py: OAuth2 clients
- realm.py: Realms (global configuration)
- idm.py: IDM system actions
- promotion.py / variables.py / secrets.py: Environment (tenant) APIs
- exceptions.py: Typed exceptions for error handling

Usage:
    from idcfg.core.platform import PlatformClient, Saml2Service

    client = PlatformClient("https://tenant.example.com/am", realm="alpha")
    client.set_bearer_token(token)

    stubs = Saml2Service(client).get_provider_stubs()
"""
from .client import (
    PlatformClient,
    REQUEST_TIMEOUT,
    response_json,
)
from .exceptions import (
    PlatformError,
    PlatformAPIError,
    NotFoundError,
    ProviderNotFoundError,
    ScriptNotFoundError,
    MetadataNotFoundError,
    AmbiguousMatchError,
    DecryptionError,
    PlatformConnectionError,
    UnsupportedDeploymentError,
)
from .nodes import NodeService
from .trees import TreeService
from .scripts import ScriptService
from .saml2 import Saml2Service, Saml2ProviderLocation
from .oauth2 import OAuth2ClientService
from .realm import RealmService
from .idm import IdmSystemService
from .promotion import PromotionService, PromotionState, LockState
from .variables import VariableService
from .secrets import SecretService, VersionOfSecretStatus

__all__ = [
    # Client
    "PlatformClient",
    "REQUEST_TIMEOUT",
    "response_json",

    # Exceptions
    "PlatformError",
    "PlatformAPIError",
    "NotFoundError",
    "ProviderNotFoundError",
    "ScriptNotFoundError",
    "MetadataNotFoundError",
    "AmbiguousMatchError",
    "DecryptionError",
    "PlatformConnectionError",
    "UnsupportedDeploymentError",

    # Services
    "NodeService",
    "TreeService",
    "ScriptService",
    "Saml2Service",
    "Saml2ProviderLocation",
    "OAuth2ClientService",
    "RealmService",
    "IdmSystemService",
    "PromotionService",
    "PromotionState",
    "LockState",
    "VariableService",
    "SecretService",
    "VersionOfSecretStatus",
]
