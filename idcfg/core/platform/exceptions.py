"""Platform-specific exceptions for error handling."""


class PlatformError(Exception):
    """Base exception for all identity platform operations."""
    pass


class PlatformAPIError(PlatformError):
    """HTTP error from the platform REST API.

    Attributes:
        status_code: HTTP status code
        message: Response body returned by the platform
        endpoint: API endpoint that failed
    """

    def __init__(self, status_code: int, message: str, endpoint: str):
        self.status_code = status_code
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"[{status_code}] {endpoint}: {message}")


class NotFoundError(PlatformError):
    """A required lookup returned no match."""
    pass


class ProviderNotFoundError(NotFoundError):
    """SAML2 entity provider does not exist (on the platform or in import data)."""
    pass


class ScriptNotFoundError(NotFoundError):
    """Script referenced by a provider is missing."""
    pass


class MetadataNotFoundError(NotFoundError):
    """SAML2 metadata could not be obtained for a provider."""
    pass


class AmbiguousMatchError(PlatformError):
    """More than one object matched where exactly one is required."""
    pass


class DecryptionError(PlatformError):
    """Encrypted payload could not be authenticated or decoded."""
    pass


class PlatformConnectionError(PlatformError):
    """Request never produced an HTTP response (connection reset, timeout, TLS).

    Attributes:
        message: Description of the transport failure
        endpoint: API endpoint that was being called
    """

    def __init__(self, message: str, endpoint: str):
        self.message = message
        self.endpoint = endpoint
        super().__init__(f"{endpoint}: {message}")


class UnsupportedDeploymentError(PlatformError):
    """Operation is not available for the client's deployment type."""
    pass
