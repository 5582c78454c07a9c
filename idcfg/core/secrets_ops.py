"""Environment secrets and variables (ESVs)."""
from __future__ import annotations
import logging
from typing import List, Optional, Union

from .platform import (
    PlatformClient,
    SecretService,
    VariableService,
    VersionOfSecretStatus,
)

logger = logging.getLogger(__name__)


class SecretsOps:
    """Secrets and their versions. Secret values are write-only upstream."""

    def __init__(self, client: PlatformClient, secrets: Optional[SecretService] = None):
        self.client = client
        self.secrets = secrets or SecretService(client)

    def get_secrets(self) -> List[dict]:
        return self.secrets.get_secrets()

    def get_secret(self, secret_id: str) -> dict:
        return self.secrets.get_secret(secret_id)

    def put_secret(
        self,
        secret_id: str,
        value: str,
        description: str = "",
        encoding: str = "generic",
        use_in_placeholders: bool = True,
    ) -> dict:
        """Create a secret. Only the ``generic`` encoding is supported.

        Raises:
            ValueError: Unsupported encoding
        """
        logger.debug("put_secret: %s", secret_id)
        return self.secrets.put_secret(secret_id, value, description, encoding, use_in_placeholders)

    def set_secret_description(self, secret_id: str, description: str) -> dict:
        return self.secrets.set_secret_description(secret_id, description)

    def delete_secret(self, secret_id: str) -> dict:
        logger.debug("delete_secret: %s", secret_id)
        return self.secrets.delete_secret(secret_id)

    def get_secret_versions(self, secret_id: str) -> List[dict]:
        return self.secrets.get_secret_versions(secret_id)

    def create_new_version_of_secret(self, secret_id: str, value: str) -> dict:
        return self.secrets.create_new_version_of_secret(secret_id, value)

    def get_version_of_secret(self, secret_id: str, version: str) -> dict:
        return self.secrets.get_version_of_secret(secret_id, version)

    def set_status_of_version_of_secret(
        self,
        secret_id: str,
        version: str,
        status: Union[VersionOfSecretStatus, str],
    ) -> dict:
        """Enable or disable one version.

        Raises:
            ValueError: status is not ENABLED or DISABLED
        """
        return self.secrets.set_status_of_version_of_secret(secret_id, version, VersionOfSecretStatus(status))

    def delete_version_of_secret(self, secret_id: str, version: str) -> dict:
        return self.secrets.delete_version_of_secret(secret_id, version)


class VariablesOps:
    def __init__(self, client: PlatformClient, variables: Optional[VariableService] = None):
        self.client = client
        self.variables = variables or VariableService(client)

    def get_variables(self) -> List[dict]:
        return self.variables.get_variables()

    def get_variable(self, variable_id: str) -> dict:
        return self.variables.get_variable(variable_id)

    def put_variable(
        self,
        variable_id: str,
        value: Optional[str] = None,
        value_base64: Optional[str] = None,
        description: Optional[str] = None,
        expression_type: Optional[str] = None,
    ) -> dict:
        logger.debug("put_variable: %s", variable_id)
        return self.variables.put_variable(variable_id, value, value_base64, description, expression_type)

    def set_variable_description(self, variable_id: str, description: str) -> dict:
        return self.variables.set_variable_description(variable_id, description)

    def delete_variable(self, variable_id: str) -> dict:
        return self.variables.delete_variable(variable_id)
