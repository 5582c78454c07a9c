"""SAML2 entity provider export, import and reconciliation.

Export bundles are self-contained: a provider travels together with the
scripts it references and, for remote providers, its SAML metadata. Script
bodies and metadata are stored as arrays of text lines so that exported files
stay readable and diff-friendly; importing re-encodes them byte for byte.

Layout of a bundle::

    {
        "meta": {...},
        "script": {"<script id>": {..., "script": ["line", ...]}},
        "saml": {
            "hosted": {"<entity id64>": {...}},
            "remote": {"<entity id64>": {...}},
            "metadata": {"<entity id64>": ["line", ...]},
        },
    }

The platform has no transactions. Imports upsert (create, then update on
failure) and bulk operations report one outcome per provider.
"""
from __future__ import annotations
import copy
import logging
from typing import List, Optional

from .batch import BatchResult
from .platform import (
    AmbiguousMatchError,
    MetadataNotFoundError,
    PlatformClient,
    PlatformError,
    ProviderNotFoundError,
    Saml2ProviderLocation,
    Saml2Service,
    ScriptNotFoundError,
    ScriptService,
)
from .utils import (
    EMPTY_SCRIPT_SENTINEL,
    base64_to_lines,
    encode,
    get_export_metadata,
    get_path,
    lines_to_base64,
    lines_to_base64url,
    quote_filter_literal,
)

logger = logging.getLogger(__name__)

SCRIPT_REFERENCE_PATHS = (
    ("identityProvider", "assertionProcessing", "attributeMapper", "attributeMapperScript"),
    ("identityProvider", "advanced", "idpAdapter", "idpAdapterScript"),
)

LOCATIONS = ("hosted", "remote")


def create_saml2_export_template(client: Optional[PlatformClient] = None) -> dict:
    """Return a fresh, empty export bundle."""
    return {
        "meta": get_export_metadata(client),
        "script": {},
        "saml": {"hosted": {}, "remote": {}, "metadata": {}},
    }


def get_script_dependencies(provider_data: dict) -> List[str]:
    """Script ids a provider references, skipping empty and '[Empty]' values."""
    script_ids = []
    for path in SCRIPT_REFERENCE_PATHS:
        script_id = get_path(provider_data, path)
        if script_id and script_id != EMPTY_SCRIPT_SENTINEL and script_id not in script_ids:
            script_ids.append(script_id)
    return script_ids


def get_location(entity_id64: str, bundle: dict) -> Optional[Saml2ProviderLocation]:
    """Return 'hosted' or 'remote' if the bundle holds the provider, None otherwise."""
    saml = bundle.get("saml") or {}
    for location in LOCATIONS:
        if entity_id64 in (saml.get(location) or {}):
            return location
    return None


class Saml2Ops:
    """Read, export, import and delete SAML2 entity providers in one realm."""

    def __init__(
        self,
        client: PlatformClient,
        saml2: Optional[Saml2Service] = None,
        scripts: Optional[ScriptService] = None,
    ):
        self.client = client
        self.saml2 = saml2 or Saml2Service(client)
        self.scripts = scripts or ScriptService(client)

    # ── reads ───────────────────────────────────────────────────────────────
    def read_saml2_provider_stubs(self) -> List[dict]:
        return self.saml2.get_provider_stubs()

    def read_saml2_provider_stub(self, entity_id: str) -> dict:
        """Resolve an entity id to its single stub.

        Raises:
            ProviderNotFoundError: No provider has this entity id
            AmbiguousMatchError: More than one provider has this entity id
        """
        logger.debug("read_saml2_provider_stub: start [entity_id=%s]", entity_id)
        found = self.saml2.query_provider_stubs(f"entityId eq '{quote_filter_literal(entity_id)}'")
        result = found.get("result") or []
        if not result:
            raise ProviderNotFoundError(f"No provider with entity id '{entity_id}' found")
        if len(result) > 1:
            raise AmbiguousMatchError(
                f"Multiple providers with entity id '{entity_id}' found ({len(result)} matches)"
            )
        logger.debug("read_saml2_provider_stub: end [entity_id=%s]", entity_id)
        return result[0]

    def read_saml2_provider(self, entity_id: str) -> dict:
        stub = self.read_saml2_provider_stub(entity_id)
        return self.saml2.get_provider(stub["location"], stub["_id"])

    def get_saml2_provider_metadata_url(self, entity_id: str) -> str:
        return self.saml2.get_provider_metadata_url(entity_id)

    def get_saml2_provider_metadata(self, entity_id: str) -> str:
        return self.saml2.get_provider_metadata(entity_id)

    # ── writes ──────────────────────────────────────────────────────────────
    def create_saml2_provider(
        self,
        location: Saml2ProviderLocation,
        provider_data: dict,
        metadata: Optional[str] = None,
    ) -> dict:
        """Create a provider; metadata (base64url) is only used for remote providers."""
        return self.saml2.create_provider(location, provider_data, metadata)

    def update_saml2_provider(
        self,
        location: Saml2ProviderLocation,
        provider_data: dict,
        entity_id: Optional[str] = None,
    ) -> dict:
        return self.saml2.update_provider(location, provider_data, entity_id)

    def delete_saml2_provider(self, entity_id: str) -> dict:
        logger.debug("delete_saml2_provider: start [entity_id=%s]", entity_id)
        stub = self.read_saml2_provider_stub(entity_id)
        deleted = self.saml2.delete_provider(stub["location"], stub["_id"])
        logger.debug("delete_saml2_provider: end [entity_id=%s]", entity_id)
        return deleted

    def delete_saml2_providers(self, fail_fast: bool = False) -> BatchResult:
        """Delete every provider in the realm, one at a time.

        Args:
            fail_fast: Re-raise the first failure instead of recording it and
                moving on to the next provider

        Returns:
            BatchResult with one outcome per provider
        """
        status = BatchResult()
        stubs = self.read_saml2_provider_stubs()
        status.total = len(stubs)
        for stub in stubs:
            entity_id = stub.get("entityId", stub["_id"])
            try:
                self.saml2.delete_provider(stub["location"], stub["_id"])
            except PlatformError as exc:
                if fail_fast:
                    raise
                logger.error("Error deleting provider %s: %s", entity_id, exc)
                status.record_failure(entity_id, exc)
                continue
            status.record_success(entity_id)
        status.message = f"{status.successes}/{status.total} providers deleted."
        logger.debug("delete_saml2_providers: %s", status.message)
        return status

    # ── export ──────────────────────────────────────────────────────────────
    def _export_dependencies(self, provider_data: dict, bundle: dict) -> None:
        """Add the provider's scripts and metadata to the bundle."""
        for script_id in get_script_dependencies(provider_data):
            script_data = self.scripts.get_script(script_id)
            if not script_data or "script" not in script_data:
                raise ScriptNotFoundError(f"Script '{script_id}' referenced by '{provider_data.get('entityId')}' not found")
            script_data = copy.deepcopy(script_data)
            script_data["script"] = base64_to_lines(script_data["script"])
            bundle["script"][script_id] = script_data

        entity_id = provider_data["entityId"]
        metadata = self.saml2.get_provider_metadata(entity_id)
        if not metadata:
            raise MetadataNotFoundError(
                f"Unable to obtain metadata from {self.saml2.get_provider_metadata_url(entity_id)}"
            )
        bundle["saml"]["metadata"][provider_data["_id"]] = metadata.split("\n")

    def export_saml2_provider(self, entity_id: str) -> dict:
        """Export one provider with its dependencies.

        Any failure, including missing metadata, is fatal for the export.
        """
        logger.debug("export_saml2_provider: start [entity_id=%s]", entity_id)
        bundle = create_saml2_export_template(self.client)
        stub = self.read_saml2_provider_stub(entity_id)
        provider_data = self.saml2.get_provider(stub["location"], stub["_id"])
        bundle["saml"][stub["location"]][provider_data["_id"]] = provider_data
        self._export_dependencies(provider_data, bundle)
        logger.debug("export_saml2_provider: end [entity_id=%s]", entity_id)
        return bundle

    def export_saml2_providers(self, status: Optional[BatchResult] = None) -> dict:
        """Export every provider in the realm into one bundle.

        A dependency failure is logged and recorded as a warning; the provider
        itself is still exported. A provider that cannot be read is recorded as
        a failure and left out.

        Args:
            status: Optional BatchResult to fill with per-provider outcomes
        """
        status = status if status is not None else BatchResult()
        bundle = create_saml2_export_template(self.client)
        stubs = self.read_saml2_provider_stubs()
        status.total = len(stubs)
        for stub in stubs:
            entity_id = stub.get("entityId", stub["_id"])
            try:
                provider_data = self.saml2.get_provider(stub["location"], stub["_id"])
            except PlatformError as exc:
                logger.error("Error reading provider %s: %s", entity_id, exc)
                status.record_failure(entity_id, exc)
                continue
            warning = None
            try:
                self._export_dependencies(provider_data, bundle)
            except PlatformError as exc:
                logger.error("Error exporting dependencies for %s: %s", entity_id, exc)
                warning = exc
            bundle["saml"][stub["location"]][provider_data["_id"]] = provider_data
            status.record_success(entity_id, warning=warning)
        status.message = f"{status.successes}/{status.total} providers exported."
        return bundle

    # ── import ──────────────────────────────────────────────────────────────
    def _import_dependencies(self, provider_data: dict, bundle: dict) -> None:
        """Upsert the scripts a provider references from the bundle."""
        for script_id in get_script_dependencies(provider_data):
            logger.debug("_import_dependencies: script=%s", script_id)
            script_data = (bundle.get("script") or {}).get(script_id)
            if script_data is None:
                raise ScriptNotFoundError(
                    f"Script '{script_id}' referenced by '{provider_data.get('entityId')}' not found in import data"
                )
            payload = copy.deepcopy(script_data)
            if isinstance(payload.get("script"), list):
                payload["script"] = lines_to_base64(payload["script"])
            self.scripts.put_script(script_id, payload)

    @staticmethod
    def _import_metadata(entity_id64: str, location: str, bundle: dict) -> Optional[str]:
        """Base64url metadata for remote providers, None for hosted ones."""
        if location != "remote":
            return None
        lines = ((bundle.get("saml") or {}).get("metadata") or {}).get(entity_id64)
        if lines is None:
            raise MetadataNotFoundError(f"No metadata for remote provider '{entity_id64}' in import data")
        return lines_to_base64url(lines)

    def _create_or_update(
        self,
        location: Saml2ProviderLocation,
        entity_id64: str,
        provider_data: dict,
        metadata: Optional[str],
    ) -> dict:
        # A failed create is assumed to mean "already exists"; the reason is
        # not inspected, so a transient create error also ends in an update.
        try:
            return self.saml2.create_provider(location, provider_data, metadata)
        except PlatformError as exc:
            logger.info("Create of %s provider %s failed (%s), updating instead", location, entity_id64, exc)
        return self.saml2.update_provider(location, dict(provider_data, _id=entity_id64))

    def import_saml2_provider(self, entity_id: str, bundle: dict) -> bool:
        """Import one provider and its dependencies from a bundle.

        Raises:
            ProviderNotFoundError: The bundle does not contain the provider
            PlatformError: Dependency import, or both create and update, failed
        """
        logger.debug("import_saml2_provider: start [entity_id=%s]", entity_id)
        entity_id64 = encode(entity_id, padding=False)
        location = get_location(entity_id64, bundle)
        if location is None:
            raise ProviderNotFoundError(f"Provider {entity_id} not found in import data!")
        provider_data = bundle["saml"][location][entity_id64]
        self._import_dependencies(provider_data, bundle)
        metadata = self._import_metadata(entity_id64, location, bundle)
        self._create_or_update(location, entity_id64, provider_data, metadata)
        logger.debug("import_saml2_provider: end [entity_id=%s, location=%s]", entity_id, location)
        return True

    def import_saml2_providers(self, bundle: dict) -> BatchResult:
        """Import every provider in a bundle.

        Never stops early: a dependency failure counts one warning for the
        provider and the import goes on; a provider that can be neither
        created nor updated counts one failure.
        """
        logger.debug("import_saml2_providers: start")
        status = BatchResult()
        saml = bundle.get("saml") or {}
        entries = [
            (entity_id64, location)
            for location in LOCATIONS
            for entity_id64 in (saml.get(location) or {})
        ]
        status.total = len(entries)
        for entity_id64, location in entries:
            provider_data = saml[location][entity_id64]
            entity_id = provider_data.get("entityId", entity_id64)
            logger.debug("import_saml2_providers: entity_id=%s", entity_id)

            warning = None
            try:
                self._import_dependencies(provider_data, bundle)
            except PlatformError as exc:
                logger.warning("Warning importing dependencies for %s: %s", entity_id, exc)
                warning = exc
            metadata = None
            try:
                metadata = self._import_metadata(entity_id64, location, bundle)
            except MetadataNotFoundError as exc:
                logger.warning("Warning importing metadata for %s: %s", entity_id, exc)
                warning = warning or exc

            try:
                self._create_or_update(location, entity_id64, provider_data, metadata)
            except PlatformError as exc:
                logger.error("Error importing provider %s: %s", entity_id, exc)
                status.record_failure(entity_id, exc, warning=warning)
                continue
            status.record_success(entity_id, warning=warning)
        status.message = f"{status.successes}/{status.total} providers imported."
        logger.debug("import_saml2_providers: end [%s]", status.message)
        return status
