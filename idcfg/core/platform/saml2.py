"""SAML2 entity provider REST operations."""
from __future__ import annotations
import copy
from typing import List, Literal, Optional
from urllib.parse import urlencode

from .client import PlatformClient, response_json
from ..utils import encode, get_realm_name

API_VERSION = "protocol=2.1,resource=1.0"

Saml2ProviderLocation = Literal["hosted", "remote"]


class Saml2Service:
    """Service for SAML2 entity providers (hosted and remote)."""

    def __init__(self, client: PlatformClient):
        """Initialize SAML2 service.

        Args:
            client: Authenticated platform client
        """
        self.client = client

    def get_provider_stubs(self) -> List[dict]:
        """Return lightweight {_id, entityId, location} records for every provider."""
        resp = self.client.get(
            self.client.am_path("/realm-config/saml2"),
            params={"_queryFilter": "true"},
            api_version=API_VERSION,
        )
        return response_json(resp).get("result", [])

    def query_provider_stubs(self, query_filter: str, fields: Optional[List[str]] = None) -> dict:
        """Run a server-side CREST filter; returns the paged result {result, resultCount, ...}."""
        params = {"_queryFilter": query_filter}
        if fields:
            params["_fields"] = ",".join(fields)
        resp = self.client.get(self.client.am_path("/realm-config/saml2"), params=params, api_version=API_VERSION)
        return response_json(resp)

    def get_provider(self, location: Saml2ProviderLocation, entity_id64: str) -> dict:
        resp = self.client.get(
            self.client.am_path(f"/realm-config/saml2/{location}/{entity_id64}"),
            api_version=API_VERSION,
        )
        return response_json(resp)

    def create_provider(
        self,
        location: Saml2ProviderLocation,
        provider_data: dict,
        metadata: Optional[str] = None,
    ) -> dict:
        """Create a provider.

        Remote providers are imported from their base64url-encoded standard
        metadata, which is sent alongside the provider record.
        """
        payload = copy.deepcopy(provider_data)
        payload.pop("_rev", None)
        if location == "remote":
            payload["standardMetadata"] = metadata
            path = self.client.am_path("/realm-config/saml2/remote?_action=importEntity")
        else:
            path = self.client.am_path("/realm-config/saml2/hosted?_action=create")
        resp = self.client.post(path, json=payload, api_version=API_VERSION)
        return response_json(resp)

    def update_provider(
        self,
        location: Saml2ProviderLocation,
        provider_data: dict,
        entity_id: Optional[str] = None,
    ) -> dict:
        """Replace a provider's configuration; id from entity_id or provider_data['_id']."""
        entity_id64 = encode(entity_id, padding=False) if entity_id else provider_data["_id"]
        payload = copy.deepcopy(provider_data)
        payload.pop("_rev", None)
        resp = self.client.put(
            self.client.am_path(f"/realm-config/saml2/{location}/{entity_id64}"),
            json=payload,
            api_version=API_VERSION,
        )
        return response_json(resp)

    def delete_provider(self, location: Saml2ProviderLocation, entity_id64: str) -> dict:
        resp = self.client.delete(
            self.client.am_path(f"/realm-config/saml2/{location}/{entity_id64}"),
            api_version=API_VERSION,
        )
        return response_json(resp)

    def get_provider_metadata_url(self, entity_id: str) -> str:
        query = urlencode({"entityid": entity_id, "realm": get_realm_name(self.client.realm)})
        return f"{self.client.host}/saml2/jsp/exportmetadata.jsp?{query}"

    def get_provider_metadata(self, entity_id: str) -> str:
        """Return the provider's SAML metadata XML document.

        The body is decoded as UTF-8 regardless of the Content-Type charset;
        a bare text/xml would otherwise fall back to ISO-8859-1.
        """
        resp = self.client.get(self.get_provider_metadata_url(entity_id))
        return resp.content.decode("utf-8", "surrogateescape")
