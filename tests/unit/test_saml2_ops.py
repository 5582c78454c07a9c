"""
Unit tests for idcfg/core/saml2_ops.py

Runs the SAML2 reconciler against in-memory fakes of the SAML2 and script
services so that export/import round trips can be checked end to end.
"""
import base64
import copy
import logging
from unittest.mock import MagicMock

import pytest
import requests

from idcfg.core.batch import BatchResult
from idcfg.core.platform import (
    AmbiguousMatchError,
    MetadataNotFoundError,
    ProviderNotFoundError,
    ScriptNotFoundError,
)
from idcfg.core.saml2_ops import (
    Saml2Ops,
    create_saml2_export_template,
    get_location,
    get_script_dependencies,
)
from idcfg.core.utils import decode_base64url, encode
from tests.helpers import api_error, make_response

HOSTED_ID = "urn:example:idp"
REMOTE_ID = "https://sp.example.com/saml"
SECOND_REMOTE_ID = "https://other-sp.example.com/saml"

MAPPER_SCRIPT = encode("var attrs = {};\nlogger.message('mapping');\nattrs;")
# Bytes that are not valid UTF-8 must survive the round trip untouched
ADAPTER_SCRIPT = base64.b64encode(b"\xff\xfe binary\n\x00tail").decode("ascii")


def id64(entity_id):
    return encode(entity_id, padding=False)


def metadata_xml(entity_id):
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<EntityDescriptor entityID="{entity_id}">\n'
        "  <SPSSODescriptor/>\n"
        "</EntityDescriptor>\n"
    )


def hosted_provider(mapper="mapper-script", adapter="adapter-script"):
    return {
        "_id": id64(HOSTED_ID),
        "entityId": HOSTED_ID,
        "identityProvider": {
            "assertionProcessing": {"attributeMapper": {"attributeMapperScript": mapper}},
            "advanced": {"idpAdapter": {"idpAdapterScript": adapter}},
        },
    }


def remote_provider(entity_id=REMOTE_ID):
    return {
        "_id": id64(entity_id),
        "entityId": entity_id,
        "serviceProvider": {"assertionContent": {"signingAndEncryption": {"requestResponseSigning": {}}}},
    }


# ============================================================================
# Fakes
# ============================================================================

class FakeSaml2Service:
    """In-memory SAML2 provider store with the platform's create semantics."""

    def __init__(self):
        self.providers = {"hosted": {}, "remote": {}}
        self.metadata = {}
        self.calls = []

    def _stub(self, location, data):
        return {"_id": data["_id"], "entityId": data["entityId"], "location": location}

    def get_provider_stubs(self):
        return [self._stub(loc, data) for loc in ("hosted", "remote") for data in self.providers[loc].values()]

    def query_provider_stubs(self, query_filter, fields=None):
        entity_id = query_filter.split("'")[1]
        result = [stub for stub in self.get_provider_stubs() if stub["entityId"] == entity_id]
        return {"result": result, "resultCount": len(result)}

    def get_provider(self, location, entity_id64):
        if entity_id64 not in self.providers[location]:
            raise api_error(404, "Not Found")
        return copy.deepcopy(self.providers[location][entity_id64])

    def create_provider(self, location, provider_data, metadata=None):
        self.calls.append(("create", location, provider_data["_id"]))
        if provider_data["_id"] in self.providers[location]:
            raise api_error(409, "Conflict")
        self.providers[location][provider_data["_id"]] = copy.deepcopy(provider_data)
        if location == "remote":
            self.metadata[provider_data["entityId"]] = decode_base64url(metadata)
        return provider_data

    def update_provider(self, location, provider_data, entity_id=None):
        self.calls.append(("update", location, provider_data["_id"]))
        self.providers[location][provider_data["_id"]] = copy.deepcopy(provider_data)
        return provider_data

    def delete_provider(self, location, entity_id64):
        return self.providers[location].pop(entity_id64)

    def get_provider_metadata_url(self, entity_id):
        return f"https://tenant.example.com/am/saml2/jsp/exportmetadata.jsp?entityid={entity_id}"

    def get_provider_metadata(self, entity_id):
        return self.metadata.get(entity_id, "")


class FakeScriptService:
    def __init__(self):
        self.scripts = {}

    def get_script(self, script_id):
        if script_id not in self.scripts:
            raise api_error(404, "Not Found")
        return copy.deepcopy(self.scripts[script_id])

    def put_script(self, script_id, script_data):
        self.scripts[script_id] = copy.deepcopy(script_data)
        return script_data


def make_ops(client):
    return Saml2Ops(client, saml2=FakeSaml2Service(), scripts=FakeScriptService())


@pytest.fixture
def source(client):
    """A realm with one hosted IdP (two scripts) and one remote SP."""
    ops = make_ops(client)
    hosted = hosted_provider()
    remote = remote_provider()
    ops.saml2.providers["hosted"][hosted["_id"]] = hosted
    ops.saml2.providers["remote"][remote["_id"]] = remote
    ops.saml2.metadata[HOSTED_ID] = metadata_xml(HOSTED_ID)
    ops.saml2.metadata[REMOTE_ID] = metadata_xml(REMOTE_ID)
    ops.scripts.scripts["mapper-script"] = {"_id": "mapper-script", "name": "Mapper", "script": MAPPER_SCRIPT}
    ops.scripts.scripts["adapter-script"] = {"_id": "adapter-script", "name": "Adapter", "script": ADAPTER_SCRIPT}
    return ops


@pytest.fixture
def target(client):
    return make_ops(client)


# ============================================================================
# Helpers
# ============================================================================

def test_export_template_shape(client):
    bundle = create_saml2_export_template(client)
    assert bundle["script"] == {}
    assert bundle["saml"] == {"hosted": {}, "remote": {}, "metadata": {}}
    assert bundle["meta"]["origin"] == client.host


def test_script_dependencies_skip_empty_sentinel():
    assert get_script_dependencies(hosted_provider(adapter="[Empty]")) == ["mapper-script"]
    assert get_script_dependencies(hosted_provider(mapper="", adapter="[Empty]")) == []
    assert get_script_dependencies(hosted_provider(mapper="same", adapter="same")) == ["same"]
    assert get_script_dependencies(remote_provider()) == []


def test_get_location():
    bundle = {"saml": {"hosted": {"a": {}}, "remote": {"b": {}}}}
    assert get_location("a", bundle) == "hosted"
    assert get_location("b", bundle) == "remote"
    assert get_location("c", bundle) is None
    assert get_location("a", {}) is None


# ============================================================================
# Reads
# ============================================================================

def test_read_stub_not_found(source):
    with pytest.raises(ProviderNotFoundError):
        source.read_saml2_provider_stub("urn:missing")


def test_read_stub_ambiguous(client):
    saml2 = MagicMock()
    saml2.query_provider_stubs.return_value = {"result": [{"_id": "a"}, {"_id": "b"}], "resultCount": 2}
    ops = Saml2Ops(client, saml2=saml2, scripts=MagicMock())
    with pytest.raises(AmbiguousMatchError):
        ops.read_saml2_provider_stub(HOSTED_ID)
    saml2.query_provider_stubs.assert_called_once_with(f"entityId eq '{HOSTED_ID}'")


def test_read_stub_escapes_quotes_in_filter(client):
    saml2 = MagicMock()
    saml2.query_provider_stubs.return_value = {"result": [{"_id": "a"}], "resultCount": 1}
    ops = Saml2Ops(client, saml2=saml2, scripts=MagicMock())
    assert ops.read_saml2_provider_stub("urn:o'brien\\idp") == {"_id": "a"}
    saml2.query_provider_stubs.assert_called_once_with("entityId eq 'urn:o\\'brien\\\\idp'")


def test_read_provider(source):
    assert source.read_saml2_provider(REMOTE_ID)["entityId"] == REMOTE_ID


# ============================================================================
# Export
# ============================================================================

def test_export_single_provider_with_dependencies(source):
    bundle = source.export_saml2_provider(HOSTED_ID)
    assert list(bundle["saml"]["hosted"]) == [id64(HOSTED_ID)]
    assert bundle["saml"]["remote"] == {}
    assert set(bundle["script"]) == {"mapper-script", "adapter-script"}
    assert bundle["script"]["mapper-script"]["script"] == [
        "var attrs = {};",
        "logger.message('mapping');",
        "attrs;",
    ]
    assert "\n".join(bundle["saml"]["metadata"][id64(HOSTED_ID)]) == metadata_xml(HOSTED_ID)


def test_export_does_not_alter_platform_scripts(source):
    source.export_saml2_provider(HOSTED_ID)
    assert source.scripts.scripts["mapper-script"]["script"] == MAPPER_SCRIPT


def test_export_single_without_metadata_fails(source):
    del source.saml2.metadata[REMOTE_ID]
    with pytest.raises(MetadataNotFoundError):
        source.export_saml2_provider(REMOTE_ID)


def test_export_single_with_missing_script_fails(source):
    del source.scripts.scripts["adapter-script"]
    with pytest.raises(Exception):
        source.export_saml2_provider(HOSTED_ID)


def test_bulk_export_records_dependency_failures_as_warnings(source):
    del source.scripts.scripts["adapter-script"]
    status = BatchResult()
    bundle = source.export_saml2_providers(status=status)
    assert id64(HOSTED_ID) in bundle["saml"]["hosted"]
    assert id64(REMOTE_ID) in bundle["saml"]["remote"]
    assert status.total == 2
    assert status.successes == 2
    assert status.warnings == 1
    assert status.warned_items() == [HOSTED_ID]
    assert status.message == "2/2 providers exported."


# ============================================================================
# Import
# ============================================================================

@pytest.mark.critical
def test_export_import_round_trip(source, target):
    bundle = source.export_saml2_providers()
    status = target.import_saml2_providers(bundle)

    assert status.failures == 0
    assert status.warnings == 0
    assert status.message == "2/2 providers imported."
    assert target.saml2.providers == source.saml2.providers
    assert target.scripts.scripts["mapper-script"]["script"] == MAPPER_SCRIPT
    assert target.scripts.scripts["adapter-script"]["script"] == ADAPTER_SCRIPT
    assert base64.b64decode(target.scripts.scripts["adapter-script"]["script"]) == b"\xff\xfe binary\n\x00tail"
    assert target.saml2.metadata[REMOTE_ID] == metadata_xml(REMOTE_ID)


@pytest.mark.critical
def test_import_is_idempotent(source, target):
    bundle = source.export_saml2_providers()
    target.import_saml2_providers(bundle)
    first = copy.deepcopy(target.saml2.providers)

    status = target.import_saml2_providers(bundle)
    assert status.successes == 2
    assert status.failures == 0
    assert target.saml2.providers == first
    assert ("update", "hosted", id64(HOSTED_ID)) in target.saml2.calls


def test_import_does_not_mutate_bundle(source, target):
    bundle = source.export_saml2_providers()
    snapshot = copy.deepcopy(bundle)
    target.import_saml2_providers(bundle)
    assert bundle == snapshot


def test_import_single_provider(source, target):
    bundle = source.export_saml2_providers()
    assert target.import_saml2_provider(REMOTE_ID, bundle) is True
    assert list(target.saml2.providers["remote"]) == [id64(REMOTE_ID)]
    assert target.saml2.providers["hosted"] == {}
    assert target.scripts.scripts == {}


def test_import_single_not_in_bundle(target, client):
    with pytest.raises(ProviderNotFoundError):
        target.import_saml2_provider("urn:missing", create_saml2_export_template(client))


def test_import_single_remote_without_metadata(source, target):
    bundle = source.export_saml2_providers()
    del bundle["saml"]["metadata"][id64(REMOTE_ID)]
    with pytest.raises(MetadataNotFoundError):
        target.import_saml2_provider(REMOTE_ID, bundle)


def test_import_single_missing_script(source, target):
    bundle = source.export_saml2_providers()
    del bundle["script"]["mapper-script"]
    with pytest.raises(ScriptNotFoundError):
        target.import_saml2_provider(HOSTED_ID, bundle)


def test_bulk_import_counts_dependency_failure_as_warning(source, target):
    bundle = source.export_saml2_providers()
    del bundle["script"]["mapper-script"]
    status = target.import_saml2_providers(bundle)
    assert status.successes == 2
    assert status.warnings == 1
    assert id64(HOSTED_ID) in target.saml2.providers["hosted"]
    assert "adapter-script" in target.scripts.scripts


def test_bulk_import_remote_without_metadata_still_attempted(source, target):
    bundle = source.export_saml2_providers()
    del bundle["saml"]["metadata"][id64(REMOTE_ID)]
    target.saml2.create_provider = MagicMock(return_value={})
    status = target.import_saml2_providers(bundle)
    assert status.warnings == 1
    target.saml2.create_provider.assert_any_call("remote", bundle["saml"]["remote"][id64(REMOTE_ID)], None)


@pytest.mark.critical
def test_bulk_import_continues_after_failure(source, target):
    second = remote_provider(SECOND_REMOTE_ID)
    source.saml2.providers["remote"][second["_id"]] = second
    source.saml2.metadata[SECOND_REMOTE_ID] = metadata_xml(SECOND_REMOTE_ID)
    bundle = source.export_saml2_providers()

    failing_id = id64(REMOTE_ID)
    real_create = target.saml2.create_provider
    real_update = target.saml2.update_provider

    def create(location, provider_data, metadata=None):
        if provider_data["_id"] == failing_id:
            raise api_error(400, "Bad Request")
        return real_create(location, provider_data, metadata)

    def update(location, provider_data, entity_id=None):
        if provider_data["_id"] == failing_id:
            raise api_error(500, "Internal Server Error")
        return real_update(location, provider_data, entity_id)

    target.saml2.create_provider = create
    target.saml2.update_provider = update

    status = target.import_saml2_providers(bundle)
    assert status.total == 3
    assert status.successes == 2
    assert status.failures == 1
    assert status.failed_items() == [REMOTE_ID]
    assert status.message == "2/3 providers imported."
    assert id64(SECOND_REMOTE_ID) in target.saml2.providers["remote"]


@pytest.mark.critical
def test_bulk_import_continues_after_connection_errors(client, mock_request):
    first = hosted_provider(mapper="[Empty]", adapter="[Empty]")
    second = dict(first, _id=id64("urn:example:idp2"), entityId="urn:example:idp2")
    bundle = {
        "script": {},
        "saml": {"hosted": {first["_id"]: first, second["_id"]: second}, "remote": {}, "metadata": {}},
    }

    def transport(method, url, **kwargs):
        if url.endswith(f"/{first['_id']}") or (kwargs.get("json") or {}).get("_id") == first["_id"]:
            raise requests.exceptions.ConnectionError("connection reset by peer")
        return make_response({})

    mock_request.side_effect = transport
    status = Saml2Ops(client).import_saml2_providers(bundle)
    assert status.total == 2
    assert status.successes == 1
    assert status.failures == 1
    assert status.failed_items() == [HOSTED_ID]
    assert status.message == "1/2 providers imported."
    assert [c[0][0] for c in mock_request.call_args_list] == ["POST", "PUT", "POST"]


def test_create_failure_is_logged_before_update(target, caplog):
    target.saml2.providers["hosted"][id64(HOSTED_ID)] = hosted_provider(mapper="[Empty]", adapter="[Empty]")
    bundle = {"saml": {"hosted": {id64(HOSTED_ID): hosted_provider(mapper="[Empty]", adapter="[Empty]")}}}
    with caplog.at_level(logging.INFO, logger="idcfg.core.saml2_ops"):
        assert target.import_saml2_provider(HOSTED_ID, bundle) is True
    assert "[409]" in caplog.text
    assert "Conflict" in caplog.text
    assert "updating instead" in caplog.text


def test_bulk_import_empty_bundle(target):
    status = target.import_saml2_providers({})
    assert status.total == 0
    assert status.message == "0/0 providers imported."


# ============================================================================
# Delete
# ============================================================================

def test_delete_single_provider(source):
    source.delete_saml2_provider(HOSTED_ID)
    assert source.saml2.providers["hosted"] == {}
    with pytest.raises(ProviderNotFoundError):
        source.delete_saml2_provider(HOSTED_ID)


def test_delete_all_continues_after_failure(source):
    real_delete = source.saml2.delete_provider

    def delete(location, entity_id64):
        if location == "hosted":
            raise api_error(500)
        return real_delete(location, entity_id64)

    source.saml2.delete_provider = delete
    status = source.delete_saml2_providers()
    assert status.failures == 1
    assert status.successes == 1
    assert status.failed_items() == [HOSTED_ID]
    assert source.saml2.providers["remote"] == {}


def test_delete_all_fail_fast(source):
    source.saml2.delete_provider = MagicMock(side_effect=api_error(500))
    with pytest.raises(Exception):
        source.delete_saml2_providers(fail_fast=True)
    assert source.saml2.delete_provider.call_count == 1
