"""Node type classification.

Every platform release ships a fixed set of "out of the box" node types. A node
type outside that set (and outside the premium and cloud-only lists) is custom.
Catalogs live in a sorted table keyed by version so that supporting a new
platform release is a data change.
"""
from __future__ import annotations
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Optional, Set, Tuple

CONTAINER_NODE_TYPES = frozenset({"PageNode", "CustomPageNode"})

CLOUD_ONLY_NODE_TYPES = frozenset({
    "IdentityStoreDecisionNode",
    "AutonomousAccessSignalNode",
    "AutonomousAccessDecisionNode",
    "AutonomousAccessResultNode",
})

PREMIUM_NODE_TYPES = frozenset({
    "AutonomousAccessSignalNode",
    "AutonomousAccessDecisionNode",
    "AutonomousAccessResultNode",
})


class NodeClassification(str, Enum):
    STANDARD = "standard"
    CLOUD = "cloud"
    PREMIUM = "premium"
    CUSTOM = "custom"


OOTB_NODE_TYPES_6 = frozenset({
    "AbstractSocialAuthLoginNode",
    "AccountLockoutNode",
    "AgentDataStoreDecisionNode",
    "AnonymousUserNode",
    "AuthLevelDecisionNode",
    "ChoiceCollectorNode",
    "CookiePresenceDecisionNode",
    "CreatePasswordNode",
    "DataStoreDecisionNode",
    "InnerTreeEvaluatorNode",
    "LdapDecisionNode",
    "MessageNode",
    "MetadataNode",
    "MeterNode",
    "ModifyAuthLevelNode",
    "OneTimePasswordCollectorDecisionNode",
    "OneTimePasswordGeneratorNode",
    "OneTimePasswordSmsSenderNode",
    "OneTimePasswordSmtpSenderNode",
    "PageNode",
    "PasswordCollectorNode",
    "PersistentCookieDecisionNode",
    "PollingWaitNode",
    "ProvisionDynamicAccountNode",
    "ProvisionIdmAccountNode",
    "PushAuthenticationSenderNode",
    "PushResultVerifierNode",
    "RecoveryCodeCollectorDecisionNode",
    "RecoveryCodeDisplayNode",
    "RegisterLogoutWebhookNode",
    "RemoveSessionPropertiesNode",
    "RetryLimitDecisionNode",
    "ScriptedDecisionNode",
    "SessionDataNode",
    "SetFailureUrlNode",
    "SetPersistentCookieNode",
    "SetSessionPropertiesNode",
    "SetSuccessUrlNode",
    "SocialFacebookNode",
    "SocialGoogleNode",
    "SocialNode",
    "SocialOAuthIgnoreProfileNode",
    "SocialOpenIdConnectNode",
    "TimerStartNode",
    "TimerStopNode",
    "UsernameCollectorNode",
    "WebAuthnAuthenticationNode",
    "WebAuthnRegistrationNode",
    "ZeroPageLoginNode",
})

# 6.5 ships the same node set as 6.0.
OOTB_NODE_TYPES_6_5 = frozenset(OOTB_NODE_TYPES_6)

OOTB_NODE_TYPES_7 = frozenset({
    "AcceptTermsAndConditionsNode",
    "AccountActiveDecisionNode",
    "AccountLockoutNode",
    "AgentDataStoreDecisionNode",
    "AnonymousSessionUpgradeNode",
    "AnonymousUserNode",
    "AttributeCollectorNode",
    "AttributePresentDecisionNode",
    "AttributeValueDecisionNode",
    "AuthLevelDecisionNode",
    "ChoiceCollectorNode",
    "ConsentNode",
    "CookiePresenceDecisionNode",
    "CreateObjectNode",
    "CreatePasswordNode",
    "DataStoreDecisionNode",
    "DeviceGeoFencingNode",
    "DeviceLocationMatchNode",
    "DeviceMatchNode",
    "DeviceProfileCollectorNode",
    "DeviceSaveNode",
    "DeviceTamperingVerificationNode",
    "DisplayUserNameNode",
    "EmailSuspendNode",
    "EmailTemplateNode",
    "IdentifyExistingUserNode",
    "IncrementLoginCountNode",
    "InnerTreeEvaluatorNode",
    "IotAuthenticationNode",
    "IotRegistrationNode",
    "KbaCreateNode",
    "KbaDecisionNode",
    "KbaVerifyNode",
    "LdapDecisionNode",
    "LoginCountDecisionNode",
    "MessageNode",
    "MetadataNode",
    "MeterNode",
    "ModifyAuthLevelNode",
    "OneTimePasswordCollectorDecisionNode",
    "OneTimePasswordGeneratorNode",
    "OneTimePasswordSmsSenderNode",
    "OneTimePasswordSmtpSenderNode",
    "PageNode",
    "PasswordCollectorNode",
    "PatchObjectNode",
    "PersistentCookieDecisionNode",
    "PollingWaitNode",
    "ProfileCompletenessDecisionNode",
    "ProvisionDynamicAccountNode",
    "ProvisionIdmAccountNode",
    "PushAuthenticationSenderNode",
    "PushResultVerifierNode",
    "QueryFilterDecisionNode",
    "RecoveryCodeCollectorDecisionNode",
    "RecoveryCodeDisplayNode",
    "RegisterLogoutWebhookNode",
    "RemoveSessionPropertiesNode",
    "RequiredAttributesDecisionNode",
    "RetryLimitDecisionNode",
    "ScriptedDecisionNode",
    "SelectIdPNode",
    "SessionDataNode",
    "SetFailureUrlNode",
    "SetPersistentCookieNode",
    "SetSessionPropertiesNode",
    "SetSuccessUrlNode",
    "SocialFacebookNode",
    "SocialGoogleNode",
    "SocialNode",
    "SocialOAuthIgnoreProfileNode",
    "SocialOpenIdConnectNode",
    "SocialProviderHandlerNode",
    "TermsAndConditionsDecisionNode",
    "TimeSinceDecisionNode",
    "TimerStartNode",
    "TimerStopNode",
    "UsernameCollectorNode",
    "ValidatedPasswordNode",
    "ValidatedUsernameNode",
    "WebAuthnAuthenticationNode",
    "WebAuthnDeviceStorageNode",
    "WebAuthnRegistrationNode",
    "ZeroPageLoginNode",
    "product-CertificateCollectorNode",
    "product-CertificateUserExtractorNode",
    "product-CertificateValidationNode",
    "product-KerberosNode",
    "product-ReCaptchaNode",
    "product-Saml2Node",
    "product-WriteFederationInformationNode",
})

OOTB_NODE_TYPES_7_1 = OOTB_NODE_TYPES_7 | {
    "PushRegistrationNode",
    "GetAuthenticatorAppNode",
    "MultiFactorRegistrationOptionsNode",
    "OptOutMultiFactorAuthenticationNode",
}

OOTB_NODE_TYPES_7_2 = OOTB_NODE_TYPES_7_1 | {
    "OathRegistrationNode",
    "OathTokenVerifierNode",
    "PassthroughAuthenticationNode",
    "ConfigProviderNode",
    "DebugNode",
}

OOTB_NODE_TYPES_7_3 = frozenset(OOTB_NODE_TYPES_7_2)


def _version_key(version: str) -> Tuple[int, ...]:
    return tuple(int(part) for part in version.split("."))


_CATALOG_TABLE: Tuple[Tuple[str, FrozenSet[str]], ...] = tuple(sorted(
    (
        ("6.0.0", OOTB_NODE_TYPES_6),
        ("6.0.0.1", OOTB_NODE_TYPES_6),
        ("6.0.0.2", OOTB_NODE_TYPES_6),
        ("6.0.0.3", OOTB_NODE_TYPES_6),
        ("6.0.0.4", OOTB_NODE_TYPES_6),
        ("6.0.0.5", OOTB_NODE_TYPES_6),
        ("6.0.0.6", OOTB_NODE_TYPES_6),
        ("6.0.0.7", OOTB_NODE_TYPES_6),
        ("6.5.0.1", OOTB_NODE_TYPES_6_5),
        ("6.5.0.2", OOTB_NODE_TYPES_6_5),
        ("6.5.1", OOTB_NODE_TYPES_6_5),
        ("6.5.2", OOTB_NODE_TYPES_6_5),
        ("6.5.2.1", OOTB_NODE_TYPES_6_5),
        ("6.5.2.2", OOTB_NODE_TYPES_6_5),
        ("6.5.2.3", OOTB_NODE_TYPES_6_5),
        ("6.5.3", OOTB_NODE_TYPES_6_5),
        ("7.0.0", OOTB_NODE_TYPES_7),
        ("7.0.1", OOTB_NODE_TYPES_7),
        ("7.0.2", OOTB_NODE_TYPES_7),
        ("7.1.0", OOTB_NODE_TYPES_7_1),
        ("7.2.0", OOTB_NODE_TYPES_7_2),
        ("7.3.0", OOTB_NODE_TYPES_7_3),
    ),
    key=lambda entry: _version_key(entry[0]),
))

CATALOGS = MappingProxyType(dict(_CATALOG_TABLE))


def known_versions() -> Tuple[str, ...]:
    """Platform versions with a known catalog, oldest first."""
    return tuple(version for version, _ in _CATALOG_TABLE)


def get_catalog(version: Optional[str]) -> Optional[FrozenSet[str]]:
    """Return the out-of-the-box node types for an exact version, None if unknown."""
    if not version:
        return None
    return CATALOGS.get(version)


def is_premium_node(node_type: str) -> bool:
    return node_type in PREMIUM_NODE_TYPES


def is_cloud_only_node(node_type: str) -> bool:
    return node_type in CLOUD_ONLY_NODE_TYPES


def is_custom_node(node_type: str, version: Optional[str]) -> bool:
    """Unknown platform versions fail open: every node type is custom."""
    catalog = get_catalog(version)
    if catalog is None:
        return True
    return (
        node_type not in catalog
        and not is_premium_node(node_type)
        and not is_cloud_only_node(node_type)
    )


def classify(node_type: str, version: Optional[str]) -> Set[NodeClassification]:
    """Classify a node type for a platform version.

    Returns exactly one of CUSTOM, CLOUD or STANDARD, plus PREMIUM when the
    node type is a premium node.
    """
    classifications = set()
    if is_custom_node(node_type, version):
        classifications.add(NodeClassification.CUSTOM)
    elif is_cloud_only_node(node_type):
        classifications.add(NodeClassification.CLOUD)
    else:
        classifications.add(NodeClassification.STANDARD)
    if is_premium_node(node_type):
        classifications.add(NodeClassification.PREMIUM)
    return classifications
