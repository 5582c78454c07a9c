"""Core Configuration Management Module

Operations on identity platform configuration, built on the REST client in
``idcfg.core.platform``.

Module Structure:
    - platform/         : Low-level platform REST client and services
    - node_catalog.py   : Out-of-the-box node type catalogs and classification
    - node_ops.py       : Orphaned authentication node detection and removal
    - saml2_ops.py      : SAML2 provider export / import with dependencies
    - promotion_ops.py  : Tenant promotion workflow
    - secrets_ops.py    : Environment secrets and variables
    - data_protection.py: Master-key based local encryption
    - batch.py          : Per-item outcome tracking for bulk operations
    - progress.py       : Progress sinks
    - utils.py          : Realm paths, base64 and line-array codecs

Usage Pattern:
    These modules are NOT auto-imported. Import explicitly when needed:
        from idcfg.core.node_ops import NodeOps
        from idcfg.core.saml2_ops import Saml2Ops
        from idcfg.core.data_protection import DataProtection

Public APIs:
    Nodes (idcfg.core.node_ops):
        - NodeOps.find_orphaned_nodes()
        - NodeOps.remove_orphaned_nodes()
        - NodeOps.get_node_classification()

    SAML2 (idcfg.core.saml2_ops):
        - Saml2Ops.export_saml2_provider() / export_saml2_providers()
        - Saml2Ops.import_saml2_provider() / import_saml2_providers()
        - Saml2Ops.delete_saml2_provider() / delete_saml2_providers()
"""
