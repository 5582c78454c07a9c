"""Identity platform configuration SDK.

To use the REST services:
    from idcfg.core.platform import PlatformClient, Saml2Service

To use the export/import and maintenance operations:
    from idcfg.core.saml2_ops import Saml2Ops
    from idcfg.core.node_ops import NodeOps
"""
__version__ = "0.1.0"
