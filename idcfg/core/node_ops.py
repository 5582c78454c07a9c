"""Authentication node maintenance: classification and orphan detection.

A node configuration object is orphaned when no tree references it, either
directly in the tree's node map or as an inner node of a page (container)
node. Orphan sets are snapshots; any tree change invalidates them.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set

from .node_catalog import (
    CONTAINER_NODE_TYPES,
    NodeClassification,
    classify,
    is_cloud_only_node,
    is_custom_node,
    is_premium_node,
)
from .platform import NodeService, PlatformClient, PlatformError, TreeService
from .progress import LoggingProgress, ProgressReporter

logger = logging.getLogger(__name__)


@dataclass
class OrphanScan:
    """Result of one orphan scan."""
    orphans: List[dict] = field(default_factory=list)
    skipped_types: List[str] = field(default_factory=list)
    total_nodes: int = 0
    active_node_ids: Set[str] = field(default_factory=set)


class NodeOps:
    """Node classification and orphaned node clean-up for one realm."""

    def __init__(
        self,
        client: PlatformClient,
        progress: Optional[ProgressReporter] = None,
        nodes: Optional[NodeService] = None,
        trees: Optional[TreeService] = None,
    ):
        self.client = client
        self.progress = progress or LoggingProgress(logger)
        self.nodes = nodes or NodeService(client)
        self.trees = trees or TreeService(client)

    # ── classification ──────────────────────────────────────────────────────
    def is_premium_node(self, node_type: str) -> bool:
        return is_premium_node(node_type)

    def is_cloud_only_node(self, node_type: str) -> bool:
        return is_cloud_only_node(node_type)

    def is_custom_node(self, node_type: str) -> bool:
        return is_custom_node(node_type, self.client.am_version)

    def get_node_classification(self, node_type: str) -> Set[NodeClassification]:
        """Classify a node type against the connected platform's version."""
        return classify(node_type, self.client.am_version)

    # ── orphans ─────────────────────────────────────────────────────────────
    def scan_orphaned_nodes(self) -> OrphanScan:
        """Collect every node instance and every node reachable from a tree.

        A failure to list node types aborts the scan with an empty result.
        A failure to list the instances of one type skips that type.
        """
        scan = OrphanScan()

        self.progress.start("Counting total nodes...")
        try:
            types = self.nodes.get_node_types()
        except PlatformError as exc:
            logger.error("Error retrieving all available node types: %s", exc)
            self.progress.stop("Unable to list node types", "fail")
            return scan

        all_nodes: List[dict] = []
        for node_type in types:
            type_id = node_type["_id"]
            try:
                all_nodes.extend(self.nodes.get_nodes_by_type(type_id))
            except PlatformError as exc:
                logger.warning("Skipping node type %s: %s", type_id, exc)
                scan.skipped_types.append(type_id)
            self.progress.update(self._total_message(len(all_nodes), scan.skipped_types))
        scan.total_nodes = len(all_nodes)
        if scan.skipped_types:
            self.progress.stop(self._total_message(len(all_nodes), scan.skipped_types), "warn")
        else:
            self.progress.stop(self._total_message(len(all_nodes), scan.skipped_types))

        self.progress.start("Counting active nodes...")
        for tree in self.trees.get_trees():
            for node_id, node_ref in (tree.get("nodes") or {}).items():
                scan.active_node_ids.add(node_id)
                node_type = node_ref.get("nodeType")
                if node_type in CONTAINER_NODE_TYPES:
                    container = self.nodes.get_node(node_id, node_type)
                    for inner_node in container.get("nodes") or []:
                        scan.active_node_ids.add(inner_node["_id"])
                self.progress.update(f"{len(scan.active_node_ids)} active nodes")
        self.progress.stop(f"{len(scan.active_node_ids)} active nodes")

        self.progress.start("Calculating orphaned nodes...")
        scan.orphans = [node for node in all_nodes if node["_id"] not in scan.active_node_ids]
        self.progress.stop(f"{len(scan.orphans)} orphaned nodes")
        return scan

    def find_orphaned_nodes(self) -> List[dict]:
        """Find all node configuration objects no longer referenced by any tree."""
        return self.scan_orphaned_nodes().orphans

    def remove_orphaned_nodes(self, orphaned_nodes: Sequence[dict]) -> List[dict]:
        """Delete orphaned nodes one at a time.

        Returns:
            The nodes that could not be deleted. Re-running the scan afterwards
            is safe: deleted nodes no longer show up as orphans.
        """
        error_nodes = []
        self.progress.start("Removing orphaned nodes...", len(orphaned_nodes))
        for node in orphaned_nodes:
            node_id = node["_id"]
            self.progress.update(f"Removing {node_id}...")
            try:
                self.nodes.delete_node(node_id, node["_type"]["_id"])
            except PlatformError as exc:
                logger.error("Failed to delete node %s: %s", node_id, exc)
                error_nodes.append(node)
        removed = len(orphaned_nodes) - len(error_nodes)
        self.progress.stop(
            f"Removed {removed} of {len(orphaned_nodes)} orphaned nodes.",
            "warn" if error_nodes else "success",
        )
        return error_nodes

    @staticmethod
    def _total_message(count: int, skipped: List[str]) -> str:
        if skipped:
            return f"{count} total nodes (Skipped type(s): {', '.join(skipped)})"
        return f"{count} total nodes"
