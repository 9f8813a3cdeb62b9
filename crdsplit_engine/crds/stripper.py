"""Removal of CRD files from a chart tree."""

from typing import Set

from loguru import logger

from crdsplit_engine.config import DEFAULT_CONFIG, SplitConfig
from crdsplit_engine.crds.extractor import is_crd_file
from crdsplit_engine.models import BundleNode, check_not_ancestor


def strip_crds(node: BundleNode, config: SplitConfig = DEFAULT_CONFIG) -> BundleNode:
    """Return a copy of `node` without files under the CRD directory, at every level.

    Dependencies are kept in order even when they end up empty; only their
    contents change. Stripping an already stripped tree returns an equal tree.
    """
    return _strip(node, config, set())


def _strip(node: BundleNode, config: SplitConfig, ancestors: Set[int]) -> BundleNode:
    check_not_ancestor(node, ancestors)

    kept = tuple(f for f in node.files if not is_crd_file(f, config))
    removed = len(node.files) - len(kept)
    if removed:
        logger.debug(f"Removed {removed} CRD files from {node.name}")

    ancestors.add(id(node))
    try:
        dependencies = tuple(_strip(dep, config, ancestors) for dep in node.dependencies)
    finally:
        ancestors.discard(id(node))

    return BundleNode(
        name=node.name,
        metadata=node.metadata,
        files=kept,
        dependencies=dependencies,
    )
