"""
CRD Collector - gathers unique CustomResourceDefinitions from a chart tree

The tree is walked in preorder: a chart first, then its dependencies in
declaration order. The first CRD seen for a (group, kind) key wins, so the
root chart overrides its dependencies and earlier dependencies override
later ones.
"""

from typing import Set

from loguru import logger

from crdsplit_engine.config import DEFAULT_CONFIG, SplitConfig
from crdsplit_engine.crds.extractor import extract_crd_key, is_crd_manifest
from crdsplit_engine.errors import InvalidCRDError
from crdsplit_engine.models import (
    BundleNode,
    CollectedCRD,
    CollectionResult,
    DuplicateCRD,
    SkippedFile,
    check_not_ancestor,
)


def collect_crds(root: BundleNode, config: SplitConfig = DEFAULT_CONFIG) -> CollectionResult:
    """Collect one CRD file per identity key from `root` and all of its dependencies."""
    result = CollectionResult()
    _collect(root, config, result, set())
    logger.info(
        f"Collected {len(result.crds)} unique CRDs from {root.name} "
        f"({len(result.duplicates)} duplicates, {len(result.skipped)} skipped)"
    )
    return result


def _collect(node: BundleNode, config: SplitConfig, result: CollectionResult, ancestors: Set[int]) -> None:
    check_not_ancestor(node, ancestors)

    for f in node.files:
        if not is_crd_manifest(f, config):
            continue

        try:
            key = extract_crd_key(f.data, config)
        except InvalidCRDError as e:
            logger.debug(f"Skipping {f.path} from {node.name}: {e}")
            result.diagnostics.append(SkippedFile(path=f.path, source=node.name, reason=str(e)))
            continue

        existing = result.crds.get(key)
        if existing is not None:
            logger.debug(f"Dropping duplicate {key} from {node.name}")
            result.diagnostics.append(DuplicateCRD(key=key, source=node.name, kept_from=existing.source))
            continue

        result.crds[key] = CollectedCRD(file=f, source=node.name)

    ancestors.add(id(node))
    try:
        for dep in node.dependencies:
            _collect(dep, config, result, ancestors)
    finally:
        ancestors.discard(id(node))
