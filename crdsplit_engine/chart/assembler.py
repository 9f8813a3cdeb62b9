"""Assembly of the flat CRD-only chart."""

import posixpath
from typing import List, Sequence, Set

from loguru import logger

from crdsplit_engine.config import DEFAULT_CONFIG, SplitConfig
from crdsplit_engine.models import BundleNode, ChartMetadata, CollectionResult, FileArtifact


def crd_only_metadata(root: ChartMetadata, new_chart_name: str, config: SplitConfig = DEFAULT_CONFIG) -> ChartMetadata:
    """Metadata for the CRD-only chart, derived field by field from the root chart."""
    return ChartMetadata(
        name=new_chart_name,
        version=root.version,
        description=f"Chart containing only CRDs from {root.name} chart",
        api_version=config.chart_api_version,
        home=root.home,
        sources=list(root.sources) if root.sources is not None else None,
        keywords=list(root.keywords) if root.keywords is not None else None,
        maintainers=[m.model_copy() for m in root.maintainers] if root.maintainers is not None else None,
        icon=root.icon,
        condition=root.condition,
        tags=root.tags,
        app_version=root.app_version,
        annotations=dict(root.annotations) if root.annotations is not None else None,
        kube_version=root.kube_version,
    )


def rename_chart(metadata: ChartMetadata, new_chart_name: str, config: SplitConfig = DEFAULT_CONFIG) -> ChartMetadata:
    """Set the chart name, and the naming annotation when the chart carries one."""
    update = {"name": new_chart_name}
    if metadata.annotations and config.name_annotation in metadata.annotations:
        annotations = dict(metadata.annotations)
        annotations[config.name_annotation] = new_chart_name
        update["annotations"] = annotations
    return metadata.model_copy(update=update)


def strict_version(version: str, config: SplitConfig = DEFAULT_CONFIG) -> str:
    """Drop a single leading `v` so the version is plain semver."""
    if version.startswith(config.version_prefix):
        return version[len(config.version_prefix):]
    return version


def _disambiguate(path: str, source: str, used: Set[str]) -> str:
    directory, name = posixpath.split(path)
    candidate = posixpath.join(directory, f"{source}-{name}")
    index = 2
    while candidate in used:
        candidate = posixpath.join(directory, f"{source}-{index}-{name}")
        index += 1
    return candidate


def place_crd_files(collection: CollectionResult) -> List[FileArtifact]:
    """Collected CRD files in insertion order, each at a path of its own.

    When a later CRD was stored at a path already taken by an earlier one, it
    moves to `<dir>/<source chart>-<file name>` next to it.
    """
    used: Set[str] = set()
    files: List[FileArtifact] = []
    for entry in collection.crds.values():
        f = entry.file
        if f.path in used:
            path = _disambiguate(f.path, entry.source, used)
            logger.debug(f"Moved {f.path} from {entry.source} to {path}")
            f = FileArtifact(path=path, data=f.data)
        used.add(f.path)
        files.append(f)
    return files


def assemble_crd_only_chart(
    root: BundleNode,
    collection: CollectionResult,
    extra_files: Sequence[FileArtifact],
    config: SplitConfig = DEFAULT_CONFIG,
    semver: bool = True,
) -> BundleNode:
    """Build a single-level chart holding the collected CRDs and `extra_files`."""
    new_chart_name = root.name + config.crd_only_suffix

    metadata = rename_chart(crd_only_metadata(root.metadata, new_chart_name, config), new_chart_name, config)
    if semver:
        metadata = metadata.model_copy(update={"version": strict_version(root.metadata.version, config)})

    files: List[FileArtifact] = place_crd_files(collection) + list(extra_files)
    return BundleNode(name=new_chart_name, metadata=metadata, files=tuple(files))
