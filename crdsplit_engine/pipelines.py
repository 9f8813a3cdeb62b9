"""The CRD-less and CRD-only chart pipelines.

Both take an already loaded chart and return a new chart plus the warnings
raised along the way; loading and saving stay with the caller.
"""

from dataclasses import dataclass, field
from typing import List

from loguru import logger

from crdsplit_engine.chart import assemble_crd_only_chart, select_descriptive_files
from crdsplit_engine.chart.selector import rewrite_doc_file
from crdsplit_engine.config import DEFAULT_CONFIG, SplitConfig
from crdsplit_engine.crds import collect_crds, strip_crds
from crdsplit_engine.models import BundleNode


@dataclass
class CRDLessResult:
    chart: BundleNode
    warnings: List[str] = field(default_factory=list)


@dataclass
class CRDOnlyResult:
    chart: BundleNode
    crd_count: int
    extra_count: int
    warnings: List[str] = field(default_factory=list)


def build_crd_less_chart(root: BundleNode, config: SplitConfig = DEFAULT_CONFIG) -> CRDLessResult:
    """Strip CRDs from the whole tree and rename the root chart."""
    new_chart_name = root.name + config.crd_less_suffix
    warnings: List[str] = []

    stripped = strip_crds(root, config).renamed(new_chart_name)

    files = list(stripped.files)
    for i, f in enumerate(files):
        if f.path == config.doc_file:
            files[i] = rewrite_doc_file(f, new_chart_name, warnings, config)
            break
    chart = stripped.with_files(tuple(files))

    logger.info(f"Built {chart.name} from {root.name} ({chart.count()} charts)")
    return CRDLessResult(chart=chart, warnings=warnings)


def build_crd_only_chart(root: BundleNode, config: SplitConfig = DEFAULT_CONFIG, semver: bool = True) -> CRDOnlyResult:
    """Collect unique CRDs from the tree into a flat chart with the root's descriptive files."""
    new_chart_name = root.name + config.crd_only_suffix

    collection = collect_crds(root, config)
    selected = select_descriptive_files(root, new_chart_name, config)
    chart = assemble_crd_only_chart(root, collection, selected.files, config, semver=semver)

    logger.info(f"Built {chart.name} with {len(collection.crds)} CRDs and {len(selected.files)} extra files")
    return CRDOnlyResult(
        chart=chart,
        crd_count=len(collection.crds),
        extra_count=len(selected.files),
        warnings=collection.warnings() + selected.warnings,
    )
