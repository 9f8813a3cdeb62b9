"""Selection of descriptive files copied from the root chart into the CRD-only chart."""

from dataclasses import dataclass, field
from typing import List

from loguru import logger

from crdsplit_engine.config import DEFAULT_CONFIG, SplitConfig
from crdsplit_engine.chart.doc_rewriter import rewrite_doc_yaml
from crdsplit_engine.errors import DocumentParseError
from crdsplit_engine.models import BundleNode, FileArtifact


@dataclass
class SelectedFiles:
    """Files picked from the root chart and any warnings raised while picking them."""

    files: List[FileArtifact] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def rewrite_doc_file(f: FileArtifact, new_chart_name: str, warnings: List[str], config: SplitConfig) -> FileArtifact:
    """Rewrite doc.yaml, falling back to the original bytes when that fails."""
    try:
        data = rewrite_doc_yaml(f.data, new_chart_name, config)
    except DocumentParseError as e:
        warnings.append(f"Failed to modify {f.path}: {e}")
        logger.debug(f"Keeping original {f.path}: {e}")
        return f
    return FileArtifact(path=f.path, data=data)


def select_descriptive_files(
    root: BundleNode, new_chart_name: str, config: SplitConfig = DEFAULT_CONFIG
) -> SelectedFiles:
    """Pick the allow-listed files and shared helper templates of `root`.

    Dependencies are never searched. Allow-listed files come first, in
    allow-list order, followed by helper templates in stored order.
    """
    selected = SelectedFiles()

    for name in config.descriptive_files:
        f = root.find_file(name)
        if f is None:
            continue
        if name == config.doc_file:
            f = rewrite_doc_file(f, new_chart_name, selected.warnings, config)
        selected.files.append(f)

    selected.files.extend(f for f in root.files if f.has_prefix(config.helper_template_prefix))

    logger.debug(f"Selected {len(selected.files)} descriptive files from {root.name}")
    return selected
