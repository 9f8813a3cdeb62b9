"""
Chart loader - reads a chart directory or .tgz archive into a BundleTree

Files under charts/ become dependency charts: charts/<name>.tgz is read as an
archive, charts/<dir>/ as an unpacked chart. Dependency order follows the
dependencies list of Chart.yaml, then the remaining entries by name.
"""

import io
import tarfile
from pathlib import Path, PurePosixPath
from typing import Dict, List, Tuple, Union

import yaml
from loguru import logger
from pydantic import ValidationError

from crdsplit_engine.bundle.ignore import IgnoreRules
from crdsplit_engine.config import DEFAULT_CONFIG, SplitConfig
from crdsplit_engine.errors import BundleLoadError
from crdsplit_engine.models import BundleNode, ChartMetadata, FileArtifact

ARCHIVE_SUFFIXES = (".tgz", ".tar.gz")


def is_archive(name: str) -> bool:
    return name.lower().endswith(ARCHIVE_SUFFIXES)


def load_chart(path: Union[str, Path], config: SplitConfig = DEFAULT_CONFIG) -> BundleNode:
    """Load a chart from a directory or a gzipped tar archive.

    Raises:
        BundleLoadError: the path is missing or does not hold a valid chart
    """
    path = Path(path)
    if path.is_dir():
        logger.debug(f"Loading chart directory {path}")
        return load_files(read_directory(path, config), config)
    if path.is_file():
        logger.debug(f"Loading chart archive {path}")
        try:
            data = path.read_bytes()
        except OSError as e:
            raise BundleLoadError(f"cannot read {path}: {e}") from e
        return load_archive(data, config)
    raise BundleLoadError(f"{path}: no such file or directory")


def read_directory(root: Path, config: SplitConfig = DEFAULT_CONFIG) -> List[FileArtifact]:
    """Read every file below `root` in sorted order, honouring .helmignore."""
    rules = IgnoreRules.empty()
    ignore_path = root / config.ignore_file
    try:
        if ignore_path.is_file():
            rules = IgnoreRules.parse(ignore_path.read_text(encoding="utf-8"))
        rules = rules.with_defaults()

        files: List[FileArtifact] = []
        for entry in sorted(root.rglob("*")):
            rel = entry.relative_to(root).as_posix()
            if any(rules.ignored(parent.as_posix(), is_dir=True) for parent in reversed(PurePosixPath(rel).parents[:-1])):
                continue
            if entry.is_dir() or rules.ignored(rel):
                continue
            files.append(FileArtifact(path=rel, data=entry.read_bytes()))
    except OSError as e:
        raise BundleLoadError(f"cannot read chart directory {root}: {e}") from e
    return files


def read_archive(data: bytes) -> List[FileArtifact]:
    """Read a gzipped chart archive, dropping the leading `<chart>/` directory."""
    files: List[FileArtifact] = []
    try:
        with tarfile.open(fileobj=io.BytesIO(data), mode="r:gz") as tar:
            for member in tar:
                if not member.isfile():
                    continue
                parts = PurePosixPath(member.name).parts
                if len(parts) < 2:
                    continue
                if ".." in parts or parts[0] == "/":
                    raise BundleLoadError(f"chart illegally references a path outside its root: {member.name}")
                extracted = tar.extractfile(member)
                if extracted is None:
                    continue
                files.append(FileArtifact(path="/".join(parts[1:]), data=extracted.read()))
    except (tarfile.TarError, OSError, EOFError) as e:
        raise BundleLoadError(f"invalid chart archive: {e}") from e
    return files


def load_archive(data: bytes, config: SplitConfig = DEFAULT_CONFIG) -> BundleNode:
    return load_files(read_archive(data), config)


def parse_metadata(data: bytes) -> ChartMetadata:
    try:
        content = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise BundleLoadError(f"cannot parse Chart.yaml: {e}") from e
    if not isinstance(content, dict):
        raise BundleLoadError("Chart.yaml is not a mapping")
    try:
        metadata = ChartMetadata.model_validate(content)
    except ValidationError as e:
        raise BundleLoadError(f"invalid Chart.yaml: {e}") from e
    if not metadata.name:
        raise BundleLoadError("Chart.yaml has no name")
    return metadata


def load_files(files: List[FileArtifact], config: SplitConfig = DEFAULT_CONFIG) -> BundleNode:
    """Build a BundleNode (and its dependencies) from a chart's flat file list."""
    metadata = None
    own: List[FileArtifact] = []
    subcharts: Dict[str, List[FileArtifact]] = {}

    for f in files:
        if f.path == config.chart_file:
            metadata = parse_metadata(f.data)
        elif f.has_prefix(config.charts_dir_prefix) and _is_hidden_entry(f.path[len(config.charts_dir_prefix):]):
            logger.debug(f"Skipping {f.path}: hidden dependency entry")
        elif f.has_prefix(config.charts_dir_prefix) and _is_subchart_entry(f.path[len(config.charts_dir_prefix):]):
            rel = f.path[len(config.charts_dir_prefix):]
            entry = rel.split("/", 1)[0]
            subcharts.setdefault(entry, []).append(FileArtifact(path=rel, data=f.data))
        else:
            own.append(f)

    if metadata is None:
        raise BundleLoadError(f"{config.chart_file} file is missing")

    dependencies = []
    for entry, entry_files in _order_subcharts(metadata, subcharts):
        dependencies.append(_load_subchart(metadata.name, entry, entry_files, config))

    return BundleNode(name=metadata.name, metadata=metadata, files=tuple(own), dependencies=tuple(dependencies))


def _load_subchart(parent: str, entry: str, files: List[FileArtifact], config: SplitConfig) -> BundleNode:
    try:
        if is_archive(entry):
            return load_archive(files[0].data, config)
        prefix = entry + "/"
        return load_files([FileArtifact(path=f.path[len(prefix):], data=f.data) for f in files if f.has_prefix(prefix)], config)
    except BundleLoadError as e:
        raise BundleLoadError(f"error loading dependency {entry} of {parent}: {e}") from e


def _order_subcharts(
    metadata: ChartMetadata, subcharts: Dict[str, List[FileArtifact]]
) -> List[Tuple[str, List[FileArtifact]]]:
    """Order dependency entries by their position in Chart.yaml, unlisted ones last by name."""
    declared: Dict[str, int] = {}
    for i, dep in enumerate(metadata.dependencies or []):
        declared.setdefault(dep.name, i)
        if dep.alias:
            declared.setdefault(dep.alias, i)

    def rank(entry: str) -> Tuple[int, str]:
        stem = entry
        for suffix in ARCHIVE_SUFFIXES:
            if stem.lower().endswith(suffix):
                stem = stem[: -len(suffix)]
                break
        if stem in declared:
            return (declared[stem], entry)
        # archives are named <name>-<version>.tgz; prefer the longest matching name
        matches = [name for name in declared if stem.startswith(name + "-")]
        if matches:
            return (declared[max(matches, key=len)], entry)
        return (len(declared), entry)

    return sorted(subcharts.items(), key=lambda item: rank(item[0]))


def _is_subchart_entry(rel: str) -> bool:
    """Whether a path below charts/ belongs to a dependency chart rather than the parent."""
    if rel.endswith(".prov"):
        return False
    return "/" in rel or is_archive(rel)


def _is_hidden_entry(rel: str) -> bool:
    """Entries below charts/ starting with `_` or `.` are not dependencies and are dropped."""
    return rel.startswith(("_", "."))
