import io
import tarfile
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional, Set, Tuple, Union

import yaml
from loguru import logger

from crdsplit_engine.config import DEFAULT_CONFIG, SplitConfig
from crdsplit_engine.errors import BundleSaveError
from crdsplit_engine.models import BundleNode, check_not_ancestor


def save_chart_dir(chart: BundleNode, dest: Union[str, Path], config: SplitConfig = DEFAULT_CONFIG) -> Path:
    """Write a chart into `dest/<chart name>/` and return that directory.

    Dependencies are packaged as `charts/<name>-<version>.tgz` archives.
    """
    try:
        return _save(chart, Path(dest), config)
    except OSError as e:
        raise BundleSaveError(f"cannot write chart {chart.name} to {dest}: {e}") from e


def archive_name(chart: BundleNode) -> str:
    return f"{chart.name}-{chart.metadata.version}.tgz" if chart.metadata.version else f"{chart.name}.tgz"


def chart_yaml_bytes(chart: BundleNode) -> bytes:
    return yaml.safe_dump(chart.metadata.to_chart_yaml(), default_flow_style=False, sort_keys=False).encode("utf-8")


def _relative_parts(chart: BundleNode, path: str) -> Tuple[str, ...]:
    rel = PurePosixPath(path)
    if rel.is_absolute() or ".." in rel.parts:
        raise BundleSaveError(f"file {path} of {chart.name} escapes the chart directory")
    return rel.parts


def _save(chart: BundleNode, dest: Path, config: SplitConfig) -> Path:
    out_dir = dest / chart.name
    if out_dir.exists() and not out_dir.is_dir():
        raise BundleSaveError(f"file {out_dir} already exists and is not a directory")
    out_dir.mkdir(parents=True, exist_ok=True)

    with open(out_dir / config.chart_file, "wb") as f:
        f.write(chart_yaml_bytes(chart))

    for artifact in chart.files:
        file_path = out_dir.joinpath(*_relative_parts(chart, artifact.path))
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(artifact.data)

    if chart.dependencies:
        charts_dir = out_dir / config.charts_dir_prefix.rstrip("/")
        charts_dir.mkdir(parents=True, exist_ok=True)
        for dep in chart.dependencies:
            with open(charts_dir / archive_name(dep), "wb") as f:
                f.write(chart_archive_bytes(dep, config, {id(chart)}))

    logger.debug(f"Wrote {len(chart.files)} files and {len(chart.dependencies)} dependencies of {chart.name} to {out_dir}")
    return out_dir


def chart_archive_bytes(chart: BundleNode, config: SplitConfig = DEFAULT_CONFIG, ancestors: Optional[Set[int]] = None) -> bytes:
    """Package a chart as a gzipped tar archive with every entry under `<name>/`.

    Nested dependencies are stored unpacked inside the archive, under
    `<name>/charts/<dependency>/`.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data in _archive_entries(chart, chart.name, config, set(ancestors or ())):
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def _archive_entries(chart: BundleNode, base: str, config: SplitConfig, ancestors: Set[int]) -> Iterator[Tuple[str, bytes]]:
    check_not_ancestor(chart, ancestors)

    yield f"{base}/{config.chart_file}", chart_yaml_bytes(chart)
    for artifact in chart.files:
        yield "/".join((base,) + _relative_parts(chart, artifact.path)), artifact.data

    ancestors.add(id(chart))
    try:
        for dep in chart.dependencies:
            yield from _archive_entries(dep, f"{base}/{config.charts_dir_prefix}{dep.name}", config, ancestors)
    finally:
        ancestors.discard(id(chart))
