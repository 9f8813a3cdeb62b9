"""Shared fixtures and chart builders for crdsplit tests."""

import io
import tarfile
from pathlib import Path
from typing import Dict, Optional, Sequence

import pytest
import yaml

from crdsplit_engine.models import BundleNode, ChartMetadata, FileArtifact


def crd_yaml(group: str, kind: str, extra: str = "") -> bytes:
    """A minimal CustomResourceDefinition document."""
    doc = {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": f"{kind.lower()}s.{group}"},
        "spec": {"group": group, "names": {"kind": kind, "plural": f"{kind.lower()}s"}, "scope": "Namespaced"},
    }
    if extra:
        doc["metadata"]["annotations"] = {"origin": extra}
    return yaml.safe_dump(doc).encode("utf-8")


def make_node(
    name: str,
    files: Optional[Dict[str, bytes]] = None,
    dependencies: Sequence[BundleNode] = (),
    **metadata,
) -> BundleNode:
    metadata.setdefault("version", "v1.0.0")
    return BundleNode(
        name=name,
        metadata=ChartMetadata(name=name, **metadata),
        files=tuple(FileArtifact(path=p, data=d) for p, d in (files or {}).items()),
        dependencies=tuple(dependencies),
    )


def write_chart_dir(root: Path, chart_yaml: dict, files: Dict[str, bytes]) -> Path:
    """Write an unpacked chart to `root` and return it."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "Chart.yaml").write_text(yaml.safe_dump(chart_yaml), encoding="utf-8")
    for rel, data in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    return root


def chart_archive(chart_yaml: dict, files: Dict[str, bytes]) -> bytes:
    """Build a .tgz chart archive in memory, with files under `<name>/`."""
    name = chart_yaml["name"]
    entries = {"Chart.yaml": yaml.safe_dump(chart_yaml).encode("utf-8"), **files}
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for rel, data in entries.items():
            info = tarfile.TarInfo(name=f"{name}/{rel}")
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def sample_tree() -> BundleNode:
    """Root chart with a CRD, two dependencies, and a nested dependency."""
    nested = make_node(
        "nested",
        {"crds/bar.yaml": crd_yaml("g", "Bar", "nested"), "templates/deploy.yaml": b"kind: Deployment\n"},
    )
    first = make_node(
        "first",
        {
            "crds/foo.yaml": crd_yaml("g", "Foo", "first"),
            "crds/baz.yaml": crd_yaml("h", "Baz", "first"),
            "values.yaml": b"replicas: 1\n",
        },
        dependencies=[nested],
    )
    second = make_node(
        "second",
        {"crds/baz.yaml": crd_yaml("h", "Baz", "second"), "README.md": b"# second\n"},
    )
    return make_node(
        "root",
        {
            "crds/foo.yaml": crd_yaml("g", "Foo", "root"),
            "doc.yaml": b"project:\n  name: root\n",
            "README.md": b"# root\n",
            "values.yaml": b"image: root\n",
            "templates/_helpers.tpl": b"{{- define \"root.name\" -}}root{{- end -}}\n",
            "templates/deploy.yaml": b"kind: Deployment\n",
        },
        dependencies=[first, second],
        description="Root chart",
        home="https://example.com",
        annotations={"charts.openshift.io/name": "root"},
    )
