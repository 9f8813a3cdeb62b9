"""
Core models for the crdsplit engine.

A loaded chart is an immutable tree of BundleNode objects. Transforms build
new nodes rather than editing loaded ones.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import CyclicDependencyError


# ============================================================================
# Chart Metadata (Chart.yaml)
# ============================================================================


class Maintainer(BaseModel):
    """A chart maintainer entry"""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    email: Optional[str] = None
    url: Optional[str] = None


class ChartDependency(BaseModel):
    """A dependency declared in Chart.yaml"""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    version: Optional[str] = None
    repository: Optional[str] = None
    condition: Optional[str] = None
    tags: Optional[List[str]] = None
    alias: Optional[str] = None
    import_values: Optional[List[Any]] = Field(default=None, alias="import-values")

    @field_validator("version", mode="before")
    @classmethod
    def stringify_version(cls, value: Any) -> Any:
        return str(value) if isinstance(value, (int, float)) else value


class ChartMetadata(BaseModel):
    """Contents of a chart's Chart.yaml.

    Field names follow Python conventions; the camelCase Chart.yaml keys are
    kept as aliases. Keys this model does not know about are preserved.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str = Field(default="v2", alias="apiVersion")
    name: str
    version: str = ""
    kube_version: Optional[str] = Field(default=None, alias="kubeVersion")
    description: Optional[str] = None
    type: Optional[str] = None
    keywords: Optional[List[str]] = None
    home: Optional[str] = None
    sources: Optional[List[str]] = None
    dependencies: Optional[List[ChartDependency]] = None
    maintainers: Optional[List[Maintainer]] = None
    icon: Optional[str] = None
    app_version: Optional[str] = Field(default=None, alias="appVersion")
    deprecated: Optional[bool] = None
    annotations: Optional[Dict[str, str]] = None
    condition: Optional[str] = None
    tags: Optional[str] = None

    @field_validator("version", "app_version", mode="before")
    @classmethod
    def stringify_version(cls, value: Any) -> Any:
        # YAML reads `version: 1.0` as a float
        return str(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else value

    def to_chart_yaml(self) -> Dict[str, Any]:
        """Dump to the Chart.yaml key layout, omitting unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ============================================================================
# Bundle Tree
# ============================================================================


@dataclass(frozen=True)
class FileArtifact:
    """One file of a chart, addressed by its POSIX path relative to the chart root."""

    path: str
    data: bytes

    def has_prefix(self, prefix: str) -> bool:
        return self.path.startswith(prefix)


@dataclass(frozen=True)
class BundleNode:
    """A chart and its nested dependency charts."""

    name: str
    metadata: ChartMetadata
    files: Tuple[FileArtifact, ...] = ()
    dependencies: Tuple["BundleNode", ...] = ()

    def find_file(self, path: str) -> Optional[FileArtifact]:
        """Get the first file stored at exactly `path`"""
        for f in self.files:
            if f.path == path:
                return f
        return None

    def with_files(self, files: Tuple[FileArtifact, ...]) -> "BundleNode":
        return replace(self, files=tuple(files))

    def renamed(self, new_name: str) -> "BundleNode":
        """Copy of this node with both the node name and metadata name changed"""
        metadata = self.metadata.model_copy(update={"name": new_name})
        return replace(self, name=new_name, metadata=metadata)

    def walk(self) -> Iterator["BundleNode"]:
        """Yield this node and every dependency in preorder."""
        yield from _walk(self, set())

    def count(self) -> int:
        return sum(1 for _ in self.walk())


def _walk(node: BundleNode, ancestors: Set[int]) -> Iterator[BundleNode]:
    check_not_ancestor(node, ancestors)
    yield node
    ancestors.add(id(node))
    try:
        for dep in node.dependencies:
            yield from _walk(dep, ancestors)
    finally:
        ancestors.discard(id(node))


def check_not_ancestor(node: BundleNode, ancestors: Set[int]) -> None:
    """Raise CyclicDependencyError if `node` is already on the current path."""
    if id(node) in ancestors:
        raise CyclicDependencyError(f"Circular dependency detected: {node.name}")


# ============================================================================
# CRD Collection
# ============================================================================


@dataclass(frozen=True)
class IdentityKey:
    """Identity of a CustomResourceDefinition."""

    group: str
    kind: str

    def __str__(self) -> str:
        return f"{self.kind}/{self.group}"


@dataclass(frozen=True)
class CollectedCRD:
    """A retained CRD file and the name of the chart it came from."""

    file: FileArtifact
    source: str


@dataclass(frozen=True)
class DuplicateCRD:
    """A CRD dropped because an earlier chart already defined its key."""

    key: IdentityKey
    source: str
    kept_from: str

    @property
    def message(self) -> str:
        return f"CRD {self.key} duplicated in {self.source} - keeping version from {self.kept_from}"


@dataclass(frozen=True)
class SkippedFile:
    """A file under the CRD directory that did not yield an identity key."""

    path: str
    source: str
    reason: str

    @property
    def message(self) -> str:
        return f"Failed to parse CRD {self.path} from {self.source}: {self.reason}"


@dataclass
class CollectionResult:
    """Deduplicated CRDs in first-insertion order, plus the diagnostics of the walk."""

    crds: Dict[IdentityKey, CollectedCRD] = field(default_factory=dict)
    diagnostics: List[Union[DuplicateCRD, SkippedFile]] = field(default_factory=list)

    @property
    def duplicates(self) -> List[DuplicateCRD]:
        return [d for d in self.diagnostics if isinstance(d, DuplicateCRD)]

    @property
    def skipped(self) -> List[SkippedFile]:
        return [d for d in self.diagnostics if isinstance(d, SkippedFile)]

    def files(self) -> List[FileArtifact]:
        return [entry.file for entry in self.crds.values()]

    def warnings(self) -> List[str]:
        """Diagnostic messages in the order the walk produced them"""
        return [d.message for d in self.diagnostics]
