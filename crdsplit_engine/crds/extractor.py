"""Identity extraction for CustomResourceDefinition documents."""

from typing import Any

import yaml

from crdsplit_engine.config import DEFAULT_CONFIG, SplitConfig
from crdsplit_engine.errors import InvalidCRDError
from crdsplit_engine.models import FileArtifact, IdentityKey


def is_crd_file(f: FileArtifact, config: SplitConfig = DEFAULT_CONFIG) -> bool:
    """Whether `f` lives in the chart's CRD directory."""
    return f.has_prefix(config.crd_dir_prefix)


def is_crd_manifest(f: FileArtifact, config: SplitConfig = DEFAULT_CONFIG) -> bool:
    """Whether `f` is a CRD directory file that Helm would install as a manifest."""
    return is_crd_file(f, config) and f.path.lower().endswith(config.manifest_extensions)


def _nested_str(obj: Any, *path: str) -> str:
    for key in path:
        if not isinstance(obj, dict):
            return ""
        obj = obj.get(key)
    return obj if isinstance(obj, str) else ""


def first_document(data: bytes) -> Any:
    """Return the first non-empty document of a YAML stream, or None.

    Later documents are not parsed.
    """
    try:
        for doc in yaml.safe_load_all(data):
            if doc is not None:
                return doc
    except yaml.YAMLError as e:
        raise InvalidCRDError(f"invalid YAML: {e}") from e
    return None


def extract_crd_key(data: bytes, config: SplitConfig = DEFAULT_CONFIG) -> IdentityKey:
    """Parse one CRD document and build its identity key.

    Raises:
        InvalidCRDError: the bytes are not YAML, or not a CustomResourceDefinition
    """
    doc = first_document(data)

    if not isinstance(doc, dict):
        raise InvalidCRDError(f"not a valid {config.crd_kind}")

    api_version = doc.get("apiVersion")
    if not api_version or not isinstance(api_version, str) or doc.get("kind") != config.crd_kind:
        raise InvalidCRDError(f"not a valid {config.crd_kind}")

    return IdentityKey(
        group=_nested_str(doc, "spec", "group"),
        kind=_nested_str(doc, "spec", "names", "kind"),
    )
