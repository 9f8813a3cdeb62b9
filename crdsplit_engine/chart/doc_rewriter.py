"""Rewriting of the chart's doc.yaml descriptor."""

from typing import Any, Dict, Sequence

import yaml

from crdsplit_engine.config import DEFAULT_CONFIG, SplitConfig
from crdsplit_engine.errors import DocumentParseError


def set_nested_field(content: Dict[str, Any], value: Any, *fields: str) -> None:
    """Set `content[f1][f2]...` to `value`, creating missing mappings on the way.

    Raises:
        DocumentParseError: an intermediate value exists but is not a mapping
    """
    current = content
    for depth, name in enumerate(fields[:-1]):
        child = current.get(name)
        if child is None:
            child = {}
            current[name] = child
        elif not isinstance(child, dict):
            path = ".".join(fields[: depth + 1])
            raise DocumentParseError(f"value cannot be set because {path} is not a map")
        current = child
    current[fields[-1]] = value


def rewrite_doc_yaml(data: bytes, new_chart_name: str, config: SplitConfig = DEFAULT_CONFIG) -> bytes:
    """Point the project, chart and release names in doc.yaml at `new_chart_name`."""
    try:
        content = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise DocumentParseError(f"invalid YAML: {e}") from e

    if content is None:
        content = {}
    if not isinstance(content, dict):
        raise DocumentParseError(f"expected a mapping at the top level, got {type(content).__name__}")

    fields: Sequence[Sequence[str]] = config.doc_name_fields
    for path in fields:
        set_nested_field(content, new_chart_name, *path)

    return yaml.safe_dump(content, default_flow_style=False, sort_keys=False, allow_unicode=True).encode("utf-8")
