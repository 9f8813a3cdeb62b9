"""Fixed names, prefixes and allow-lists used by the chart transforms."""

from typing import Tuple

from pydantic import BaseModel, ConfigDict


class SplitConfig(BaseModel):
    """Literals shared by the CRD stripping and collection pipelines."""

    model_config = ConfigDict(frozen=True)

    # Schema-definition storage
    crd_dir_prefix: str = "crds/"
    manifest_extensions: Tuple[str, ...] = (".yaml", ".yml", ".json")
    crd_kind: str = "CustomResourceDefinition"

    # Dependency storage inside a chart
    charts_dir_prefix: str = "charts/"
    chart_file: str = "Chart.yaml"
    ignore_file: str = ".helmignore"

    # Descriptive files copied into the CRD-only chart
    doc_file: str = "doc.yaml"
    descriptive_files: Tuple[str, ...] = (
        "doc.yaml",
        "README.md",
        "values.yaml",
        "values.schema.json",
        ".helmignore",
    )
    helper_template_prefix: str = "templates/_"
    doc_name_fields: Tuple[Tuple[str, ...], ...] = (
        ("project", "name"),
        ("project", "shortName"),
        ("chart", "name"),
        ("release", "name"),
    )

    # Derived chart naming
    crd_less_suffix: str = "-certified"
    crd_only_suffix: str = "-certified-crds"
    name_annotation: str = "charts.openshift.io/name"
    chart_api_version: str = "v2"
    version_prefix: str = "v"


DEFAULT_CONFIG = SplitConfig()
