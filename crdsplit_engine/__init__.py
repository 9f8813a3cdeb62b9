"""crdsplit engine: derive CRD-less and CRD-only charts from a Helm chart tree."""

from .bundle import load_chart, save_chart_dir
from .config import DEFAULT_CONFIG, SplitConfig
from .pipelines import CRDLessResult, CRDOnlyResult, build_crd_less_chart, build_crd_only_chart

__all__ = [
    "build_crd_less_chart",
    "build_crd_only_chart",
    "CRDLessResult",
    "CRDOnlyResult",
    "DEFAULT_CONFIG",
    "load_chart",
    "save_chart_dir",
    "SplitConfig",
]
