"""CRD discovery, stripping and collection."""

from .collector import collect_crds
from .extractor import extract_crd_key, is_crd_file, is_crd_manifest
from .stripper import strip_crds

__all__ = ["collect_crds", "extract_crd_key", "is_crd_file", "is_crd_manifest", "strip_crds"]
