"""Descriptive file selection, doc.yaml rewriting and CRD-only chart assembly."""

from .assembler import assemble_crd_only_chart, rename_chart, strict_version
from .doc_rewriter import rewrite_doc_yaml
from .selector import SelectedFiles, select_descriptive_files

__all__ = [
    "assemble_crd_only_chart",
    "rename_chart",
    "rewrite_doc_yaml",
    "select_descriptive_files",
    "SelectedFiles",
    "strict_version",
]
