"""Tests for doc.yaml rewriting."""

import pytest
import yaml

from crdsplit_engine.chart.doc_rewriter import rewrite_doc_yaml, set_nested_field
from crdsplit_engine.errors import DocumentParseError


def test_overwrites_existing_fields():
    data = b"project:\n  name: old\n  shortName: o\n  url: https://example.com\nchart:\n  name: old\nrelease:\n  name: old\n"

    content = yaml.safe_load(rewrite_doc_yaml(data, "new"))

    assert content["project"] == {"name": "new", "shortName": "new", "url": "https://example.com"}
    assert content["chart"] == {"name": "new"}
    assert content["release"] == {"name": "new"}


def test_creates_missing_project_key():
    data = b"title: Docs\nchart:\n  version: 1.0.0\n"

    content = yaml.safe_load(rewrite_doc_yaml(data, "mychart-certified"))

    assert content["title"] == "Docs"
    assert content["project"] == {"name": "mychart-certified", "shortName": "mychart-certified"}
    assert content["chart"] == {"version": "1.0.0", "name": "mychart-certified"}
    assert content["release"] == {"name": "mychart-certified"}


def test_empty_document_becomes_mapping():
    content = yaml.safe_load(rewrite_doc_yaml(b"", "x"))
    assert content["project"]["name"] == "x"


def test_key_order_is_preserved():
    out = rewrite_doc_yaml(b"zeta: 1\nalpha: 2\n", "x").decode("utf-8")
    assert out.index("zeta") < out.index("alpha") < out.index("project")


@pytest.mark.parametrize(
    "data",
    [
        b"project: [unclosed\n",
        b"- a list\n",
        b"project: just-a-string\n",
    ],
)
def test_failures_raise_document_parse_error(data):
    with pytest.raises(DocumentParseError):
        rewrite_doc_yaml(data, "x")


def test_set_nested_field_rejects_scalar_intermediate():
    content = {"a": {"b": 1}}
    with pytest.raises(DocumentParseError, match="a.b"):
        set_nested_field(content, "v", "a", "b", "c")
