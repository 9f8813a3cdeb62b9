"""Tests for the CRD-less and CRD-only pipelines over in-memory trees."""

import yaml

from crdsplit_engine.pipelines import build_crd_less_chart, build_crd_only_chart

from conftest import crd_yaml, make_node


class TestCRDLessPipeline:
    def test_root_is_renamed_and_doc_rewritten(self, sample_tree):
        result = build_crd_less_chart(sample_tree)
        chart = result.chart

        assert chart.name == chart.metadata.name == "root-certified"
        assert chart.metadata.description == "Root chart"
        assert chart.metadata.annotations == {"charts.openshift.io/name": "root"}
        assert yaml.safe_load(chart.find_file("doc.yaml").data)["project"]["shortName"] == "root-certified"
        assert result.warnings == []

    def test_dependencies_keep_their_names(self, sample_tree):
        chart = build_crd_less_chart(sample_tree).chart
        assert [d.name for d in chart.dependencies] == ["first", "second"]
        assert chart.dependencies[0].dependencies[0].name == "nested"

    def test_crds_only_in_dependency(self):
        dep = make_node(
            "dep",
            {"crds/a.yaml": crd_yaml("g", "A"), "crds/b.yaml": crd_yaml("g", "B"), "templates/x.yaml": b"x"},
        )
        root = make_node("root", {"values.yaml": b"a: 1\n"}, dependencies=[dep])

        chart = build_crd_less_chart(root).chart

        assert chart.files == root.files
        assert [f.path for f in chart.dependencies[0].files] == ["templates/x.yaml"]

    def test_broken_doc_is_kept_with_warning(self):
        root = make_node("root", {"doc.yaml": b"- not a map\n"})

        result = build_crd_less_chart(root)

        assert result.chart.find_file("doc.yaml").data == b"- not a map\n"
        assert len(result.warnings) == 1

    def test_doc_in_dependency_is_untouched(self):
        dep = make_node("dep", {"doc.yaml": b"project:\n  name: dep\n"})
        root = make_node("root", dependencies=[dep])

        chart = build_crd_less_chart(root).chart

        assert chart.dependencies[0].find_file("doc.yaml").data == b"project:\n  name: dep\n"


class TestCRDOnlyPipeline:
    def test_counts_and_warnings(self, sample_tree):
        result = build_crd_only_chart(sample_tree)

        assert result.crd_count == 3
        assert result.extra_count == 4
        assert len(result.chart.files) == 7
        assert len(result.warnings) == 2
        assert result.chart.metadata.version == "1.0.0"

    def test_semver_disabled(self, sample_tree):
        assert build_crd_only_chart(sample_tree, semver=False).chart.metadata.version == "v1.0.0"

    def test_same_tree_feeds_both_pipelines(self, sample_tree):
        only = build_crd_only_chart(sample_tree)
        less = build_crd_less_chart(sample_tree)

        assert only.crd_count == 3
        assert less.chart.count() == 4
        assert sample_tree.find_file("crds/foo.yaml") is not None
