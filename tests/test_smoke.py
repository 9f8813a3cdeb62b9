"""
Minimal smoke test for the package structure.
Tests that basic imports and the console entry point work.
"""

from click.testing import CliRunner


def test_imports():
    """Test that all public entry points import"""
    from crdsplit_engine import build_crd_less_chart, build_crd_only_chart, load_chart, save_chart_dir
    from crdsplit_engine.crds import collect_crds, extract_crd_key, strip_crds
    from crdsplit_engine.chart import assemble_crd_only_chart, rewrite_doc_yaml, select_descriptive_files
    from crdsplit_cli.main import cli

    assert all(
        callable(f)
        for f in (
            build_crd_less_chart,
            build_crd_only_chart,
            load_chart,
            save_chart_dir,
            collect_crds,
            extract_crd_key,
            strip_crds,
            assemble_crd_only_chart,
            rewrite_doc_yaml,
            select_descriptive_files,
            cli,
        )
    )


def test_help_lists_commands():
    """Test that the CLI group exposes both commands"""
    from crdsplit_cli.main import cli

    result = CliRunner().invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "crd-less" in result.output
    assert "crd-only" in result.output
