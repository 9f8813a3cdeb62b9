"""crd-only command."""

import click

from crdsplit_engine import build_crd_only_chart
from crdsplit_engine.errors import CyclicDependencyError

from . import echo_warnings, load_or_abort, save_or_abort


@click.command("crd-only")
@click.option("--input", "input_path", required=True, help="Path to the input Helm chart directory or .tgz file")
@click.option("--output", required=True, help="Output directory for the repackaged CRDs-only chart")
@click.option("--semver/--no-semver", default=True, show_default=True, help="Use strict semver version (no v prefix)")
def crd_only(input_path: str, output: str, semver: bool):
    """Generate a chart holding only the unique CRDs of a chart and its dependencies."""
    chart = load_or_abort(input_path)

    try:
        result = build_crd_only_chart(chart, semver=semver)
    except CyclicDependencyError as e:
        click.echo(f"Error loading chart: {e}")
        raise click.Abort()

    echo_warnings(result.warnings)
    save_or_abort(result.chart, output, "repackaged chart")

    click.echo(
        f"Successfully repackaged {result.crd_count} unique CRDs + {result.extra_count} additional files into {output}"
    )
