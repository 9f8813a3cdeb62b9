"""crd-less command."""

import click

from crdsplit_engine import build_crd_less_chart
from crdsplit_engine.errors import CyclicDependencyError

from . import echo_warnings, load_or_abort, save_or_abort


@click.command("crd-less")
@click.option("--input", "input_path", required=True, help="Input Helm chart directory or .tgz file")
@click.option("--output", required=True, help="Output directory for the chart without CRDs")
def crd_less(input_path: str, output: str):
    """Generate a chart with the CRDs removed from it and all of its dependencies."""
    chart = load_or_abort(input_path)

    try:
        result = build_crd_less_chart(chart)
    except CyclicDependencyError as e:
        click.echo(f"Error loading chart: {e}")
        raise click.Abort()

    echo_warnings(result.warnings)
    save_or_abort(result.chart, output, "modified chart")

    click.echo(f"Repackaged chart without CRDs to {output}")
