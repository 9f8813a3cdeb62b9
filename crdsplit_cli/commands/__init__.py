"""Shared helpers for crdsplit commands."""

from pathlib import Path

import click

from crdsplit_engine import load_chart, save_chart_dir
from crdsplit_engine.errors import CRDSplitError
from crdsplit_engine.models import BundleNode


def load_or_abort(input_path: str) -> BundleNode:
    """Load a chart or print the failure on stdout and exit 1."""
    try:
        return load_chart(input_path)
    except CRDSplitError as e:
        click.echo(f"Error loading chart: {e}")
        raise click.Abort()


def save_or_abort(chart: BundleNode, output: str, what: str) -> Path:
    try:
        return save_chart_dir(chart, output)
    except CRDSplitError as e:
        click.echo(f"Error saving {what}: {e}")
        raise click.Abort()


def echo_warnings(warnings) -> None:
    for warning in warnings:
        click.echo(f"Warning: {warning}")
