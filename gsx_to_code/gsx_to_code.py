import logging
import sys

import click

from .cli_utils import collect_gsx_files, load_config
from .pipeline import GsxCompileError, analyze_file
from .report import ReportRenderer, render_analysis


@click.group()
@click.version_option(package_name="gsx_to_code")
def gsx_to_code():
    """Front end for the GSX component language."""


@gsx_to_code.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--format", "output_format", default="text", type=click.Choice(["text", "json"]))
@click.option("--verbose", "-v", is_flag=True, default=False, help="List files without findings and log every pipeline phase")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True))
def check(config, output_format, verbose, paths):
    """Check .gsx files and report their diagnostics."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    config = load_config(config)

    reports = []
    failed = False
    for path in collect_gsx_files(paths):
        try:
            result = analyze_file(path, config)
            diagnostics = list(result.diagnostics)
            failed = failed or result.error is not None
        except GsxCompileError as e:
            diagnostics = e.diagnostics
            failed = True
        reports.append((str(path), diagnostics))

    renderer = ReportRenderer()
    if output_format == "json":
        click.echo(renderer.render_json(reports))
    else:
        click.echo(renderer.render_text(reports, verbose=verbose))

    if failed:
        sys.exit(1)


@gsx_to_code.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
def inspect(config, path):
    """Print the analysis tables of a .gsx file as JSON."""
    try:
        result = analyze_file(path, load_config(config))
    except GsxCompileError as e:
        raise click.ClickException(str(e))
    click.echo(render_analysis(result))
