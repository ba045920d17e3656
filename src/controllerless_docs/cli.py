"""CLI entry point for controllerless-docs."""

import json
import logging
import sys
from pathlib import Path

import click
import yaml

from controllerless_docs.config import build_catalog, load_catalog_config
from controllerless_docs.description.models import ApiDescription
from controllerless_docs.errors import ConfigurationError


def _load_descriptions(catalog_path: Path, app_dir: Path) -> list[ApiDescription]:
    """Build the catalog described by a YAML file and return its descriptions."""
    app_dir = str(app_dir.resolve())
    if app_dir not in sys.path:
        sys.path.insert(0, app_dir)

    try:
        config = load_catalog_config(catalog_path)
        return list(build_catalog(config).api_descriptions)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log how descriptions are synthesized.")
def main(verbose: bool):
    """Controllerless Docs: describe command/query messages as API endpoints."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("catalog_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the descriptions to this file instead of stdout.")
@click.option("--format", "fmt", default="yaml", type=click.Choice(["yaml", "json"]), help="Output format.")
@click.option("--app-dir", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path), help="Directory to import message modules from.")
def describe(catalog_path: Path, output: Path | None, fmt: str, app_dir: Path):
    """Dump the API descriptions of a catalog file."""
    descriptions = _load_descriptions(catalog_path, app_dir)
    summaries = [d.to_summary() for d in descriptions]

    if fmt == "json":
        text = json.dumps(summaries, indent=2, ensure_ascii=False)
    else:
        text = yaml.safe_dump(summaries, sort_keys=False, allow_unicode=True)

    if output is None:
        click.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"{len(summaries)} API descriptions saved to {output}")


@main.command()
@click.argument("catalog_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--app-dir", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path), help="Directory to import message modules from.")
def routes(catalog_path: Path, app_dir: Path):
    """List the route of every message in a catalog file."""
    for description in _load_descriptions(catalog_path, app_dir):
        click.echo(f"{description.http_method:<7} {description.relative_path}")
