"""CLI entry point for oas-convert."""

from pathlib import Path

import click

from oas_convert.errors import ConversionError
from oas_convert.pipeline import ConversionPipeline

USAGE = "oas-convert convert <input.yml|json> [output.yml] [--config <cfg.json>]"


@click.group()
def main():
    """oas-convert: upgrade Swagger 2.0 API descriptions to OpenAPI 3.1.0."""
    pass


@main.command()
@click.argument("input_path", metavar="INPUT", required=False, type=click.Path(path_type=Path))
@click.argument("output_path", metavar="[OUTPUT]", required=False, type=click.Path(dir_okay=False, path_type=Path))
@click.option("--config", "config_path", default=None, type=click.Path(path_type=Path), help="Config JSON file; skips <input>.config.json / convert.config.json discovery.")
def convert(input_path: Path | None, output_path: Path | None, config_path: Path | None):
    """Convert a Swagger 2.0 YAML/JSON file to OpenAPI 3.1.0 YAML.

    OUTPUT defaults to <input-dir>/<openapi-version>.yml.
    """
    if input_path is None:
        raise click.ClickException(f"missing input file. Usage: {USAGE}")

    pipeline = ConversionPipeline(input_path, output_path=output_path, config_path=config_path)
    try:
        pipeline.run()
    except ConversionError as e:
        raise click.ClickException(str(e)) from e
