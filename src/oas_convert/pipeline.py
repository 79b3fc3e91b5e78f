"""End-to-end Swagger 2.0 -> OpenAPI 3.1.0 conversion.

Steps:
  1. Apply text substitutions to the raw source (built-in, then configured)
  2. Convert Swagger 2.0 -> OpenAPI 3.0.0
  3. Upgrade OpenAPI 3.0.0 -> 3.1.0
  4. Apply post-conversion cleanup (security schemes, servers, tags, x-tagGroups)

The output file is written once, after every step has succeeded.
"""

import re
from pathlib import Path

import click

from oas_convert.config import ConvertConfig, load_config
from oas_convert.converter.adapter import convert_swagger_to_oas30
from oas_convert.errors import DocumentTooDeep, InputNotFound
from oas_convert.parser.detect import detect_dialect, detect_version
from oas_convert.parser.document import dump_document, parse_document, read_text, write_text
from oas_convert.transform.cleanup import apply_cleanup
from oas_convert.transform.text import apply_text_replacements
from oas_convert.transform.upgrade import OAS31_VERSION, upgrade_to_oas31

OUTPUT_SUFFIX = ".yml"
UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def derive_output_path(input_path: Path, doc: dict) -> Path:
    """Build ``<input-dir>/<openapi version>.yml`` with a filename-safe version."""
    version = doc.get("openapi")
    if not isinstance(version, str) or not version:
        version = OAS31_VERSION
    safe = UNSAFE_FILENAME_CHARS.sub("-", version)
    return input_path.parent / f"{safe}{OUTPUT_SUFFIX}"


def convert_document(doc: dict, config: ConvertConfig) -> dict:
    """Run the structural, upgrade and cleanup steps on a parsed Swagger 2.0 tree."""
    click.echo("Step 2/4  swagger2openapi → OAS 3.0.0 …")
    oas30, warnings = convert_swagger_to_oas30(doc)
    for warning in warnings:
        click.echo(f"Warning   {warning}")

    click.echo("Step 3/4  Upgrading OAS 3.0.0 → 3.1.0 …")
    oas31 = upgrade_to_oas31(oas30)

    click.echo("Step 4/4  Applying post-conversion cleanup …")
    apply_cleanup(oas31, config)
    return oas31


class ConversionPipeline:
    """Converts one Swagger 2.0 file into an OpenAPI 3.1.0 YAML file."""

    def __init__(self, input_path: Path, output_path: Path | None = None, config_path: Path | None = None):
        self.input_path = input_path.resolve()
        self.output_path = output_path
        self.config_path = config_path

    def run(self) -> Path:
        """Run every step and return the path of the written file."""
        if not self.input_path.is_file():
            raise InputNotFound(f"file not found: {self.input_path}")

        config, found = load_config(self.input_path, self.config_path)
        if found is not None:
            click.echo(f"Config    {found}")

        click.echo(f"Reading   {self.input_path}")
        raw = read_text(self.input_path)

        click.echo("Step 1/4  Applying text substitutions …")
        raw = apply_text_replacements(raw, config.text_replacements)
        try:
            swagger = parse_document(raw, detect_dialect(self.input_path))
            click.echo(f"Detected  Swagger/OpenAPI version: {detect_version(swagger)}")
            doc = convert_document(swagger, config)
            content = dump_document(doc)
        except RecursionError as e:
            raise DocumentTooDeep(f"{self.input_path} is nested too deeply to convert") from e

        output_path = (self.output_path or derive_output_path(self.input_path, doc)).resolve()
        write_text(output_path, content)
        click.echo(f"Done      {output_path}")
        return output_path
