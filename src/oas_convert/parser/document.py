"""Document tree reading, parsing and YAML serialization.

A document tree is whatever ``yaml.safe_load`` / ``json.loads`` return:
dicts, lists and scalars. Dicts keep insertion order, and objects shared
through YAML anchors stay shared until they are dumped again.
"""

import json
from pathlib import Path

import yaml

from oas_convert.errors import InputNotFound, ParseError, WriteError

LINE_WIDTH = 120


class DocumentDumper(yaml.SafeDumper):
    """SafeDumper that double-quotes scalars whenever quoting is required."""

    def choose_scalar_style(self):
        style = super().choose_scalar_style()
        if style == "'":
            return '"'
        return style


def parse_document(text: str, dialect: str) -> dict:
    """Parse raw text in the given dialect ('json' or 'yaml') into a document tree."""
    try:
        if dialect == "json":
            doc = json.loads(text)
        else:
            doc = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ParseError(f"invalid {dialect.upper()}: {e}") from e

    if not isinstance(doc, dict):
        raise ParseError(f"document root must be a mapping, got {type(doc).__name__}")
    return doc


def dump_document(doc: dict) -> str:
    """Serialize a document tree to YAML, keeping its key order."""
    return yaml.dump(
        doc,
        Dumper=DocumentDumper,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=LINE_WIDTH,
    )


def read_text(file_path: Path) -> str:
    try:
        return file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"{file_path} is not UTF-8 text: {e}") from e
    except OSError as e:
        raise InputNotFound(f"cannot read {file_path}: {e}") from e


def write_text(file_path: Path, content: str) -> None:
    """Write content to file_path, creating parent directories."""
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise WriteError(f"cannot write {file_path}: {e}") from e
