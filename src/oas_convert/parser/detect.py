"""Detect the textual dialect of an API description file."""

from pathlib import Path

JSON_SUFFIXES = {".json"}


def detect_dialect(file_path: Path) -> str:
    """Detect the dialect of an API description from its extension.

    Returns: 'json' or 'yaml'.
    """
    if file_path.suffix.lower() in JSON_SUFFIXES:
        return "json"
    return "yaml"


def detect_version(doc: dict) -> str:
    """Return the declared Swagger/OpenAPI version, or '?' if none."""
    version = doc.get("swagger", doc.get("openapi"))
    if version is None:
        return "?"
    return str(version)
