"""Conversion configuration models and sidecar-file resolution.

A configuration file is optional JSON that sits next to the input file:

    {
      "serverDescription": "Relative to your instance base URL.",
      "tagDescriptions": {"auth": "Authenticate against the API."},
      "tagGroups": [{"name": "Auth", "tags": ["auth"]}],
      "textReplacements": [{"find": "old phrase", "replace": "new phrase"}]
    }
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from oas_convert.errors import ConfigError

SHARED_CONFIG_NAME = "convert.config.json"


class TagGroup(BaseModel):
    """An ``x-tagGroups`` entry. Unknown keys are kept and written back as-is."""

    model_config = ConfigDict(extra="allow")

    name: str
    tags: list[str]


class TextReplacement(BaseModel):
    """A literal find/replace pair applied to the raw source text."""

    find: str
    replace: str


class ConvertConfig(BaseModel):
    """User-supplied cleanup settings. Every field is optional."""

    model_config = ConfigDict(populate_by_name=True)

    server_description: str | None = Field(default=None, alias="serverDescription")
    tag_descriptions: dict[str, str] | None = Field(default=None, alias="tagDescriptions")
    tag_groups: list[TagGroup] | None = Field(default=None, alias="tagGroups")
    text_replacements: list[TextReplacement] = Field(default=[], alias="textReplacements")


def config_candidates(input_path: Path, explicit: Path | None = None) -> list[Path]:
    """List config paths to try, in priority order."""
    if explicit is not None:
        return [explicit.resolve()]
    return [
        input_path.parent / f"{input_path.stem}.config.json",
        input_path.parent / SHARED_CONFIG_NAME,
    ]


def find_config(input_path: Path, explicit: Path | None = None) -> Path | None:
    """Return the first existing config path for input_path, or None.

    An explicit path bypasses sidecar discovery.
    """
    for candidate in config_candidates(input_path, explicit):
        if candidate.is_file():
            return candidate
    return None


def parse_config(text: str, source: str = "<config>") -> ConvertConfig:
    """Parse configuration JSON text into a ConvertConfig."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in {source}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{source} must contain a JSON object")

    try:
        return ConvertConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"invalid config in {source}: {e}") from e


def load_config(input_path: Path, explicit: Path | None = None) -> tuple[ConvertConfig, Path | None]:
    """Resolve and load the configuration for input_path.

    Returns the config and the path it came from. When no config file
    exists, returns an empty ConvertConfig and None.
    """
    path = find_config(input_path, explicit)
    if path is None:
        return ConvertConfig(), None

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    return parse_config(text, source=str(path)), path
