"""Error kinds raised by the conversion pipeline.

Every fatal condition derives from ConversionError so the CLI can report
it with a single diagnostic line and a nonzero exit.
"""


class ConversionError(Exception):
    """Base class for all fatal pipeline errors."""


class InputNotFound(ConversionError):
    """The input path does not exist."""


class ParseError(ConversionError):
    """Input text is not well-formed YAML or JSON."""


class ConfigError(ConversionError):
    """A resolved configuration file cannot be loaded."""


class StructuralConversionError(ConversionError):
    """The Swagger 2.0 -> OpenAPI 3.0 converter failed."""


class WriteError(ConversionError):
    """The output file cannot be written."""


class DocumentTooDeep(ConversionError):
    """The document nests deeper than the pipeline can walk."""
