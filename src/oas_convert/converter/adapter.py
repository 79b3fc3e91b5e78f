"""Narrow interface around the Swagger 2.0 -> OpenAPI 3.0 converter."""

from oas_convert.converter.swagger2 import ConversionOptions, convert_obj
from oas_convert.errors import StructuralConversionError

# Lenient settings: fix what can be fixed, warn about the rest, keep anchors.
DEFAULT_OPTIONS = ConversionOptions(patch=True, warn_only=True, anchors=True)


def convert_swagger_to_oas30(
    swagger: dict, options: ConversionOptions = DEFAULT_OPTIONS
) -> tuple[dict, list[str]]:
    """Convert a Swagger 2.0 document tree to OpenAPI 3.0.0.

    Returns the converted document and the converter's warnings. Any
    failure inside the converter is raised as StructuralConversionError.
    """
    try:
        result = convert_obj(swagger, options)
    except Exception as e:
        raise StructuralConversionError(f"swagger2openapi: {e}") from e

    openapi = result.get("openapi") if isinstance(result, dict) else None
    if not isinstance(openapi, dict):
        raise StructuralConversionError("swagger2openapi: result has no 'openapi' document")
    return openapi, list(result.get("warnings", []))
