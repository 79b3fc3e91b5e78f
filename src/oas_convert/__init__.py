"""Swagger 2.0 to OpenAPI 3.1.0 conversion pipeline."""

__version__ = "0.1.0"
