from unittest.mock import patch

import pytest

from oas_convert.converter.adapter import DEFAULT_OPTIONS, convert_swagger_to_oas30
from oas_convert.converter.swagger2 import S2OError
from oas_convert.errors import StructuralConversionError

SWAGGER = {
    "swagger": "2.0",
    "info": {"title": "T"},
    "paths": {"/health": {"get": {"responses": {"200": {"description": "OK"}}}}},
}


class TestConvertSwaggerToOas30:
    def test_returns_unwrapped_document(self):
        doc, warnings = convert_swagger_to_oas30(SWAGGER)
        assert doc["openapi"] == "3.0.0"
        assert "/health" in doc["paths"]
        assert warnings == []

    def test_default_options_are_lenient(self):
        assert DEFAULT_OPTIONS.patch is True
        assert DEFAULT_OPTIONS.warn_only is True
        assert DEFAULT_OPTIONS.anchors is True

    @patch("oas_convert.converter.adapter.convert_obj")
    def test_passes_lenient_options(self, mock_convert):
        mock_convert.return_value = {"openapi": {"openapi": "3.0.0"}, "warnings": ["w"]}
        doc, warnings = convert_swagger_to_oas30(SWAGGER)

        options = mock_convert.call_args[0][1]
        assert options.patch and options.warn_only and options.anchors
        assert doc == {"openapi": "3.0.0"}
        assert warnings == ["w"]

    @patch("oas_convert.converter.adapter.convert_obj")
    def test_converter_failure_propagates(self, mock_convert):
        mock_convert.side_effect = S2OError("Unsupported swagger/OpenAPI version: '1.2'")
        with pytest.raises(StructuralConversionError, match="Unsupported"):
            convert_swagger_to_oas30(SWAGGER)

    @patch("oas_convert.converter.adapter.convert_obj")
    def test_missing_openapi_key(self, mock_convert):
        mock_convert.return_value = {"warnings": []}
        with pytest.raises(StructuralConversionError, match="openapi"):
            convert_swagger_to_oas30(SWAGGER)
