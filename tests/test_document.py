from pathlib import Path

import pytest
import yaml

from oas_convert.errors import ParseError, WriteError
from oas_convert.parser.detect import detect_dialect, detect_version
from oas_convert.parser.document import dump_document, parse_document, write_text


class TestDetect:
    def test_json_extension(self):
        assert detect_dialect(Path("api.json")) == "json"
        assert detect_dialect(Path("API.JSON")) == "json"

    def test_other_extensions_are_yaml(self):
        assert detect_dialect(Path("api.yaml")) == "yaml"
        assert detect_dialect(Path("api.yml")) == "yaml"
        assert detect_dialect(Path("api")) == "yaml"

    def test_detect_version(self):
        assert detect_version({"swagger": "2.0"}) == "2.0"
        assert detect_version({"openapi": "3.0.0"}) == "3.0.0"
        assert detect_version({"info": {}}) == "?"


class TestParseDocument:
    def test_parse_yaml(self):
        doc = parse_document("swagger: '2.0'\npaths: {}\n", "yaml")
        assert doc == {"swagger": "2.0", "paths": {}}

    def test_parse_json(self):
        doc = parse_document('{"swagger": "2.0", "paths": {}}', "json")
        assert doc == {"swagger": "2.0", "paths": {}}

    def test_yaml_keeps_key_order(self):
        doc = parse_document("b: 1\na: 2\nc: 3\n", "yaml")
        assert list(doc) == ["b", "a", "c"]

    def test_invalid_yaml(self):
        with pytest.raises(ParseError):
            parse_document("key: [invalid\n", "yaml")

    def test_invalid_json(self):
        with pytest.raises(ParseError):
            parse_document("{not json", "json")

    def test_non_mapping_root(self):
        with pytest.raises(ParseError, match="mapping"):
            parse_document("- a\n- b\n", "yaml")


class TestDumpDocument:
    def test_keeps_key_order(self):
        text = dump_document({"openapi": "3.1.0", "info": {"title": "T"}, "paths": {}})
        assert text.index("openapi:") < text.index("info:") < text.index("paths:")

    def test_plain_scalars_unquoted(self):
        assert dump_document({"name": "pets"}) == "name: pets\n"

    def test_required_quotes_are_double(self):
        text = dump_document({"code": "200", "flag": "true"})
        assert 'code: "200"' in text
        assert 'flag: "true"' in text
        assert "'" not in text

    def test_long_lines_are_wrapped(self):
        description = " ".join(["word"] * 60)
        text = dump_document({"description": description})
        assert len(text.splitlines()) > 1
        assert yaml.safe_load(text) == {"description": description}

    def test_unicode_is_kept(self):
        assert "Café" in dump_document({"title": "Café"})

    def test_shared_objects_become_aliases(self):
        shared = {"type": "string"}
        text = dump_document({"a": shared, "b": shared})
        assert "&id001" in text
        assert "*id001" in text


class TestWriteText:
    def test_creates_parent_directories(self, tmp_path):
        target = tmp_path / "nested" / "dir" / "out.yml"
        write_text(target, "a: 1\n")
        assert target.read_text(encoding="utf-8") == "a: 1\n"

    def test_unwritable_destination(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")
        with pytest.raises(WriteError):
            write_text(blocker / "out.yml", "a: 1\n")
