from oas_convert.config import ConvertConfig, TagGroup
from oas_convert.transform.cleanup import apply_cleanup


def _auth_scheme():
    return {"type": "apiKey", "in": "header", "name": "Authorization"}


def _doc_with_schemes(**schemes):
    return {"openapi": "3.1.0", "components": {"securitySchemes": schemes}}


class TestSecuritySchemes:
    def test_bearer_name_gets_jwt_format(self):
        doc = _doc_with_schemes(bearerAuth=_auth_scheme())
        apply_cleanup(doc, ConvertConfig())
        assert doc["components"]["securitySchemes"]["bearerAuth"] == {
            "type": "http", "scheme": "bearer", "bearerFormat": "JWT",
        }

    def test_jwt_name_case_insensitive(self):
        doc = _doc_with_schemes(MyJWTToken=_auth_scheme())
        apply_cleanup(doc, ConvertConfig())
        assert doc["components"]["securitySchemes"]["MyJWTToken"]["bearerFormat"] == "JWT"

    def test_other_name_has_no_bearer_format(self):
        doc = _doc_with_schemes(customAuth=_auth_scheme())
        apply_cleanup(doc, ConvertConfig())
        assert doc["components"]["securitySchemes"]["customAuth"] == {"type": "http", "scheme": "bearer"}

    def test_header_name_case_insensitive(self):
        scheme = {"type": "apiKey", "in": "header", "name": "AUTHORIZATION"}
        doc = _doc_with_schemes(token=scheme)
        apply_cleanup(doc, ConvertConfig())
        assert doc["components"]["securitySchemes"]["token"]["type"] == "http"

    def test_other_api_keys_untouched(self):
        query_key = {"type": "apiKey", "in": "query", "name": "Authorization"}
        header_key = {"type": "apiKey", "in": "header", "name": "X-API-Key"}
        doc = _doc_with_schemes(q=dict(query_key), h=dict(header_key))
        apply_cleanup(doc, ConvertConfig())
        assert doc["components"]["securitySchemes"] == {"q": query_key, "h": header_key}

    def test_missing_components(self):
        doc = {"openapi": "3.1.0"}
        apply_cleanup(doc, ConvertConfig())
        assert doc == {"openapi": "3.1.0"}


class TestServers:
    def test_fills_missing_descriptions_only(self):
        doc = {"servers": [{"url": "https://x"}, {"url": "https://y", "description": "kept"}]}
        apply_cleanup(doc, ConvertConfig(server_description="D"))
        assert doc["servers"] == [
            {"url": "https://x", "description": "D"},
            {"url": "https://y", "description": "kept"},
        ]

    def test_no_configured_description(self):
        doc = {"servers": [{"url": "https://x"}]}
        apply_cleanup(doc, ConvertConfig())
        assert doc["servers"] == [{"url": "https://x"}]

    def test_no_servers(self):
        doc = {}
        apply_cleanup(doc, ConvertConfig(server_description="D"))
        assert "servers" not in doc


class TestTags:
    def test_overrides_matching_tags(self):
        doc = {"tags": [{"name": "auth", "description": "old"}, {"name": "users"}, {"name": "misc"}]}
        cfg = ConvertConfig(tag_descriptions={"auth": "new auth", "users": "new users", "absent": "x"})
        apply_cleanup(doc, cfg)
        assert doc["tags"] == [
            {"name": "auth", "description": "new auth"},
            {"name": "users", "description": "new users"},
            {"name": "misc"},
        ]

    def test_tag_groups_set_verbatim(self):
        doc = {"x-tagGroups": [{"name": "Old", "tags": []}]}
        cfg = ConvertConfig(tag_groups=[TagGroup(name="Auth", tags=["auth", "users"])])
        apply_cleanup(doc, cfg)
        assert doc["x-tagGroups"] == [{"name": "Auth", "tags": ["auth", "users"]}]

    def test_empty_tag_groups_leave_document_alone(self):
        doc = {"x-tagGroups": [{"name": "Old", "tags": []}]}
        apply_cleanup(doc, ConvertConfig(tag_groups=[]))
        assert doc["x-tagGroups"] == [{"name": "Old", "tags": []}]
