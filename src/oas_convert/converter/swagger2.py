"""Swagger 2.0 -> OpenAPI 3.0.0 structural converter.

Follows the behaviour of the swagger2openapi ``convertObj`` call:

- host/basePath/schemes become ``servers``
- definitions, parameters, responses and securityDefinitions move under
  ``components``
- body and formData parameters become a ``requestBody``
- response schemas become ``content`` entries, one per media type
- ``$ref`` pointers are rewritten to their new locations

Defects in the source are handled according to ConversionOptions: ``patch``
fixes the well-known ones, ``warn_only`` turns the rest into warnings instead
of raising S2OError. Warnings are also left on the offending node under an
``x-s2o-warning`` key.
"""

import copy
from typing import Any

from pydantic import BaseModel

OAS30_VERSION = "3.0.0"
DEFAULT_MEDIA_TYPE = "application/json"
FORM_URLENCODED = "application/x-www-form-urlencoded"
MULTIPART = "multipart/form-data"

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Parameter keywords that live inside ``schema`` in OpenAPI 3
SCHEMA_KEYWORDS = (
    "type", "format", "items", "default", "maximum", "exclusiveMaximum",
    "minimum", "exclusiveMinimum", "maxLength", "minLength", "pattern",
    "maxItems", "minItems", "uniqueItems", "enum", "multipleOf",
)

REF_PREFIXES = {
    "#/definitions/": "#/components/schemas/",
    "#/parameters/": "#/components/parameters/",
    "#/responses/": "#/components/responses/",
}

OAUTH2_FLOWS = {
    "implicit": ("implicit", ("authorizationUrl",)),
    "password": ("password", ("tokenUrl",)),
    "application": ("clientCredentials", ("tokenUrl",)),
    "accessCode": ("authorizationCode", ("authorizationUrl", "tokenUrl")),
}

# Handled explicitly by the converter; every other top-level key is copied
CONVERTED_KEYS = {
    "swagger", "info", "host", "basePath", "schemes", "consumes", "produces",
    "definitions", "parameters", "responses", "securityDefinitions", "paths",
}


class S2OError(Exception):
    """Raised for source defects that can be neither patched nor ignored."""


class ConversionOptions(BaseModel):
    patch: bool = False  # fix minor, well-known defects in the source
    warn_only: bool = False  # report non-patchable defects instead of raising
    anchors: bool = False  # keep objects shared through YAML anchors shared


def _recurse(obj: Any, action) -> None:
    """Recursively walk a dict/list structure and apply action to every dict."""
    if isinstance(obj, dict):
        action(obj)
        for value in list(obj.values()):
            _recurse(value, action)
    elif isinstance(obj, list):
        for item in obj:
            _recurse(item, action)


def _copy_apart(obj: Any) -> Any:
    """Deep copy without a memo, so shared objects become independent copies."""
    if isinstance(obj, dict):
        return {key: _copy_apart(value) for key, value in obj.items()}
    if isinstance(obj, list):
        return [_copy_apart(item) for item in obj]
    return obj


def _rewrite_ref(ref: str) -> str:
    for old, new in REF_PREFIXES.items():
        if ref.startswith(old):
            return new + ref[len(old):]
    return ref


def _fix_up_schema(node: dict) -> None:
    if isinstance(node.get("discriminator"), str):
        node["discriminator"] = {"propertyName": node["discriminator"]}
    if node.get("type") == "file":
        node["type"] = "string"
        node["format"] = "binary"
    if node.get("type") == "null":
        del node["type"]
        node["nullable"] = True
    if "x-nullable" in node:
        node["nullable"] = node.pop("x-nullable")


def _fix_up_ref(node: dict) -> None:
    if isinstance(node.get("$ref"), str):
        node["$ref"] = _rewrite_ref(node["$ref"])


def _primitive_schema(obj: dict) -> dict:
    """Pop the schema keywords of a parameter or header into a new schema."""
    schema = {key: obj.pop(key) for key in SCHEMA_KEYWORDS if key in obj}
    if "x-nullable" in obj:
        schema["nullable"] = obj.pop("x-nullable")
    return schema


def _media_types(value: Any) -> list[str]:
    if isinstance(value, list):
        types = [t for t in value if isinstance(t, str)]
        if types:
            return types
    return [DEFAULT_MEDIA_TYPE]


class Converter:
    """Converts one Swagger 2.0 document. Not reusable across documents."""

    def __init__(self, options: ConversionOptions):
        self.options = options
        self.warnings: list[str] = []
        self.patches: list[str] = []
        self._source_parameters: dict = {}

    # -- defect handling -----------------------------------------------------

    def _warn(self, node: Any, message: str) -> None:
        if not self.options.warn_only:
            raise S2OError(message)
        self.warnings.append(message)
        if isinstance(node, dict):
            node["x-s2o-warning"] = message

    def _patched(self, node: Any, message: str) -> None:
        self.patches.append(message)
        if isinstance(node, dict):
            node["x-s2o-patched"] = message

    def _defect(self, node: Any, message: str, fix) -> None:
        if self.options.patch:
            fix()
            self._patched(node, message)
        else:
            self._warn(node, message)

    # -- top level -----------------------------------------------------------

    def convert(self, swagger: dict) -> dict:
        if not isinstance(swagger, dict):
            raise S2OError("Swagger document must be an object")
        version = swagger.get("swagger")
        if version != "2.0" and not (self.options.patch and str(version) in ("2", "2.0")):
            raise S2OError(f"Unsupported swagger/OpenAPI version: {version!r}")

        src = copy.deepcopy(swagger) if self.options.anchors else _copy_apart(swagger)
        if version != "2.0":
            self._patched(src, f"swagger version {version!r} read as '2.0'")
        self._source_parameters = src.get("parameters") if isinstance(src.get("parameters"), dict) else {}

        openapi: dict = {"openapi": OAS30_VERSION}
        openapi["info"] = self._convert_info(src, src.get("info"))
        servers = self._convert_servers(src)
        if servers:
            openapi["servers"] = servers

        consumes = _media_types(src.get("consumes"))
        produces = _media_types(src.get("produces"))

        for key, value in src.items():
            if key == "paths":
                openapi["paths"] = self._convert_paths(value, consumes, produces)
            elif key not in CONVERTED_KEYS:
                openapi[key] = value
        if "paths" not in openapi:
            self._defect(openapi, "Swagger document has no paths", lambda: openapi.update(paths={}))

        components = self._convert_components(src, consumes, produces)
        if components:
            openapi["components"] = components

        _recurse(openapi, _fix_up_schema)
        _recurse(openapi, _fix_up_ref)
        return openapi

    def _convert_info(self, src: dict, info: Any) -> dict:
        if not isinstance(info, dict):
            info = {}
            self._defect(src, "Swagger document has no info object", lambda: None)
        for field in ("title", "version"):
            if not isinstance(info.get(field), str):
                if self.options.patch and info.get(field) is not None:
                    info[field] = str(info[field])
                    self._patched(info, f"info.{field} converted to a string")
                else:
                    self._defect(info, f"info.{field} is missing", lambda f=field: info.update({f: ""}))
        return info

    def _convert_servers(self, src: dict) -> list[dict]:
        host = src.get("host")
        base_path = src.get("basePath") if isinstance(src.get("basePath"), str) else ""
        if not isinstance(host, str) or not host:
            return [{"url": base_path}] if base_path else []

        schemes = src.get("schemes") if isinstance(src.get("schemes"), list) else []
        schemes = [s for s in schemes if isinstance(s, str)] or [""]
        servers = []
        for scheme in schemes:
            prefix = f"{scheme}:" if scheme else ""
            servers.append({"url": f"{prefix}//{host}{base_path}"})
        return servers

    # -- components ----------------------------------------------------------

    def _convert_components(self, src: dict, consumes: list[str], produces: list[str]) -> dict:
        components: dict = {}

        definitions = src.get("definitions")
        if isinstance(definitions, dict) and definitions:
            components["schemas"] = definitions

        responses = src.get("responses")
        if isinstance(responses, dict) and responses:
            components["responses"] = {
                name: self._convert_response(response, produces) for name, response in responses.items()
            }

        parameters: dict = {}
        request_bodies: dict = {}
        for name, param in self._source_parameters.items():
            if not isinstance(param, dict):
                self._warn(None, f"parameters.{name} is not an object")
                continue
            if param.get("in") == "body":
                request_bodies[name] = self._convert_body(param, consumes)
            elif param.get("in") != "formData":
                # formData parameters are inlined into each operation's requestBody
                parameters[name] = self._convert_parameter(param)
        if parameters:
            components["parameters"] = parameters
        if request_bodies:
            components["requestBodies"] = request_bodies

        security = src.get("securityDefinitions")
        if isinstance(security, dict) and security:
            components["securitySchemes"] = {
                name: self._convert_security_scheme(name, scheme) for name, scheme in security.items()
            }
        return components

    def _convert_security_scheme(self, name: str, scheme: Any) -> Any:
        if not isinstance(scheme, dict):
            self._warn(None, f"securityDefinitions.{name} is not an object")
            return scheme

        if scheme.get("type") == "basic":
            scheme["type"] = "http"
            scheme["scheme"] = "basic"
        elif scheme.get("type") == "oauth2":
            flow = scheme.pop("flow", None)
            if flow not in OAUTH2_FLOWS:
                self._warn(scheme, f"securityDefinitions.{name} has unknown oauth2 flow {flow!r}")
                return scheme
            flow_name, url_fields = OAUTH2_FLOWS[flow]
            flow_obj = {field: scheme.pop(field, "") for field in url_fields}
            flow_obj["scopes"] = scheme.pop("scopes", {})
            scheme["flows"] = {flow_name: flow_obj}
        return scheme

    # -- paths and operations ------------------------------------------------

    def _convert_paths(self, paths: Any, consumes: list[str], produces: list[str]) -> Any:
        if not isinstance(paths, dict):
            self._warn(None, "paths is not an object")
            return paths

        for path, path_item in paths.items():
            if not isinstance(path_item, dict):
                self._warn(None, f"path item {path} is not an object")
                continue

            shared = path_item.get("parameters")
            inherited: list = []
            if isinstance(shared, list):
                # request body parameters cannot live on the path item in OpenAPI 3
                inherited = [p for p in shared if self._param_location(p) in ("body", "formData")]
                path_item["parameters"] = [
                    self._convert_parameter(p) for p in shared if p not in inherited
                ]
                if not path_item["parameters"]:
                    del path_item["parameters"]

            for method, op in path_item.items():
                if not isinstance(method, str) or method.lower() not in HTTP_METHODS:
                    continue
                if not isinstance(op, dict):
                    self._warn(None, f"{method.upper()} {path} is not an object")
                    continue
                self._convert_operation(f"{method.upper()} {path}", op, inherited, consumes, produces)
        return paths

    def _resolve_parameter(self, param: Any) -> Any:
        if isinstance(param, dict) and isinstance(param.get("$ref"), str):
            ref = param["$ref"]
            if ref.startswith("#/parameters/"):
                return self._source_parameters.get(ref[len("#/parameters/"):], param)
        return param

    def _param_location(self, param: Any) -> Any:
        resolved = self._resolve_parameter(param)
        return resolved.get("in") if isinstance(resolved, dict) else None

    def _convert_operation(self, label: str, op: dict, inherited: list, consumes: list[str], produces: list[str]) -> None:
        op_consumes = _media_types(op.pop("consumes", None) or consumes)
        op_produces = _media_types(op.pop("produces", None) or produces)

        params = op.get("parameters") if isinstance(op.get("parameters"), list) else []
        params = params + [p for p in inherited if p not in params]

        converted = []
        form_params = []
        for param in params:
            location = self._param_location(param)
            if location == "body":
                op["requestBody"] = self._body_reference(param, op_consumes)
            elif location == "formData":
                form_params.append(self._resolve_parameter(param))
            elif isinstance(param, dict) and "$ref" in param:
                converted.append(param)
            elif isinstance(param, dict):
                converted.append(self._convert_parameter(param))
            else:
                self._warn(op, f"{label} has a parameter that is not an object")

        if form_params:
            op["requestBody"] = self._convert_form(form_params, op_consumes)
        if converted:
            op["parameters"] = converted
        else:
            op.pop("parameters", None)

        responses = op.get("responses")
        if not isinstance(responses, dict) or not responses:
            self._defect(
                op, f"{label} has no responses",
                lambda: op.update(responses={"default": {"description": "Default response"}}),
            )
            return
        for code, response in responses.items():
            responses[code] = self._convert_response(response, op_produces, f"{label} response {code}")

    # -- parameters and bodies -----------------------------------------------

    def _convert_parameter(self, param: Any) -> Any:
        if not isinstance(param, dict) or "$ref" in param:
            return param

        if param.get("in") == "path" and param.get("required") is not True:
            self._defect(param, f"path parameter {param.get('name')} must be required",
                         lambda: param.update(required=True))

        if "schema" not in param:
            schema = _primitive_schema(param)
            if schema.get("type") == "file":
                self._warn(param, f"parameter {param.get('name')} of type file outside formData")
            if schema:
                param["schema"] = schema

        collection_format = param.pop("collectionFormat", None)
        if collection_format is not None:
            self._apply_collection_format(param, collection_format)
        return param

    def _apply_collection_format(self, param: dict, collection_format: str) -> None:
        location = param.get("in")
        if collection_format == "csv":
            param["style"] = "form" if location in ("query", "cookie") else "simple"
            param["explode"] = False
        elif collection_format == "multi":
            param["style"] = "form"
            param["explode"] = True
        elif collection_format == "ssv":
            param["style"] = "spaceDelimited"
        elif collection_format == "pipes":
            param["style"] = "pipeDelimited"
        else:
            self._warn(param, f"parameter {param.get('name')} has unsupported collectionFormat {collection_format!r}")

    def _body_reference(self, param: dict, consumes: list[str]) -> dict:
        ref = param.get("$ref")
        if isinstance(ref, str) and ref.startswith("#/parameters/"):
            return {"$ref": "#/components/requestBodies/" + ref[len("#/parameters/"):]}
        return self._convert_body(param, consumes)

    def _convert_body(self, param: dict, consumes: list[str]) -> dict:
        schema = param.get("schema", {})
        body: dict = {}
        if param.get("description"):
            body["description"] = param["description"]
        body["content"] = {media_type: {"schema": schema} for media_type in consumes}
        if param.get("required") is True:
            body["required"] = True
        for key, value in param.items():
            if key.startswith("x-"):
                body[key] = value
        return body

    def _convert_form(self, params: list, consumes: list[str]) -> dict:
        has_file = any(isinstance(p, dict) and p.get("type") == "file" for p in params)
        if has_file or MULTIPART in consumes:
            media_type = MULTIPART
        else:
            media_type = FORM_URLENCODED

        schema: dict = {"type": "object", "properties": {}}
        required = []
        for param in params:
            if not isinstance(param, dict) or "name" not in param:
                self._warn(None, "formData parameter without a name")
                continue
            prop = {key: value for key, value in param.items() if key not in ("name", "in", "required", "collectionFormat", "allowEmptyValue")}
            if prop.get("type") == "file":
                prop["type"] = "string"
                prop["format"] = "binary"
            schema["properties"][param["name"]] = prop
            if param.get("required") is True:
                required.append(param["name"])
        if required:
            schema["required"] = required

        body: dict = {"content": {media_type: {"schema": schema}}}
        if required:
            body["required"] = True
        return body

    # -- responses -----------------------------------------------------------

    def _convert_response(self, response: Any, produces: list[str], label: str = "response") -> Any:
        if not isinstance(response, dict) or "$ref" in response:
            return response

        if "description" not in response:
            self._defect(response, f"{label} has no description", lambda: response.update(description=""))

        examples = response.pop("examples", None)
        if "schema" in response:
            schema = response.pop("schema")
            content = {}
            for media_type in produces:
                content[media_type] = {"schema": schema}
                if isinstance(examples, dict) and media_type in examples:
                    content[media_type]["example"] = examples[media_type]
            response["content"] = content

        headers = response.get("headers")
        if isinstance(headers, dict):
            for header in headers.values():
                if isinstance(header, dict) and "schema" not in header:
                    schema = _primitive_schema(header)
                    header.pop("collectionFormat", None)
                    if schema:
                        header["schema"] = schema
        return response


def convert_obj(swagger: dict, options: ConversionOptions | dict | None = None) -> dict:
    """Convert a Swagger 2.0 document to OpenAPI 3.0.0.

    Returns a result record: ``{"openapi": <document>, "warnings": [...],
    "patches": [...]}``. The input document is not modified.
    """
    if not isinstance(options, ConversionOptions):
        options = ConversionOptions.model_validate(options or {})
    converter = Converter(options)
    openapi = converter.convert(swagger)
    return {"openapi": openapi, "warnings": converter.warnings, "patches": converter.patches}
