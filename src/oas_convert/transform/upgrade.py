"""OpenAPI 3.0.0 -> 3.1.0 schema upgrade.

Rewrites the 3.0-era schema constructs that JSON Schema 2020-12 replaced:

- ``nullable: true`` becomes ``"null"`` in the type list (or a ``oneOf`` branch)
- boolean ``exclusiveMinimum`` / ``exclusiveMaximum`` become numeric bounds
- ``x-s2o*`` keys left behind by the structural converter are dropped

Every rule is idempotent, so running the upgrade twice changes nothing.
"""

from collections.abc import Callable
from typing import Any

OAS31_VERSION = "3.1.0"
CONVERTER_PREFIX = "x-s2o"


def walk(node: Any, visitor: Callable[[dict], None], seen: set[int] | None = None) -> None:
    """Recursively walk a document tree and call visitor on every mapping.

    Mappings are visited before their values. Objects shared through YAML
    anchors are visited once.
    """
    if seen is None:
        seen = set()
    if isinstance(node, (dict, list)):
        if id(node) in seen:
            return
        seen.add(id(node))

    if isinstance(node, list):
        for item in node:
            walk(item, visitor, seen)
    elif isinstance(node, dict):
        visitor(node)
        for value in list(node.values()):
            walk(value, visitor, seen)


def _upgrade_nullable(node: dict) -> None:
    if node.get("nullable") is not True:
        return

    type_ = node.get("type")
    if isinstance(type_, str):
        node["type"] = [type_, "null"]
    elif isinstance(type_, list):
        if "null" not in type_:
            type_.append("null")
    elif isinstance(node.get("oneOf"), list):
        node["oneOf"].append({"type": "null"})
    elif "oneOf" in node:
        return
    else:
        node["oneOf"] = [{"type": "null"}]
    del node["nullable"]


def _upgrade_exclusive_bound(node: dict, exclusive_key: str, bound_key: str) -> None:
    flag = node.get(exclusive_key)
    if not isinstance(flag, bool):
        return

    if flag and bound_key in node:
        node[exclusive_key] = node.pop(bound_key)
    else:
        # true without a sibling bound loses the constraint
        del node[exclusive_key]


def _strip_converter_keys(node: dict) -> None:
    for key in [k for k in node if isinstance(k, str) and k.startswith(CONVERTER_PREFIX)]:
        del node[key]


def upgrade_node(node: dict) -> None:
    """Apply every 3.1 rewrite rule to a single mapping, in place."""
    _upgrade_nullable(node)
    _upgrade_exclusive_bound(node, "exclusiveMinimum", "minimum")
    _upgrade_exclusive_bound(node, "exclusiveMaximum", "maximum")
    _strip_converter_keys(node)


def upgrade_to_oas31(doc: dict) -> dict:
    """Upgrade an OpenAPI 3.0.0 document to 3.1.0 in place and return it."""
    doc["openapi"] = OAS31_VERSION
    walk(doc, upgrade_node)
    _strip_converter_keys(doc)
    return doc
