"""Post-conversion cleanup driven by built-in rules and ConvertConfig.

Each step only checks for the parts of the document it touches and skips
anything missing or oddly shaped, so cleanup never fails.
"""

from oas_convert.config import ConvertConfig

BEARER_NAME_HINTS = ("jwt", "bearer")


def _is_authorization_api_key(scheme: dict) -> bool:
    name = scheme.get("name")
    return (
        scheme.get("type") == "apiKey"
        and scheme.get("in") == "header"
        and isinstance(name, str)
        and name.lower() == "authorization"
    )


def normalize_security_schemes(doc: dict) -> None:
    """Rewrite apiKey-in-Authorization-header schemes as HTTP bearer schemes."""
    components = doc.get("components")
    if not isinstance(components, dict):
        return
    schemes = components.get("securitySchemes")
    if not isinstance(schemes, dict):
        return

    for name, scheme in schemes.items():
        if not isinstance(scheme, dict) or not _is_authorization_api_key(scheme):
            continue
        del scheme["in"]
        del scheme["name"]
        scheme["type"] = "http"
        scheme["scheme"] = "bearer"
        if any(hint in str(name).lower() for hint in BEARER_NAME_HINTS):
            scheme["bearerFormat"] = "JWT"


def fill_server_descriptions(doc: dict, description: str | None) -> None:
    """Give every server without a description the configured one."""
    servers = doc.get("servers")
    if not description or not isinstance(servers, list):
        return
    for server in servers:
        if isinstance(server, dict) and not server.get("description"):
            server["description"] = description


def apply_tag_descriptions(doc: dict, descriptions: dict[str, str] | None) -> None:
    """Overwrite descriptions of tags named in the configured mapping."""
    tags = doc.get("tags")
    if not descriptions or not isinstance(tags, list):
        return
    for tag in tags:
        if not isinstance(tag, dict):
            continue
        name = tag.get("name")
        if isinstance(name, str) and name in descriptions:
            tag["description"] = descriptions[name]


def apply_tag_groups(doc: dict, config: ConvertConfig) -> None:
    """Set ``x-tagGroups`` from the configured tag groups, replacing any prior value."""
    if config.tag_groups:
        doc["x-tagGroups"] = [group.model_dump() for group in config.tag_groups]


def apply_cleanup(doc: dict, config: ConvertConfig) -> dict:
    """Run every cleanup step on doc in place and return it."""
    normalize_security_schemes(doc)
    fill_server_descriptions(doc, config.server_description)
    apply_tag_descriptions(doc, config.tag_descriptions)
    apply_tag_groups(doc, config)
    return doc
