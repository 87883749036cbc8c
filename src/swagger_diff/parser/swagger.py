"""OpenAPI / Swagger document loader.

Parses Swagger 2.0 and OpenAPI 3.x documents (YAML or JSON) into the
normalized Document model.
"""

from pathlib import Path
from typing import Any

import structlog
import yaml

from .base import (
    ArrayNode,
    Document,
    HttpMethod,
    Node,
    ObjectNode,
    Operation,
    Parameter,
    ParamLocation,
    PathEntry,
    PrimitiveNode,
    RefNode,
    Response,
)
from .detect import OPENAPI_3, SWAGGER_2, detect_version
from swagger_diff.errors import DocumentLoadError

logger = structlog.get_logger()

_METHODS = {m.value for m in HttpMethod}

_LOCATIONS = {
    "query": ParamLocation.QUERY,
    "path": ParamLocation.PATH,
    "header": ParamLocation.HEADER,
    "body": ParamLocation.BODY,
    "formData": ParamLocation.FORM,
}

_CONTENT_TYPES = ("application/json", "multipart/form-data", "application/x-www-form-urlencoded")


def load_document(file_path: Path) -> Document:
    """Read a Swagger/OpenAPI file into a Document."""
    source = str(file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(source, str(e)) from e

    # JSON is a subset of YAML, one parser covers both
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(source, f"invalid YAML/JSON: {e}") from e

    doc = parse_document(data, source=source)
    logger.info(
        "Loaded document",
        source=source,
        paths=len(doc.paths),
        definitions=len(doc.definitions),
    )
    return doc


def parse_document(data: Any, source: str = "<document>") -> Document:
    """Normalize an already-parsed Swagger 2.0 or OpenAPI 3.x mapping."""
    version = detect_version(data, source)

    if version == SWAGGER_2:
        raw_definitions = data.get("definitions") or {}
    else:
        raw_definitions = (data.get("components") or {}).get("schemas") or {}

    definitions = {}
    for name, schema in raw_definitions.items():
        node = _parse_schema(schema, raw_definitions)
        if node is not None:
            definitions[name] = node

    paths = {}
    for path, item in (data.get("paths") or {}).items():
        path_item = _deref(item, data) or {}
        path_params = _parse_parameters(path_item.get("parameters", []), data, raw_definitions, version)

        operations = {}
        for method, operation in path_item.items():
            if method.upper() not in _METHODS or not isinstance(operation, dict):
                continue
            operations[HttpMethod(method.upper())] = _parse_operation(
                operation, path_params, data, raw_definitions, version
            )
        paths[path] = PathEntry(operations=operations)

    info = data.get("info") or {}
    return Document(
        title=info.get("title"),
        version=str(info["version"]) if "version" in info else None,
        paths=paths,
        definitions=definitions,
    )


def _parse_operation(
    operation: dict,
    path_params: list[Parameter],
    raw: dict,
    definitions: dict,
    version: str,
) -> Operation:
    params = _parse_parameters(operation.get("parameters", []), raw, definitions, version)

    # Operation-level parameters override path-level ones with the same key
    merged = {p.key: p for p in path_params}
    for p in params:
        merged[p.key] = p
    parameters = list(merged.values())

    if version == OPENAPI_3:
        body = _parse_request_body(operation.get("requestBody"), raw, definitions)
        if body is not None:
            parameters.append(body)

    return Operation(
        summary=operation.get("summary"),
        parameters=parameters,
        responses=_parse_responses(operation.get("responses", {}), raw, definitions, version),
    )


def _parse_parameters(params: list, raw: dict, definitions: dict, version: str) -> list[Parameter]:
    result = []
    for item in params or []:
        p = _deref(item, raw)
        if p is None or "name" not in p:
            logger.debug("Skipping unresolvable parameter", parameter=item)
            continue

        location = _LOCATIONS.get(p.get("in", "query"))
        if location is None:
            logger.debug("Skipping parameter", name=p["name"], location=p.get("in"))
            continue

        if version == OPENAPI_3 or location is ParamLocation.BODY:
            shape = _parse_schema(p.get("schema"), definitions)
        else:
            # Swagger 2.0 non-body parameters describe their type inline
            shape = _parse_schema(p, definitions)

        result.append(
            Parameter(
                name=p["name"],
                location=location,
                required=bool(p.get("required", False)),
                description=p.get("description"),
                shape=shape,
            )
        )
    return result


def _parse_request_body(body: dict | None, raw: dict, definitions: dict) -> Parameter | None:
    body = _deref(body, raw)
    if not body:
        return None
    return Parameter(
        name="body",
        location=ParamLocation.BODY,
        required=bool(body.get("required", False)),
        description=body.get("description"),
        shape=_parse_schema(_content_schema(body.get("content")), definitions),
    )


def _parse_responses(responses: dict, raw: dict, definitions: dict, version: str) -> dict[str, Response]:
    result = {}
    for status_code, item in (responses or {}).items():
        resp = _deref(item, raw) or {}
        if version == SWAGGER_2:
            schema = resp.get("schema")
        else:
            schema = _content_schema(resp.get("content"))
        result[str(status_code)] = Response(
            description=resp.get("description"),
            shape=_parse_schema(schema, definitions),
        )
    return result


def _content_schema(content: dict | None) -> dict | None:
    if not content:
        return None
    for content_type in _CONTENT_TYPES:
        if content_type in content:
            return (content[content_type] or {}).get("schema")
    # Fallback: first available schema
    for ct_data in content.values():
        return (ct_data or {}).get("schema")
    return None


def _parse_schema(schema: Any, definitions: dict, seen: frozenset = frozenset()) -> Node | None:
    """Convert a raw JSON schema into a Node.

    ``$ref`` stays a RefNode; only ``allOf`` members are expanded here,
    ``seen`` guards that expansion against reference loops.
    """
    if not isinstance(schema, dict):
        return None

    description = schema.get("description")
    if "$ref" in schema:
        return RefNode(ref=_ref_name(schema["$ref"]), description=description)

    if "allOf" in schema:
        return _parse_all_of(schema, definitions, seen)

    schema_type = _schema_type(schema)
    if schema_type == "array" or "items" in schema:
        return ArrayNode(items=_parse_schema(schema.get("items"), definitions, seen), description=description)

    if schema_type == "object" or "properties" in schema:
        properties = {}
        for name, prop in (schema.get("properties") or {}).items():
            node = _parse_schema(prop, definitions, seen)
            if node is not None:
                properties[name] = node
        return ObjectNode(properties=properties, description=description)

    return PrimitiveNode(type=schema_type or "string", format=schema.get("format"), description=description)


def _parse_all_of(schema: dict, definitions: dict, seen: frozenset) -> Node:
    members = schema.get("allOf") or []
    description = schema.get("description")

    if len(members) == 1 and "$ref" in members[0] and "properties" not in schema:
        return RefNode(ref=_ref_name(members[0]["$ref"]), description=description)

    properties = {}
    own = {k: v for k, v in schema.items() if k != "allOf"}
    for member in [*members, own]:
        if isinstance(member, dict) and "$ref" in member:
            name = _ref_name(member["$ref"])
            if name in seen:
                continue
            node = _parse_schema(definitions.get(name), definitions, seen | {name})
        else:
            node = _parse_schema(member, definitions, seen)
        if isinstance(node, ObjectNode):
            properties.update(node.properties)

    return ObjectNode(properties=properties, description=description)


def _schema_type(schema: dict) -> str | None:
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        # OpenAPI 3.1 style: ["string", "null"]
        types = [t for t in schema_type if t != "null"]
        return types[0] if types else None
    return schema_type


def _ref_name(ref: str) -> str:
    """'#/definitions/Pet' and '#/components/schemas/Pet' both name 'Pet'."""
    return ref.rsplit("/", 1)[-1]


def _deref(item: Any, raw: dict) -> dict | None:
    """Follow local '#/...' references of parameters, responses and bodies."""
    seen = set()
    while isinstance(item, dict) and "$ref" in item:
        ref = item["$ref"]
        if ref in seen or not ref.startswith("#/"):
            return None
        seen.add(ref)
        item = _lookup(raw, ref)
    return item if isinstance(item, dict) else None


def _lookup(raw: dict, ref: str) -> Any:
    node: Any = raw
    for part in ref[2:].split("/"):
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node
