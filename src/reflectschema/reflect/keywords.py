"""Overlay ``jsonschema`` tag keywords onto a field's schema node.

Keywords are looked up per family: generic keywords apply to every node, then
the node's (possibly overridden) ``type`` selects the string, numeric or array
table. Unknown keywords and malformed values never abort reflection; numbers
that fail to parse become ``0`` and are logged at DEBUG.
"""

from __future__ import annotations

from typing import Any, Callable

from reflectschema.core.logging import get_logger
from reflectschema.reflect.tags import FieldTags, TagToken
from reflectschema.schema.node import SchemaNode


logger = get_logger(__name__)

STRING_FORMATS = frozenset({"date-time", "email", "hostname", "ipv4", "ipv6", "uri"})

# Extension keys stored as integers on first insertion.
_INT_EXTRAS = frozenset({"minimum"})


def apply_field_keywords(
    node: SchemaNode,
    tags: FieldTags,
    parent: SchemaNode,
    property_name: str,
) -> None:
    if tags.description:
        node.description = tags.description
    valued = [token for token in tags.schema if not token.is_flag]
    for token in valued:
        handler = _GENERIC.get(token.keyword)
        if handler is not None:
            handler(node, token.value, parent, property_name)
    family = _BY_TYPE.get(node.type)
    if family is not None:
        family(node, tags.schema)
    for token in tags.extras:
        if not token.is_flag:
            merge_extra(node.extras, token.keyword, token.value)


def merge_extra(extras: dict[str, Any], key: str, value: str) -> None:
    """Set one extension keyword.

    new key      -> the raw string (integer for ``minimum``)
    existing str -> [old, new]
    existing list-> append new
    existing int -> integer parse of new
    """
    if key not in extras:
        extras[key] = _parse_int(value, key) if key in _INT_EXTRAS else value
        return
    existing = extras[key]
    if isinstance(existing, str):
        extras[key] = [existing, value]
    elif isinstance(existing, list):
        existing.append(value)
    elif isinstance(existing, int):
        extras[key] = _parse_int(value, key)


def _set_title(node: SchemaNode, value: str, parent: SchemaNode, name: str) -> None:
    node.title = value


def _set_description(node: SchemaNode, value: str, parent: SchemaNode, name: str) -> None:
    node.description = value


def _set_type(node: SchemaNode, value: str, parent: SchemaNode, name: str) -> None:
    node.type = value


def _add_enum(node: SchemaNode, value: str, parent: SchemaNode, name: str) -> None:
    _append_enum(node, value)


def _oneof_required(node: SchemaNode, value: str, parent: SchemaNode, name: str) -> None:
    branch = next((item for item in parent.one_of if item.title == value), None)
    if branch is None:
        branch = SchemaNode(title=value)
        parent.one_of.append(branch)
    branch.required.append(name)


def _oneof_type(node: SchemaNode, value: str, parent: SchemaNode, name: str) -> None:
    node.type = ""
    for type_name in value.split(";"):
        node.one_of.append(SchemaNode(type=type_name))


_GENERIC: dict[str, Callable[[SchemaNode, str, SchemaNode, str], None]] = {
    "title": _set_title,
    "description": _set_description,
    "type": _set_type,
    "enum": _add_enum,
    "oneof_required": _oneof_required,
    "oneof_type": _oneof_type,
}


def _string_keywords(node: SchemaNode, tokens: tuple[TagToken, ...]) -> None:
    for token in tokens:
        if token.is_flag:
            continue
        keyword, value = token.keyword, token.value
        if keyword == "minLength":
            node.min_length = _parse_uint(value, keyword)
        elif keyword == "maxLength":
            node.max_length = _parse_uint(value, keyword)
        elif keyword == "pattern":
            node.pattern = value
        elif keyword == "format":
            if value in STRING_FORMATS:
                node.format = value
            else:
                logger.debug("ignoring unknown string format %r", value)
        elif keyword == "default":
            node.default = value
        elif keyword == "example":
            node.examples.append(value)


_NUMERIC_BOUNDS = {
    "multipleOf": "multiple_of",
    "minimum": "minimum",
    "maximum": "maximum",
    "exclusiveMinimum": "exclusive_minimum",
    "exclusiveMaximum": "exclusive_maximum",
}


def _numeric_keywords(node: SchemaNode, tokens: tuple[TagToken, ...]) -> None:
    for token in tokens:
        if token.is_flag:
            continue
        keyword, value = token.keyword, token.value
        attr = _NUMERIC_BOUNDS.get(keyword)
        if attr is not None:
            setattr(node, attr, _parse_number(value, keyword))
        elif keyword == "default":
            node.default = _parse_int(value, keyword)
        elif keyword == "example":
            parsed = _try_int(value)
            if parsed is not None:
                node.examples.append(parsed)


def _array_keywords(node: SchemaNode, tokens: tuple[TagToken, ...]) -> None:
    defaults: list[str] = []
    for token in tokens:
        keyword, value = token.keyword, token.value
        if keyword == "uniqueItems":
            node.unique_items = True
        if token.is_flag:
            continue
        if keyword == "minItems":
            node.min_items = _parse_uint(value, keyword)
        elif keyword == "maxItems":
            node.max_items = _parse_uint(value, keyword)
        elif keyword == "default":
            defaults.append(value)
        elif keyword == "enum" and node.items is not None:
            _append_enum(node.items, value)
    if defaults:
        node.default = defaults


_BY_TYPE: dict[str, Callable[[SchemaNode, tuple[TagToken, ...]], None]] = {
    "string": _string_keywords,
    "number": _numeric_keywords,
    "integer": _numeric_keywords,
    "array": _array_keywords,
}


def _append_enum(node: SchemaNode, value: str) -> None:
    if node.type == "string":
        node.enum.append(value)
    elif node.type == "integer":
        node.enum.append(_parse_int(value, "enum"))
    elif node.type == "number":
        node.enum.append(_parse_float(value, "enum"))


def _try_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_int(value: str, keyword: str) -> int:
    parsed = _try_int(value)
    if parsed is None:
        logger.debug("malformed integer %r for %s; using 0", value, keyword)
        return 0
    return parsed


def _parse_uint(value: str, keyword: str) -> int:
    parsed = _parse_int(value, keyword)
    if parsed < 0:
        logger.debug("negative value %r for %s; using 0", value, keyword)
        return 0
    return parsed


def _parse_float(value: str, keyword: str) -> float:
    try:
        return float(value.strip())
    except ValueError:
        logger.debug("malformed number %r for %s; using 0", value, keyword)
        return 0.0


def _parse_number(value: str, keyword: str) -> int | float:
    parsed = _try_int(value)
    if parsed is not None:
        return parsed
    return _parse_float(value, keyword)
