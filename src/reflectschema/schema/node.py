"""Schema node model and its JSON rendering."""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any, Optional, Union

from reflectschema.schema.version import Version


SCHEMA_TYPES = ("object", "array", "string", "number", "integer", "boolean", "null")


@dataclass(eq=False)
class SchemaNode:
    """One JSON Schema subtree.

    Unset attributes (``None``, ``""``, ``False``, empty containers) are left
    out of the rendered document. ``extras`` holds free-form keywords that are
    rendered at the same level as the structured ones.
    """

    id: str = ""
    comment: str = ""
    schema: Version = Version.UNSET
    ref: str = ""
    title: str = ""
    description: str = ""
    type: str = ""
    enum: list[Any] = field(default_factory=list)
    const: Any = None
    multiple_of: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_maximum: Optional[float] = None
    minimum: Optional[float] = None
    exclusive_minimum: Optional[float] = None
    max_length: Optional[int] = None
    min_length: Optional[int] = None
    pattern: str = ""
    items: Optional["SchemaNode"] = None
    additional_items: Optional["SchemaNode"] = None
    max_items: Optional[int] = None
    min_items: Optional[int] = None
    unique_items: bool = False
    contains: Optional["SchemaNode"] = None
    max_properties: Optional[int] = None
    min_properties: Optional[int] = None
    required: list[str] = field(default_factory=list)
    properties: Optional[dict[str, "SchemaNode"]] = None
    pattern_properties: dict[str, "SchemaNode"] = field(default_factory=dict)
    additional_properties: Union[bool, "SchemaNode", None] = None
    dependencies: dict[str, "SchemaNode"] = field(default_factory=dict)
    property_names: Optional["SchemaNode"] = None
    if_: Optional["SchemaNode"] = None
    then: Optional["SchemaNode"] = None
    else_: Optional["SchemaNode"] = None
    all_of: list["SchemaNode"] = field(default_factory=list)
    any_of: list["SchemaNode"] = field(default_factory=list)
    one_of: list["SchemaNode"] = field(default_factory=list)
    not_: Optional["SchemaNode"] = None
    format: str = ""
    content_encoding: str = ""
    content_media_type: str = ""
    default: Any = None
    read_only: bool = False
    write_only: bool = False
    examples: list[Any] = field(default_factory=list)
    media: Optional["SchemaNode"] = None
    binary_encoding: str = ""
    extras: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def reference(cls, target: str) -> "SchemaNode":
        return cls(ref=target)

    def is_empty(self) -> bool:
        return not self.to_dict()

    def to_dict(self, version: Version = Version.UNSET) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for attr, key, kind in _KEYWORDS:
            value = getattr(self, attr)
            if attr in _NONE_ONLY:
                if value is None:
                    continue
            elif _is_unset(value):
                continue
            if attr == "id":
                key = version.id_keyword
            out[key] = _render(value, kind, version)
        if version.boolean_exclusive_bounds:
            _draft04_bounds(out)
        for key, value in self.extras.items():
            out[key] = copy.deepcopy(value)
        return out

    def to_json(self, version: Version = Version.UNSET, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(version), indent=indent)


# (attribute, JSON keyword, rendering kind) in output order.
_KEYWORDS: tuple[tuple[str, str, str], ...] = (
    ("id", "$id", "value"),
    ("comment", "$comment", "value"),
    ("schema", "$schema", "version"),
    ("ref", "$ref", "value"),
    ("type", "type", "value"),
    ("enum", "enum", "value"),
    ("const", "const", "value"),
    ("multiple_of", "multipleOf", "number"),
    ("maximum", "maximum", "number"),
    ("exclusive_maximum", "exclusiveMaximum", "number"),
    ("minimum", "minimum", "number"),
    ("exclusive_minimum", "exclusiveMinimum", "number"),
    ("max_length", "maxLength", "value"),
    ("min_length", "minLength", "value"),
    ("pattern", "pattern", "value"),
    ("items", "items", "node"),
    ("additional_items", "additionalItems", "node"),
    ("max_items", "maxItems", "value"),
    ("min_items", "minItems", "value"),
    ("unique_items", "uniqueItems", "value"),
    ("contains", "contains", "node"),
    ("max_properties", "maxProperties", "value"),
    ("min_properties", "minProperties", "value"),
    ("required", "required", "value"),
    ("properties", "properties", "node_map"),
    ("pattern_properties", "patternProperties", "node_map"),
    ("additional_properties", "additionalProperties", "node_or_bool"),
    ("dependencies", "dependencies", "node_map"),
    ("property_names", "propertyNames", "node"),
    ("if_", "if", "node"),
    ("then", "then", "node"),
    ("else_", "else", "node"),
    ("all_of", "allOf", "node_list"),
    ("any_of", "anyOf", "node_list"),
    ("one_of", "oneOf", "node_list"),
    ("not_", "not", "node"),
    ("title", "title", "value"),
    ("description", "description", "value"),
    ("default", "default", "value"),
    ("read_only", "readOnly", "value"),
    ("write_only", "writeOnly", "value"),
    ("examples", "examples", "value"),
    ("format", "format", "value"),
    ("content_encoding", "contentEncoding", "value"),
    ("content_media_type", "contentMediaType", "value"),
    ("media", "media", "node"),
    ("binary_encoding", "binaryEncoding", "value"),
)


# Rendered whenever not None, even when empty or falsy.
_NONE_ONLY = frozenset({"properties", "additional_properties", "const", "default"})


def _is_unset(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, Version):
        return value is Version.UNSET
    if isinstance(value, (str, list, tuple)) and not value:
        return True
    if isinstance(value, dict) and not value:
        return True
    return False


def _render(value: Any, kind: str, version: Version) -> Any:
    if kind == "version":
        return value.uri
    if kind == "node":
        return value.to_dict(version)
    if kind == "node_list":
        return [item.to_dict(version) for item in value]
    if kind == "node_map":
        return {name: child.to_dict(version) for name, child in value.items()}
    if kind == "node_or_bool":
        if isinstance(value, SchemaNode):
            return value.to_dict(version)
        return bool(value)
    if kind == "number":
        return _number(value)
    if isinstance(value, (list, dict)):
        return copy.deepcopy(value)
    return value


def _number(value: float) -> int | float:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _draft04_bounds(out: dict[str, Any]) -> None:
    for bound, exclusive in (("minimum", "exclusiveMinimum"), ("maximum", "exclusiveMaximum")):
        if exclusive not in out:
            continue
        limit = out.pop(exclusive)
        if bound not in out:
            out[bound] = limit
        out[exclusive] = True
