"""Struct fields and the rules that turn one into a property name."""

from __future__ import annotations

import dataclasses
import typing
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

from reflectschema.core.errors import UnsupportedTypeError
from reflectschema.reflect.tags import FieldTags, has_flag

if TYPE_CHECKING:
    from reflectschema.core.config import ReflectorConfig


@dataclass(frozen=True)
class StructField:
    """A declared (or synthetic) field of a struct type."""

    name: str
    type: Any
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def tags(self) -> FieldTags:
        return FieldTags.from_metadata(self.metadata)


@dataclass(frozen=True)
class FieldName:
    name: str
    embed: bool = False
    required: bool = False
    nullable: bool = False


SKIP = FieldName("")


def struct_fields(cls: type) -> list[StructField]:
    """Dataclass fields in declaration order with annotations resolved."""
    try:
        hints = typing.get_type_hints(cls)
    except NameError as exc:
        raise UnsupportedTypeError(cls, f"cannot resolve annotations: {exc}") from exc
    return [
        StructField(name=f.name, type=hints.get(f.name, f.type), metadata=f.metadata)
        for f in dataclasses.fields(cls)
    ]


def reflect_field_name(sf: StructField, config: "ReflectorConfig") -> FieldName:
    tags = sf.tags
    serial = tags.json
    if not serial.present or config.prefer_yaml_schema:
        serial = tags.yaml

    if serial.omitted:
        return SKIP
    if has_flag(tags.schema, "-"):
        return SKIP

    name = sf.name
    required = not serial.omitempty
    if config.required_from_jsonschema_tags:
        required = has_flag(tags.schema, "required")
    nullable = has_flag(tags.schema, "nullable")

    if serial.name:
        name = serial.name

    # private, non-embedded fields are not serialized
    if not tags.embedded and sf.name.startswith("_"):
        name = ""

    embed = False
    if tags.embedded and not serial.present:
        if not config.yaml_embedded_structs:
            name = ""
            embed = True
        else:
            name = _embedded_type_name(sf.type).lower()

    if tags.yaml.present and tags.yaml.inline:
        name = ""
        embed = True

    return FieldName(name=name, embed=embed, required=required, nullable=nullable)


def _embedded_type_name(tp: Any) -> str:
    args = [arg for arg in typing.get_args(tp) if arg is not type(None)]
    if len(args) == 1:
        tp = args[0]
    return getattr(tp, "__name__", str(tp))
