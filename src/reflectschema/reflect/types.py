"""Well-known types and the capabilities a class may implement."""

from __future__ import annotations

import datetime
import enum
import ipaddress
from typing import Any, Callable, Optional, Protocol, runtime_checkable
from urllib.parse import ParseResult, SplitResult

from reflectschema.schema.node import SchemaNode


class RawMessage(bytes):
    """Pre-encoded JSON carried verbatim; reflects to an open schema."""


@runtime_checkable
class CustomSchema(Protocol):
    """A class that describes its own schema node."""

    @classmethod
    def json_schema_type(cls) -> SchemaNode: ...


@runtime_checkable
class FieldDocStrings(Protocol):
    """A class that documents its fields; the text becomes ``description``."""

    @classmethod
    def field_doc_string(cls, name: str) -> str: ...


def has_custom_schema(tp: Any) -> bool:
    return isinstance(tp, type) and isinstance(tp, CustomSchema)


def field_doc_getter(tp: Any) -> Optional[Callable[[str], str]]:
    if isinstance(tp, type) and isinstance(tp, FieldDocStrings):
        return tp.field_doc_string
    return None


def is_protocol_enum(tp: Any) -> bool:
    """Enums travel either by name or by number."""
    return isinstance(tp, type) and issubclass(tp, enum.Enum)


def protocol_enum_node() -> SchemaNode:
    return SchemaNode(one_of=[SchemaNode(type="string"), SchemaNode(type="integer")])


def _string_format(fmt: str) -> Callable[[], SchemaNode]:
    return lambda: SchemaNode(type="string", format=fmt)


# datetime is a date subclass, so identity lookups only.
_FORMATS: dict[type, Callable[[], SchemaNode]] = {
    ipaddress.IPv4Address: _string_format("ipv4"),
    ipaddress.IPv6Address: _string_format("ipv6"),
    datetime.datetime: _string_format("date-time"),
    datetime.date: _string_format("date"),
    ParseResult: _string_format("uri"),
    SplitResult: _string_format("uri"),
}


def well_known_node(tp: Any) -> Optional[SchemaNode]:
    if is_protocol_enum(tp):
        return protocol_enum_node()
    factory = _FORMATS.get(tp) if isinstance(tp, type) else None
    if factory is None:
        return None
    return factory()
