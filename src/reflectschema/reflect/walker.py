"""Reflect Python types into JSON Schema documents.

A reflection pass walks the type graph depth first. Every dataclass met along
the way is registered in the pass' definitions table before its fields are
visited, so a type that refers back to itself resolves to a ``$ref`` instead
of expanding forever.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import decimal
import types
import typing
from typing import Any, Callable, Optional

from reflectschema.core.config import ReflectorConfig
from reflectschema.core.errors import UnsupportedTypeError
from reflectschema.core.logging import get_logger
from reflectschema.reflect.fields import StructField, reflect_field_name, struct_fields
from reflectschema.reflect.keywords import apply_field_keywords
from reflectschema.reflect.types import (
    RawMessage,
    field_doc_getter,
    has_custom_schema,
    well_known_node,
)
from reflectschema.schema.node import SchemaNode
from reflectschema.schema.root import Definitions, SchemaRoot


logger = get_logger(__name__)

_MAPPING_ORIGINS = (
    dict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
    collections.OrderedDict,
    collections.defaultdict,
)
_SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)


class Reflector:
    """Stateless front end; every :meth:`reflect` call runs a fresh pass."""

    def __init__(self, config: ReflectorConfig | None = None) -> None:
        self.config = config or ReflectorConfig()

    def reflect(self, tp: Any) -> SchemaRoot:
        return _Pass(self.config).run(tp)

    def reflect_value(self, value: Any) -> SchemaRoot:
        return self.reflect(type(value))


def reflect(tp: Any, config: ReflectorConfig | None = None) -> SchemaRoot:
    return Reflector(config).reflect(tp)


class _Pass:
    def __init__(self, config: ReflectorConfig) -> None:
        self.config = config
        self.definitions = Definitions()
        self._in_progress: set[str] = set()
        self._referenced: set[str] = set()
        self._splicing: list[type] = []

    def run(self, tp: Any) -> SchemaRoot:
        root_cls = _unwrap_optional(_strip_annotated(tp))
        if self.config.expanded_struct and _is_struct(root_cls):
            node = self._expanded_root(root_cls)
        else:
            node = self.reflect_type(tp)
        # the root may be the object held by the definitions table
        node = dataclasses.replace(node, schema=self.config.version)
        logger.debug(
            "reflected %s with %d definition(s)",
            _type_label(tp),
            len(self.definitions),
        )
        return SchemaRoot(node=node, definitions=self.definitions, version=self.config.version)

    def _expanded_root(self, cls: type) -> SchemaNode:
        name = self.type_name(cls)
        node = self._new_object()
        self._register(name, node)
        self._in_progress.add(name)
        try:
            self.reflect_struct_fields(node, cls)
        finally:
            self._in_progress.discard(name)
        if name not in self._referenced:
            del self.definitions[name]
        return node

    def type_name(self, tp: Any) -> str:
        if self.config.type_namer is not None:
            name = self.config.type_namer(tp)
            if name:
                return name
        if not isinstance(tp, type):
            return ""
        if self.config.fully_qualify_type_names:
            return f"{tp.__module__}.{tp.__qualname__}"
        return tp.__name__

    def reflect_type(self, tp: Any) -> SchemaNode:
        tp = _strip_annotated(tp)
        name = self.type_name(tp)
        if name and name in self.definitions:
            if not self.config.do_not_reference or name in self._in_progress:
                return self._reference(name)

        if self.config.type_mapper is not None:
            mapped = self.config.type_mapper(tp)
            if mapped is not None and not mapped.is_empty():
                return mapped

        custom = self._reflect_custom_type(tp)
        if custom is not None:
            return custom

        known = well_known_node(tp)
        if known is not None:
            return known

        origin = typing.get_origin(tp)
        args = typing.get_args(tp)

        if origin is typing.Union or origin is types.UnionType:
            members = [arg for arg in args if arg is not type(None)]
            if len(members) != 1:
                raise UnsupportedTypeError(tp, "unions other than Optional[T] have no mapping")
            return self.reflect_type(members[0])

        if _is_struct(tp):
            return self.reflect_struct(tp)

        if tp is RawMessage or (isinstance(tp, type) and issubclass(tp, RawMessage)):
            return SchemaNode(additional_properties=True)

        if tp in (bytes, bytearray):
            return SchemaNode(type="string", media=SchemaNode(binary_encoding="base64"))

        if tp in (dict, collections.abc.Mapping) or origin in _MAPPING_ORIGINS:
            key_type, value_type = args if len(args) == 2 else (Any, Any)
            return self._reflect_map(key_type, value_type)

        if tp in (list, set, frozenset) or origin in _SEQUENCE_ORIGINS:
            item_type = args[0] if args else Any
            return SchemaNode(type="array", items=self.reflect_type(item_type))

        if tp is tuple or origin is tuple:
            return self._reflect_tuple(tp, args)

        if tp is Any or tp is object:
            return SchemaNode(additional_properties=True)

        supertype = getattr(tp, "__supertype__", None)
        if supertype is not None:
            return self.reflect_type(supertype)

        scalar = _scalar_node(tp)
        if scalar is not None:
            return scalar

        raise UnsupportedTypeError(tp)

    def reflect_struct(self, cls: type) -> SchemaNode:
        name = self.type_name(cls)
        if cls in self.config.ignored_types:
            node = SchemaNode(type="object", properties={}, additional_properties=True)
            self._register(name, node)
            return self._reference_or_inline(name, node)

        node = self._new_object()
        self._register(name, node)
        self._in_progress.add(name)
        try:
            self.reflect_struct_fields(node, cls)
        finally:
            self._in_progress.discard(name)
        return self._reference_or_inline(name, node)

    def reflect_struct_fields(self, parent: SchemaNode, tp: Any) -> None:
        """Add the fields of ``tp`` to ``parent``; embedded structs merge in place."""
        cls = _unwrap_optional(_strip_annotated(tp))
        if not _is_struct(cls):
            return
        doc_string = field_doc_getter(cls)
        fields = struct_fields(cls)
        if self.config.additional_fields is not None:
            fields.extend(self.config.additional_fields(cls) or ())
        self._splicing.append(cls)
        try:
            for sf in fields:
                self._reflect_field(parent, cls, sf, doc_string)
        finally:
            self._splicing.pop()

    def _reflect_field(
        self,
        parent: SchemaNode,
        owner: type,
        sf: StructField,
        doc_string: Optional[Callable[[str], str]],
    ) -> None:
        field_name = reflect_field_name(sf, self.config)
        if not field_name.name:
            if not field_name.embed:
                return
            embedded = _unwrap_optional(_strip_annotated(sf.type))
            if embedded not in self._splicing:
                self.reflect_struct_fields(parent, sf.type)
                return
            # a struct embedding itself stays a nested (referenced) property
            logger.debug(
                "%s.%s re-embeds %s; kept as a property",
                owner.__qualname__,
                sf.name,
                _type_label(embedded),
            )
            field_name = dataclasses.replace(
                field_name,
                name=getattr(embedded, "__name__", sf.name).lower(),
                embed=False,
            )

        try:
            prop = self.reflect_type(sf.type)
        except UnsupportedTypeError as exc:
            if exc.context is not None:
                raise
            raise UnsupportedTypeError(exc.type, f"field {owner.__qualname__}.{sf.name}") from exc

        apply_field_keywords(prop, sf.tags, parent, field_name.name)
        if doc_string is not None:
            text = doc_string(sf.name)
            if text:
                prop.description = text

        if field_name.nullable:
            prop = SchemaNode(one_of=[prop, SchemaNode(type="null")])

        if parent.properties is None:
            parent.properties = {}
        parent.properties[field_name.name] = prop
        if field_name.required and field_name.name not in parent.required:
            parent.required.append(field_name.name)

    def _reflect_custom_type(self, tp: Any) -> Optional[SchemaNode]:
        cls = _unwrap_optional(tp)
        if not has_custom_schema(cls):
            return None
        name = self.type_name(cls)
        node = cls.json_schema_type()
        self._register(name, node)
        return self._reference_or_inline(name, node)

    def _reflect_map(self, key_type: Any, value_type: Any) -> SchemaNode:
        value_node = self.reflect_type(value_type)
        if isinstance(key_type, type) and issubclass(key_type, int) and key_type is not bool:
            return SchemaNode(
                type="object",
                pattern_properties={"^[0-9]+$": value_node},
                additional_properties=False,
            )
        return SchemaNode(type="object", pattern_properties={".*": value_node})

    def _reflect_tuple(self, tp: Any, args: tuple[Any, ...]) -> SchemaNode:
        if not args:
            return SchemaNode(type="array", items=self.reflect_type(Any))
        if len(args) == 2 and args[1] is Ellipsis:
            return SchemaNode(type="array", items=self.reflect_type(args[0]))
        if any(arg != args[0] for arg in args[1:]):
            raise UnsupportedTypeError(tp, "fixed tuples must have a single element type")
        return SchemaNode(
            type="array",
            items=self.reflect_type(args[0]),
            min_items=len(args),
            max_items=len(args),
        )

    def _new_object(self) -> SchemaNode:
        return SchemaNode(
            type="object",
            properties={},
            additional_properties=self.config.allow_additional_properties,
        )

    def _register(self, name: str, node: SchemaNode) -> None:
        if name in self.definitions and name not in self._in_progress:
            logger.debug("definition %s replaced", name)
        else:
            logger.debug("definition %s registered", name)
        self.definitions[name] = node

    def _reference(self, name: str) -> SchemaNode:
        self._referenced.add(name)
        return SchemaNode.reference(self.config.version.ref_prefix + name)

    def _reference_or_inline(self, name: str, node: SchemaNode) -> SchemaNode:
        if self.config.do_not_reference:
            return node
        return self._reference(name)


def _is_struct(tp: Any) -> bool:
    return isinstance(tp, type) and dataclasses.is_dataclass(tp)


def _strip_annotated(tp: Any) -> Any:
    if typing.get_origin(tp) is typing.Annotated:
        return typing.get_args(tp)[0]
    return tp


def _unwrap_optional(tp: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        members = [arg for arg in typing.get_args(tp) if arg is not type(None)]
        if len(members) == 1:
            return _unwrap_optional(members[0])
    return tp


def _scalar_node(tp: Any) -> Optional[SchemaNode]:
    if not isinstance(tp, type):
        return None
    # bool subclasses int
    if issubclass(tp, bool):
        return SchemaNode(type="boolean")
    if issubclass(tp, int):
        return SchemaNode(type="integer")
    if issubclass(tp, (float, decimal.Decimal)):
        return SchemaNode(type="number")
    if issubclass(tp, str):
        return SchemaNode(type="string")
    return None


def _type_label(tp: Any) -> str:
    if isinstance(tp, type):
        return tp.__qualname__
    return repr(tp)
