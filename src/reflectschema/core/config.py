"""Reflector configuration and its YAML loader."""

from __future__ import annotations

import dataclasses
import importlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

import yaml

from reflectschema.core.errors import ConfigError
from reflectschema.schema.node import SchemaNode
from reflectschema.schema.version import Version

if TYPE_CHECKING:
    from reflectschema.reflect.fields import StructField


TypeMapper = Callable[[Any], Optional[SchemaNode]]
TypeNamer = Callable[[Any], str]
FieldProvider = Callable[[type], Optional[Iterable["StructField"]]]

_SWITCHES = (
    "allow_additional_properties",
    "required_from_jsonschema_tags",
    "yaml_embedded_structs",
    "prefer_yaml_schema",
    "expanded_struct",
    "do_not_reference",
    "fully_qualify_type_names",
)


@dataclass(frozen=True)
class ReflectorConfig:
    """Switches and hooks for one reflector.

    ``allow_additional_properties`` opens every struct object.
    ``required_from_jsonschema_tags`` derives requiredness from the
    ``required`` flag in the ``jsonschema`` tag instead of ``omitempty``.
    ``yaml_embedded_structs`` keeps embedded structs as nested properties.
    ``prefer_yaml_schema`` reads ``yaml`` tags even when ``json`` ones exist.
    ``expanded_struct`` puts the root struct inline instead of a ``$ref``.
    ``do_not_reference`` inlines nested structs (definitions are still kept).
    ``fully_qualify_type_names`` names definitions ``module.QualName``.
    """

    version: Version = Version.DRAFT04
    allow_additional_properties: bool = False
    required_from_jsonschema_tags: bool = False
    yaml_embedded_structs: bool = False
    prefer_yaml_schema: bool = False
    expanded_struct: bool = False
    do_not_reference: bool = False
    fully_qualify_type_names: bool = False
    ignored_types: tuple[Any, ...] = field(default_factory=tuple)
    type_mapper: Optional[TypeMapper] = None
    type_namer: Optional[TypeNamer] = None
    additional_fields: Optional[FieldProvider] = None

    @classmethod
    def load(cls, path: Path) -> "ReflectorConfig":
        if not path.exists():
            raise ConfigError(f"Missing reflector config file: {path}")
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in reflector config {path}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Reflector config {path} must decode to a mapping")
        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "ReflectorConfig":
        unknown = sorted(set(data) - set(_SWITCHES) - {"version", "ignored_types"})
        if unknown:
            raise ConfigError(f"Unknown reflector config keys: {', '.join(unknown)}")
        changes: dict[str, Any] = {}
        if "version" in data:
            changes["version"] = Version.parse(str(data["version"] or ""))
        for key in _SWITCHES:
            if key in data:
                changes[key] = _as_bool(key, data[key])
        ignored = data.get("ignored_types") or []
        if not isinstance(ignored, list):
            raise ConfigError("ignored_types must be a list of 'module:Name' strings")
        if ignored:
            changes["ignored_types"] = tuple(import_object(spec) for spec in ignored)
        return cls(**changes)

    def with_overrides(self, **changes: Any) -> "ReflectorConfig":
        if "ignored_types" in changes:
            changes["ignored_types"] = tuple(changes["ignored_types"])
        return dataclasses.replace(self, **changes)


def import_object(spec: str) -> Any:
    """Resolve ``package.module:Name`` (or ``package.module.Name``)."""
    raw = str(spec).strip()
    if ":" in raw:
        module_name, _, attr_path = raw.partition(":")
    else:
        module_name, _, attr_path = raw.rpartition(".")
    if not module_name or not attr_path:
        raise ConfigError(f"Expected 'module:Name', got: {spec}")
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigError(f"Cannot import module '{module_name}': {exc}") from exc
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ConfigError(f"'{module_name}' has no attribute '{attr_path}'") from exc
    return target


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"1", "true", "yes", "on"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"0", "false", "no", "off", ""}:
        return False
    raise ConfigError(f"Config switch '{key}' must be a boolean, got {value!r}")
