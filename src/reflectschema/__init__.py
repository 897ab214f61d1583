"""Generate JSON Schema documents from Python type declarations.

Dataclass fields are mapped to object properties; per-field tags stored in
``dataclasses.field(metadata=...)`` (see :func:`reflectschema.tag`) rename
properties, control requiredness and nullability, and add validation keywords.
"""

from reflectschema.core.config import ReflectorConfig
from reflectschema.core.errors import ConfigError, ReflectError, SchemaCheckError, UnsupportedTypeError
from reflectschema.reflect.fields import StructField
from reflectschema.reflect.tags import tag
from reflectschema.reflect.types import RawMessage
from reflectschema.reflect.walker import Reflector, reflect
from reflectschema.schema.node import SchemaNode
from reflectschema.schema.root import Definitions, SchemaRoot
from reflectschema.schema.version import Version

__all__ = [
    "ConfigError",
    "Definitions",
    "RawMessage",
    "ReflectError",
    "Reflector",
    "ReflectorConfig",
    "SchemaCheckError",
    "SchemaNode",
    "SchemaRoot",
    "StructField",
    "UnsupportedTypeError",
    "Version",
    "reflect",
    "tag",
]
