"""Top-level schema document: one node plus its definitions table."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import yaml

from reflectschema.schema.check import check_document
from reflectschema.schema.node import SchemaNode
from reflectschema.schema.version import Version


class Definitions(dict[str, SchemaNode]):
    """Type name -> schema node, in first-registration order."""

    def to_dict(self, version: Version = Version.UNSET) -> dict[str, Any]:
        return {name: node.to_dict(version) for name, node in self.items()}


@dataclass(frozen=True)
class SchemaRoot:
    node: SchemaNode
    definitions: Definitions = field(default_factory=Definitions)
    version: Version = Version.UNSET

    @property
    def definitions_key(self) -> str:
        return self.version.definitions_key

    def to_dict(self) -> dict[str, Any]:
        document = self.node.to_dict(self.version)
        if self.definitions:
            document[self.definitions_key] = self.definitions.to_dict(self.version)
        return document

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, allow_unicode=True)

    def check(self) -> None:
        """Validate the document against its draft meta-schema."""
        check_document(self.to_dict(), self.version)
