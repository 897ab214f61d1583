"""JSON Schema draft registry."""

from __future__ import annotations

from enum import Enum

from reflectschema.core.errors import ConfigError


DRAFT04_URI = "https://json-schema.org/draft-04/schema#"
DRAFT07_URI = "https://json-schema.org/draft-07/schema#"
DRAFT201909_URI = "https://json-schema.org/draft/2019-09/schema#"
DRAFT202012_URI = "https://json-schema.org/draft/2020-12/schema#"


class Version(Enum):
    UNSET = ""
    DRAFT04 = DRAFT04_URI
    DRAFT07 = DRAFT07_URI
    DRAFT201909 = DRAFT201909_URI
    DRAFT202012 = DRAFT202012_URI

    def __str__(self) -> str:
        return self.value

    @property
    def uri(self) -> str:
        return self.value

    @property
    def definitions_key(self) -> str:
        if self in (Version.DRAFT201909, Version.DRAFT202012):
            return "$defs"
        return "definitions"

    @property
    def ref_prefix(self) -> str:
        return f"#/{self.definitions_key}/"

    @property
    def boolean_exclusive_bounds(self) -> bool:
        return self is Version.DRAFT04

    @property
    def id_keyword(self) -> str:
        return "id" if self is Version.DRAFT04 else "$id"

    @classmethod
    def from_uri(cls, uri: str) -> "Version":
        """Decode a ``$schema`` URI, falling back to draft 04 when unknown."""
        for version in cls:
            if version is not cls.UNSET and version.value == uri:
                return version
        return cls.DRAFT04

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Resolve a short draft name (``07``, ``draft-07``, ``2020-12``) or URI."""
        raw = str(text).strip()
        if not raw:
            return cls.UNSET
        for version in cls:
            if version.value and version.value == raw:
                return version
        key = raw.lower().removeprefix("draft").lstrip("-_ ")
        resolved = _SHORT_NAMES.get(key)
        if resolved is None:
            raise ConfigError(f"Unknown JSON Schema draft: {text}")
        return resolved


_SHORT_NAMES = {
    "4": Version.DRAFT04,
    "04": Version.DRAFT04,
    "7": Version.DRAFT07,
    "07": Version.DRAFT07,
    "2019-09": Version.DRAFT201909,
    "201909": Version.DRAFT201909,
    "2020-12": Version.DRAFT202012,
    "202012": Version.DRAFT202012,
    "unset": Version.UNSET,
    "none": Version.UNSET,
}
