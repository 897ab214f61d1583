"""Field tag strings and the small tag language they are written in.

A tag is a comma-separated list of tokens. ``key=value`` tokens carry a
keyword and its raw text value (split at the first ``=``); bare tokens such as
``omitempty`` or ``required`` are flags and carry ``value=None``.

Tags live in ``dataclasses.field(metadata=...)`` under these keys:

``json`` / ``yaml``
    serialization tag: ``name,omitempty`` / ``-`` / ``,inline``
``jsonschema``
    schema keywords: ``minimum=0,maximum=10,required,nullable``
``jsonschema_extras``
    free-form keywords copied into the node's extension bag
``jsonschema_description``
    description text, taken verbatim
``embedded``
    ``True`` for an anonymous (embedded) struct field
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Mapping, Optional


JSON = "json"
YAML = "yaml"
JSONSCHEMA = "jsonschema"
JSONSCHEMA_EXTRAS = "jsonschema_extras"
JSONSCHEMA_DESCRIPTION = "jsonschema_description"
EMBEDDED = "embedded"


@dataclass(frozen=True)
class TagToken:
    keyword: str
    value: Optional[str] = None

    @property
    def is_flag(self) -> bool:
        return self.value is None


def parse_tag(text: str | None) -> tuple[TagToken, ...]:
    if not text:
        return ()
    tokens: list[TagToken] = []
    for raw in text.split(","):
        if not raw:
            continue
        keyword, sep, value = raw.partition("=")
        tokens.append(TagToken(keyword, value if sep else None))
    return tuple(tokens)


def has_flag(tokens: tuple[TagToken, ...], flag: str) -> bool:
    return any(token.is_flag and token.keyword == flag for token in tokens)


@dataclass(frozen=True)
class SerializationTag:
    """``json``/``yaml`` tag split into its name and trailing options."""

    present: bool
    name: str = ""
    options: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str | None) -> "SerializationTag":
        if text is None:
            return cls(present=False)
        name, *options = text.split(",")
        return cls(present=True, name=name, options=tuple(options))

    @property
    def omitted(self) -> bool:
        return self.name == "-"

    @property
    def omitempty(self) -> bool:
        return "omitempty" in self.options

    @property
    def inline(self) -> bool:
        return "inline" in self.options


@dataclass(frozen=True)
class FieldTags:
    json: SerializationTag
    yaml: SerializationTag
    schema: tuple[TagToken, ...]
    extras: tuple[TagToken, ...]
    description: str
    embedded: bool

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, Any]) -> "FieldTags":
        return cls(
            json=SerializationTag.parse(metadata.get(JSON)),
            yaml=SerializationTag.parse(metadata.get(YAML)),
            schema=parse_tag(metadata.get(JSONSCHEMA)),
            extras=parse_tag(metadata.get(JSONSCHEMA_EXTRAS)),
            description=metadata.get(JSONSCHEMA_DESCRIPTION) or "",
            embedded=bool(metadata.get(EMBEDDED, False)),
        )


def tag(
    *,
    json: str | None = None,
    yaml: str | None = None,
    jsonschema: str | None = None,
    extras: str | None = None,
    description: str | None = None,
    embedded: bool = False,
    **field_kwargs: Any,
) -> Any:
    """Build a ``dataclasses.field`` carrying schema tags.

    >>> @dataclass
    ... class User:
    ...     age: int = tag(json=",omitempty", jsonschema="minimum=0", default=0)
    """
    metadata: dict[str, Any] = dict(field_kwargs.pop("metadata", None) or {})
    for key, value in (
        (JSON, json),
        (YAML, yaml),
        (JSONSCHEMA, jsonschema),
        (JSONSCHEMA_EXTRAS, extras),
        (JSONSCHEMA_DESCRIPTION, description),
    ):
        if value is not None:
            metadata[key] = value
    if embedded:
        metadata[EMBEDDED] = True
    return dataclasses.field(metadata=metadata, **field_kwargs)
