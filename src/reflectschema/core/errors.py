"""Reflection error types used across modules."""

from __future__ import annotations

from typing import Any


class ReflectError(RuntimeError):
    """Base error for schema reflection failures."""


class UnsupportedTypeError(ReflectError):
    """Raised when a type has no JSON Schema mapping."""

    def __init__(self, tp: Any, context: str | None = None) -> None:
        message = f"unsupported type {_describe(tp)}"
        if context:
            message = f"{message} ({context})"
        super().__init__(message)
        self.type = tp
        self.context = context


class ConfigError(ReflectError):
    """Raised when reflector configuration cannot be loaded or resolved."""


class SchemaCheckError(ReflectError):
    """Raised when a produced document fails its draft meta-schema."""

    def __init__(self, message: str, errors: list[dict]) -> None:
        super().__init__(message)
        self.errors = errors


def _describe(tp: Any) -> str:
    if isinstance(tp, type):
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)
