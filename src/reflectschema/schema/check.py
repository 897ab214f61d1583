"""Meta-schema conformance checks for produced documents."""

from __future__ import annotations

from typing import Any

from jsonschema import Draft4Validator, Draft7Validator, Draft201909Validator, Draft202012Validator

from reflectschema.core.errors import SchemaCheckError
from reflectschema.schema.version import Version


_VALIDATORS = {
    Version.UNSET: Draft4Validator,
    Version.DRAFT04: Draft4Validator,
    Version.DRAFT07: Draft7Validator,
    Version.DRAFT201909: Draft201909Validator,
    Version.DRAFT202012: Draft202012Validator,
}


def check_document(document: dict[str, Any], version: Version, max_errors: int = 5) -> None:
    validator_cls = _VALIDATORS[version]
    meta_validator = validator_cls(validator_cls.META_SCHEMA)
    errors: list[dict[str, Any]] = []
    for error in meta_validator.iter_errors(document):
        pointer = "/".join(str(part) for part in error.absolute_path)
        errors.append({"path": f"/{pointer}", "message": error.message})
        if len(errors) >= max_errors:
            break
    if errors:
        lines = [f"{item['path']}: {item['message']}" for item in errors]
        raise SchemaCheckError(
            f"Document does not conform to {validator_cls.__name__} meta-schema:\n" + "\n".join(lines),
            errors,
        )
