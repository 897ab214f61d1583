"""CLI wrapper that reflects one Python type into a JSON Schema document."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from reflectschema.core.config import ReflectorConfig, import_object
from reflectschema.core.errors import ConfigError, ReflectError, SchemaCheckError
from reflectschema.core.logging import configure_logging, get_logger
from reflectschema.reflect.walker import Reflector
from reflectschema.schema.version import Version


logger = get_logger(__name__)


def _build_config(args: argparse.Namespace) -> ReflectorConfig:
    config = ReflectorConfig()
    if args.config is not None:
        config = ReflectorConfig.load(args.config.expanduser().resolve())
    overrides: dict[str, object] = {}
    if args.draft is not None:
        overrides["version"] = Version.parse(args.draft)
    if args.expanded:
        overrides["expanded_struct"] = True
    if args.no_reference:
        overrides["do_not_reference"] = True
    if args.allow_additional:
        overrides["allow_additional_properties"] = True
    if args.fully_qualify:
        overrides["fully_qualify_type_names"] = True
    if overrides:
        config = config.with_overrides(**overrides)
    return config


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="reflectschema",
        description="Reflect a Python dataclass (or other supported type) into a JSON Schema document.",
    )
    parser.add_argument("target", help="Type to reflect, as 'package.module:TypeName'.")
    parser.add_argument("--draft", help="JSON Schema draft: 04, 07, 2019-09 or 2020-12 (default from config, else 04).")
    parser.add_argument("--config", type=Path, help="YAML file with reflector switches.")
    parser.add_argument("--format", choices=("json", "yaml"), default="json", help="Output encoding.")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent; 0 for compact output.")
    parser.add_argument("--output", type=Path, help="Write the document here instead of stdout.")
    parser.add_argument("--expanded", action="store_true", help="Inline the root struct instead of referencing it.")
    parser.add_argument("--no-reference", dest="no_reference", action="store_true", help="Inline nested structs.")
    parser.add_argument("--allow-additional", dest="allow_additional", action="store_true", help="Allow additional properties on every struct.")
    parser.add_argument("--fully-qualify", dest="fully_qualify", action="store_true", help="Name definitions 'module.QualName'.")
    parser.add_argument("--check", action="store_true", help="Validate the document against its draft meta-schema.")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG shows tolerated tag errors).")
    parser.add_argument("--log-file", type=Path, help="Optional file mirroring log output.")

    args = parser.parse_args(argv)
    level = logging.getLevelName(args.log_level.upper())
    if not isinstance(level, int):
        parser.error(f"unknown log level: {args.log_level}")
    configure_logging(level=level, log_file=args.log_file)

    try:
        config = _build_config(args)
        target = import_object(args.target)
    except ConfigError as exc:
        parser.error(str(exc))

    try:
        root = Reflector(config).reflect(target)
        if args.check:
            root.check()
    except SchemaCheckError as exc:
        logger.error("reflectschema: %s", exc)
        return 1
    except ReflectError as exc:
        logger.error("reflectschema: reflection of %s failed: %s", args.target, exc)
        return 1

    logger.info("reflected %s (%d definition(s))", args.target, len(root.definitions))
    if args.format == "yaml":
        text = root.to_yaml()
    else:
        text = root.to_json(indent=args.indent or None) + "\n"

    if args.output is not None:
        output = args.output.expanduser().resolve()
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text, encoding="utf-8")
        logger.info("wrote %s", output)
    else:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())
