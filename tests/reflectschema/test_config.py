from pathlib import Path

import pytest

from reflectschema import ConfigError, ReflectorConfig, Version
from reflectschema.core.config import import_object
from sample_types import Grandparent, Person


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "reflector.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults() -> None:
    config = ReflectorConfig()
    assert config.version is Version.DRAFT04
    assert not config.expanded_struct
    assert config.ignored_types == ()
    assert config.type_mapper is None


def test_load_yaml(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "\n".join(
            [
                "version: '2020-12'",
                "expanded_struct: true",
                "do_not_reference: 'yes'",
                "allow_additional_properties: false",
                "ignored_types:",
                "  - sample_types:Grandparent",
            ]
        ),
    )
    config = ReflectorConfig.load(path)
    assert config.version is Version.DRAFT202012
    assert config.expanded_struct
    assert config.do_not_reference
    assert not config.allow_additional_properties
    assert config.ignored_types == (Grandparent,)


def test_load_empty_file(tmp_path: Path) -> None:
    assert ReflectorConfig.load(_write(tmp_path, "")) == ReflectorConfig()


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Missing reflector config"):
        ReflectorConfig.load(tmp_path / "absent.yaml")


def test_load_invalid_yaml(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Invalid YAML"):
        ReflectorConfig.load(_write(tmp_path, "[unclosed"))


def test_load_rejects_non_mapping(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="must decode to a mapping"):
        ReflectorConfig.load(_write(tmp_path, "- a\n- b\n"))


def test_unknown_key_rejected() -> None:
    with pytest.raises(ConfigError, match="expand_struct"):
        ReflectorConfig.from_mapping({"expand_struct": True})


def test_non_boolean_switch_rejected() -> None:
    with pytest.raises(ConfigError, match="must be a boolean"):
        ReflectorConfig.from_mapping({"expanded_struct": 3})


def test_bad_version_rejected() -> None:
    with pytest.raises(ConfigError):
        ReflectorConfig.from_mapping({"version": "draft-03"})


def test_ignored_types_must_be_list() -> None:
    with pytest.raises(ConfigError, match="ignored_types"):
        ReflectorConfig.from_mapping({"ignored_types": "sample_types:Grandparent"})


def test_with_overrides_returns_copy() -> None:
    base = ReflectorConfig()
    changed = base.with_overrides(version=Version.DRAFT07, ignored_types=[Person])
    assert changed.version is Version.DRAFT07
    assert changed.ignored_types == (Person,)
    assert base.version is Version.DRAFT04


def test_import_object_forms() -> None:
    assert import_object("sample_types:Person") is Person
    assert import_object("sample_types.Person") is Person


@pytest.mark.parametrize("spec", ["Person", "sample_types:Nope", "no_such_module_xyz:Thing"])
def test_import_object_errors(spec: str) -> None:
    with pytest.raises(ConfigError):
        import_object(spec)
