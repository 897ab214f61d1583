import pytest

from reflectschema import ConfigError, Version


@pytest.mark.parametrize(
    "text, expected",
    [
        ("04", Version.DRAFT04),
        ("draft-04", Version.DRAFT04),
        ("7", Version.DRAFT07),
        ("draft-07", Version.DRAFT07),
        ("2019-09", Version.DRAFT201909),
        ("draft/2019-09", None),
        ("202012", Version.DRAFT202012),
        ("https://json-schema.org/draft/2020-12/schema#", Version.DRAFT202012),
        ("", Version.UNSET),
        ("none", Version.UNSET),
    ],
)
def test_parse_draft_names(text: str, expected: Version | None) -> None:
    if expected is None:
        with pytest.raises(ConfigError):
            Version.parse(text)
    else:
        assert Version.parse(text) is expected


def test_parse_rejects_unknown_draft() -> None:
    with pytest.raises(ConfigError, match="Unknown JSON Schema draft"):
        Version.parse("draft-06")


def test_from_uri_falls_back_to_draft04() -> None:
    assert Version.from_uri(Version.DRAFT07.uri) is Version.DRAFT07
    assert Version.from_uri("https://example.com/other") is Version.DRAFT04
    assert Version.from_uri("") is Version.DRAFT04


def test_definitions_location_per_draft() -> None:
    assert Version.DRAFT04.ref_prefix == "#/definitions/"
    assert Version.DRAFT07.ref_prefix == "#/definitions/"
    assert Version.DRAFT201909.ref_prefix == "#/$defs/"
    assert Version.DRAFT202012.definitions_key == "$defs"
    assert Version.UNSET.definitions_key == "definitions"


def test_draft04_dialect_flags() -> None:
    assert Version.DRAFT04.boolean_exclusive_bounds
    assert Version.DRAFT04.id_keyword == "id"
    assert not Version.DRAFT07.boolean_exclusive_bounds
    assert Version.DRAFT202012.id_keyword == "$id"
