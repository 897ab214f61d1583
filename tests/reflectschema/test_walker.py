import uuid
from dataclasses import dataclass
from typing import Any, Optional, Union

import pytest

from reflectschema import (
    Reflector,
    ReflectorConfig,
    SchemaNode,
    StructField,
    UnsupportedTypeError,
    Version,
    reflect,
)
from sample_types import (
    Attachment,
    Base,
    Broken,
    Contact,
    Derived,
    Documented,
    Flagged,
    Grandparent,
    Ignorable,
    InlinedByYaml,
    Invoice,
    Labelled,
    Loop,
    Maps,
    Nickname,
    Owned,
    Person,
    Tagged,
    TreeNode,
    Visibility,
    WellKnown,
    YamlNamed,
)


DRAFT04 = "https://json-schema.org/draft-04/schema#"


def _expanded(tp, **overrides):
    config = ReflectorConfig(expanded_struct=True, **overrides)
    return reflect(tp, config).to_dict()


def test_person_round_trip_matches_expected_document() -> None:
    document = _expanded(Person)
    assert document == {
        "$schema": DRAFT04,
        "type": "object",
        "required": ["Name"],
        "properties": {
            "Name": {"type": "string"},
            "Age": {"type": "integer", "minimum": 0},
        },
        "additionalProperties": False,
    }


def test_root_struct_is_referenced_by_default() -> None:
    document = reflect(Person).to_dict()
    assert document["$ref"] == "#/definitions/Person"
    assert document["$schema"] == DRAFT04
    assert set(document["definitions"]) == {"Person"}
    assert "$schema" not in document["definitions"]["Person"]
    assert document["definitions"]["Person"]["required"] == ["Name"]


def test_fields_without_omitempty_are_required() -> None:
    document = _expanded(Tagged)
    assert document["required"] == ["Title", "Ratio", "Level", "Settings"]
    assert "Tags" not in document["required"]
    assert "Value" not in document["required"]


def test_byte_raw_and_any_fields() -> None:
    properties = _expanded(Attachment)["properties"]
    assert properties["Payload"] == {"type": "string", "media": {"binaryEncoding": "base64"}}
    assert properties["Checksums"] == {
        "type": "array",
        "items": {"type": "integer"},
        "maxItems": 3,
        "minItems": 3,
    }
    assert properties["Raw"] == {"additionalProperties": True}
    assert properties["Anything"] == {"additionalProperties": True}


def test_nullable_field_wraps_node_in_one_of() -> None:
    properties = _expanded(Nickname)["properties"]
    assert properties["Nick"] == {"oneOf": [{"type": "string"}, {"type": "null"}]}


def test_oneof_required_groups_accumulate_on_parent() -> None:
    document = _expanded(Contact)
    assert document["oneOf"] == [
        {"title": "A", "required": ["Email"]},
        {"title": "B", "required": ["Phone", "Fax"]},
    ]
    assert "required" not in document


def test_self_referential_type_terminates_with_refs() -> None:
    document = reflect(TreeNode).to_dict()
    tree = document["definitions"]["TreeNode"]
    assert document["$ref"] == "#/definitions/TreeNode"
    assert tree["properties"]["Children"] == {
        "type": "array",
        "items": {"$ref": "#/definitions/TreeNode"},
    }
    assert tree["properties"]["Parent"] == {"$ref": "#/definitions/TreeNode"}
    assert tree["properties"]["Index"] == {
        "type": "object",
        "patternProperties": {".*": {"$ref": "#/definitions/TreeNode"}},
    }
    assert tree["required"] == ["Value"]


def test_self_referential_type_without_references_still_terminates() -> None:
    document = reflect(TreeNode, ReflectorConfig(do_not_reference=True)).to_dict()
    assert document["type"] == "object"
    assert document["properties"]["Parent"] == {"$ref": "#/definitions/TreeNode"}
    assert "TreeNode" in document["definitions"]


def test_expanded_self_referential_root_keeps_its_definition() -> None:
    document = _expanded(TreeNode)
    assert document["type"] == "object"
    assert document["properties"]["Parent"] == {"$ref": "#/definitions/TreeNode"}
    assert set(document["definitions"]) == {"TreeNode"}


def test_struct_embedding_itself_becomes_a_referenced_property() -> None:
    document = _expanded(Loop)
    assert list(document["properties"]) == ["Name", "loop"]
    assert document["properties"]["loop"] == {"$ref": "#/definitions/Loop"}
    assert document["required"] == ["Name", "loop"]
    assert set(document["definitions"]) == {"Loop"}

    referenced = reflect(Loop).to_dict()
    assert referenced["$ref"] == "#/definitions/Loop"
    assert referenced["definitions"]["Loop"]["properties"]["loop"] == {"$ref": "#/definitions/Loop"}


def test_node_rendered_twice_has_no_yaml_aliases() -> None:
    root = reflect(Labelled, ReflectorConfig(expanded_struct=True))
    text = root.to_yaml()
    assert "&id" not in text
    assert "*id" not in text
    assert root.to_dict()["definitions"]["Labelled"]["properties"]["Name"]["x-a"] == ["1", "2"]


def test_rendered_document_is_detached_from_nodes() -> None:
    root = reflect(Labelled, ReflectorConfig(expanded_struct=True))
    document = root.to_dict()
    document["properties"]["Name"]["x-a"].append("3")
    document["required"].append("Parent")
    again = root.to_dict()
    assert again["properties"]["Name"]["x-a"] == ["1", "2"]
    assert again["required"] == ["Name"]


def test_field_keywords_sit_beside_struct_references() -> None:
    properties = _expanded(Owned)["properties"]
    assert properties["Owner"] == {
        "$ref": "#/definitions/Grandparent",
        "title": "Owner",
        "description": "who owns it",
    }


def test_expanded_root_drops_its_own_definition() -> None:
    assert "definitions" not in _expanded(Person)


def test_embedded_struct_fields_are_spliced_into_parent() -> None:
    document = _expanded(Derived)
    assert list(document["properties"]) == ["ID", "family_name", "Created", "Label"]
    assert document["required"] == ["ID", "family_name", "Label"]
    assert document["properties"]["Created"] == {"type": "string", "format": "date-time"}
    assert "base" not in document["properties"]
    assert "definitions" not in document


def test_yaml_embedded_structs_keep_nested_property() -> None:
    document = reflect(Derived, ReflectorConfig(expanded_struct=True, yaml_embedded_structs=True)).to_dict()
    assert document["properties"]["base"] == {"$ref": "#/definitions/Base"}
    assert document["required"] == ["base", "Label"]
    base = document["definitions"]["Base"]
    assert base["properties"]["grandparent"] == {"$ref": "#/definitions/Grandparent"}
    assert base["required"] == ["ID", "grandparent"]


def test_yaml_inline_tag_always_inlines() -> None:
    config = ReflectorConfig(expanded_struct=True, yaml_embedded_structs=True)
    document = reflect(InlinedByYaml, config).to_dict()
    # base is spliced in; its own embedded struct stays a nested property
    assert list(document["properties"]) == ["ID", "grandparent", "Created", "Label"]
    assert list(_expanded(InlinedByYaml)["properties"]) == ["ID", "family_name", "Created", "Label"]


def test_skipped_and_renamed_fields() -> None:
    document = _expanded(Visibility)
    assert list(document["properties"]) == ["Shown", "renamed"]
    assert document["required"] == ["Shown", "renamed"]


def test_well_known_types() -> None:
    properties = _expanded(WellKnown)["properties"]
    assert properties == {
        "Color": {"oneOf": [{"type": "string"}, {"type": "integer"}]},
        "Address": {"type": "string", "format": "ipv4"},
        "Address6": {"type": "string", "format": "ipv6"},
        "When": {"type": "string", "format": "date-time"},
        "Day": {"type": "string", "format": "date"},
        "Link": {"type": "string", "format": "uri"},
    }


def test_map_key_kinds() -> None:
    properties = _expanded(Maps)["properties"]
    assert properties["ByID"] == {
        "type": "object",
        "patternProperties": {"^[0-9]+$": {"type": "number"}},
        "additionalProperties": False,
    }
    assert properties["ByName"] == {
        "type": "object",
        "patternProperties": {".*": {"type": "string"}},
    }


def test_custom_schema_types_are_registered_and_referenced() -> None:
    document = _expanded(Invoice)
    assert document["properties"]["Price"] == {"$ref": "#/definitions/Money"}
    assert document["properties"]["Tax"] == {"$ref": "#/definitions/Money"}
    assert document["definitions"]["Money"] == {"type": "string", "pattern": r"^\d+\.\d{2}$"}


def test_custom_schema_inline_without_references() -> None:
    document = _expanded(Invoice, do_not_reference=True)
    assert document["properties"]["Price"] == {"type": "string", "pattern": r"^\d+\.\d{2}$"}


def test_tag_keywords_reach_reflected_nodes() -> None:
    document = reflect(Tagged, ReflectorConfig(expanded_struct=True, version=Version.DRAFT07)).to_dict()
    properties = document["properties"]
    assert properties["Title"] == {
        "type": "string",
        "maxLength": 20,
        "minLength": 1,
        "pattern": "^[a-z]+$",
        "title": "the title",
        "default": "alex",
        "examples": ["joe"],
        "format": "hostname",
        "x-order": ["1", "2"],
    }
    assert properties["Ratio"] == {"type": "number", "maximum": 1, "exclusiveMinimum": 0}
    assert properties["Tags"] == {
        "type": "array",
        "items": {"type": "string", "enum": ["a", "b"]},
        "minItems": 1,
        "uniqueItems": True,
    }
    assert properties["Level"] == {"type": "integer", "enum": [1, 2, 3]}
    assert properties["Value"] == {
        "additionalProperties": True,
        "oneOf": [{"type": "string"}, {"type": "integer"}],
    }


def test_draft04_exclusive_bounds_are_boolean() -> None:
    ratio = _expanded(Tagged)["properties"]["Ratio"]
    assert ratio == {"type": "number", "maximum": 1, "minimum": 0, "exclusiveMinimum": True}


def test_field_doc_strings_override_descriptions() -> None:
    properties = _expanded(Documented)["properties"]
    assert properties["Name"]["description"] == "The display name."
    assert "description" not in properties["Plain"]


def test_ignored_types_become_open_objects() -> None:
    document = _expanded(Ignorable, ignored_types=(Grandparent,))
    assert document["properties"]["Blob"] == {"$ref": "#/definitions/Grandparent"}
    assert document["definitions"]["Grandparent"] == {
        "type": "object",
        "properties": {},
        "additionalProperties": True,
    }


def test_allow_additional_properties() -> None:
    document = _expanded(Person, allow_additional_properties=True)
    assert document["additionalProperties"] is True


def test_required_from_jsonschema_tags() -> None:
    document = _expanded(Flagged, required_from_jsonschema_tags=True)
    assert document["required"] == ["Must"]
    assert _expanded(Flagged)["required"] == ["Maybe"]


def test_prefer_yaml_schema_switches_tag_source() -> None:
    assert list(_expanded(YamlNamed)["properties"]) == ["json_name", "only_yaml"]
    preferred = _expanded(YamlNamed, prefer_yaml_schema=True)
    assert list(preferred["properties"]) == ["yaml_name", "only_yaml"]
    assert preferred["required"] == ["yaml_name"]


def test_type_mapper_overrides_dispatch() -> None:
    @dataclass
    class Session:
        ID: uuid.UUID

    def mapper(tp: Any) -> Optional[SchemaNode]:
        if tp is uuid.UUID:
            return SchemaNode(type="string", format="uuid")
        return None

    document = _expanded(Session, type_mapper=mapper)
    assert document["properties"]["ID"] == {"type": "string", "format": "uuid"}


def test_type_namer_and_fully_qualified_names() -> None:
    named = reflect(Person, ReflectorConfig(type_namer=lambda tp: "person.v1" if tp is Person else "")).to_dict()
    assert named["$ref"] == "#/definitions/person.v1"

    qualified = reflect(Person, ReflectorConfig(fully_qualify_type_names=True)).to_dict()
    assert qualified["$ref"] == "#/definitions/sample_types.Person"


def test_additional_fields_are_appended() -> None:
    def extra(cls: type):
        if cls is Person:
            return [StructField("Nickname", str, {"json": "nickname,omitempty"})]
        return None

    document = _expanded(Person, additional_fields=extra)
    assert list(document["properties"]) == ["Name", "Age", "nickname"]
    assert document["required"] == ["Name"]


def test_definitions_key_follows_draft() -> None:
    document = reflect(Base, ReflectorConfig(version=Version.DRAFT202012)).to_dict()
    assert document["$schema"] == "https://json-schema.org/draft/2020-12/schema#"
    assert document["$ref"] == "#/$defs/Base"
    assert "Base" in document["$defs"]
    assert "definitions" not in document

    unset = reflect(Base, ReflectorConfig(version=Version.UNSET)).to_dict()
    assert "$schema" not in unset
    assert unset["$ref"] == "#/definitions/Base"


def test_reflection_is_deterministic() -> None:
    reflector = Reflector(ReflectorConfig(version=Version.DRAFT07))
    first = reflector.reflect(TreeNode).to_json()
    second = reflector.reflect(TreeNode).to_json()
    assert first == second


def test_reflect_value_uses_runtime_type() -> None:
    root = Reflector(ReflectorConfig(expanded_struct=True)).reflect_value(Person(Name="ada"))
    assert root.to_dict() == _expanded(Person)


def test_each_call_owns_its_definitions() -> None:
    reflector = Reflector()
    first = reflector.reflect(Person)
    second = reflector.reflect(Base)
    assert set(first.definitions) == {"Person"}
    assert set(second.definitions) == {"Base"}


def test_unsupported_field_type_fails_whole_call() -> None:
    with pytest.raises(UnsupportedTypeError) as excinfo:
        reflect(Broken)
    assert "Broken.Callback" in str(excinfo.value)
    assert "unsupported type" in str(excinfo.value)


@pytest.mark.parametrize(
    "tp",
    [Union[int, str], tuple[int, str], complex, type("Plain", (), {})],
)
def test_unsupported_types(tp: Any) -> None:
    with pytest.raises(UnsupportedTypeError):
        reflect(tp)


def test_scalar_roots() -> None:
    assert reflect(bool).to_dict() == {"$schema": DRAFT04, "type": "boolean"}
    assert reflect(list[Optional[int]]).to_dict() == {
        "$schema": DRAFT04,
        "type": "array",
        "items": {"type": "integer"},
    }


@pytest.mark.parametrize(
    "version",
    [Version.DRAFT04, Version.DRAFT07, Version.DRAFT201909, Version.DRAFT202012],
)
@pytest.mark.parametrize("tp", [Tagged, TreeNode, Derived, WellKnown, Attachment, Contact, Loop, Labelled, Owned])
def test_documents_conform_to_meta_schema(version: Version, tp: type) -> None:
    reflect(tp, ReflectorConfig(version=version)).check()
