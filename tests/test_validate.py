import json

import pytest

from scriptmimic.errors import SchemaViolation
from scriptmimic.utils.validate import load_schema, parse_structured, wire_schema


def test_valid_payload_passes(dna_payload):
    data = parse_structured(json.dumps(dna_payload), load_schema("style_dna"))
    assert data == dna_payload


def test_missing_nested_field_is_rejected(dna_payload):
    del dna_payload["linguistic"]["formality"]
    raw = json.dumps(dna_payload)
    with pytest.raises(SchemaViolation) as exc:
        parse_structured(raw, load_schema("style_dna"))
    assert exc.value.raw == raw
    assert exc.value.path == ["linguistic"]
    assert "formality" in str(exc.value)


def test_missing_section_is_rejected(dna_payload):
    del dna_payload["safetyRules"]
    with pytest.raises(SchemaViolation):
        parse_structured(json.dumps(dna_payload), load_schema("style_dna"))


@pytest.mark.parametrize("scale", [-0.1, 1.5, "0.3"])
def test_similarity_scale_bounds(dna_payload, scale):
    dna_payload["safetyRules"]["maxSimilarityScale"] = scale
    with pytest.raises(SchemaViolation) as exc:
        parse_structured(json.dumps(dna_payload), load_schema("style_dna"))
    assert exc.value.path == ["safetyRules", "maxSimilarityScale"]


@pytest.mark.parametrize("value", ["", "   ", "\n\t"])
def test_empty_descriptor_is_rejected(dna_payload, value):
    dna_payload["narrative"]["hookType"] = value
    with pytest.raises(SchemaViolation):
        parse_structured(json.dumps(dna_payload), load_schema("style_dna"))


def test_fenced_and_chatty_output_is_cleaned():
    raw = 'Sure! Here it is:\n{"topic": "t", "angle": "a", "key_points": ["k"]}'
    assert parse_structured(raw, load_schema("normalized_topic"))["topic"] == "t"
    fenced = '```json\n{"topic": "t", "angle": "a", "key_points": []}\n```'
    assert parse_structured(fenced, load_schema("normalized_topic"))["angle"] == "a"
    prose_then_fence = (
        "Here is the JSON:\n```json\n"
        '{"topic": "t", "angle": "a", "key_points": ["k"]}\n```\nLet me know if you need more.'
    )
    assert parse_structured(prose_then_fence, load_schema("normalized_topic"))["key_points"] == ["k"]
    trailing = '{"topic": "t", "angle": "a", "key_points": []} Hope this helps!'
    assert parse_structured(trailing, load_schema("normalized_topic"))["topic"] == "t"


def test_wrapped_payload_is_unwrapped():
    raw = json.dumps({"normalized_topic": {"topic": "t", "angle": "a", "key_points": []}})
    assert parse_structured(raw, load_schema("normalized_topic"))["topic"] == "t"


@pytest.mark.parametrize("raw", ["", None, "   ", "no json here", "{not json}"])
def test_unparseable_output(raw):
    with pytest.raises(SchemaViolation) as exc:
        parse_structured(raw, load_schema("editorial_plan"))
    assert exc.value.raw == (raw or "")


def test_plan_requires_numeric_length():
    raw = json.dumps({"opening": "o", "structure": ["a"], "tone": "t", "target_length": "long"})
    with pytest.raises(SchemaViolation):
        parse_structured(raw, load_schema("editorial_plan"))


def test_wire_schema_drops_annotations():
    schema = load_schema("editorial_plan")
    wired = wire_schema(schema)
    assert "title" not in wired and "$schema" not in wired
    assert wired["required"] == schema["required"]
