"""Tests for the Reader layer: property values, resource blocks, collection."""

import time

import pytest

from tfres_core import (
    ParseError,
    ParseResult,
    Resource,
    ResourceProperty,
    VBoolean,
    VEach,
    VJson,
    VNull,
    VReference,
    VSet,
    VString,
    parse_property_value,
    parse_resource,
    parse_resources,
)
from tfres_core.values import JArray, JBool, JNull, JNum, JObject, JStr


def single(text):
    """Parse *text* and return its only resource, asserting nothing is left."""
    rest, resources = parse_resources(text)
    assert rest == ""
    assert len(resources) == 1
    return resources[0]


def block(*lines):
    return 'resource "res_type" "res_name" {\n' + "\n".join(lines) + "\n}"


# ---------------------------------------------------------------------------
# Property values
# ---------------------------------------------------------------------------

def test_value_string_is_verbatim():
    assert parse_property_value('"some value"') == ("", VString("some value"))

def test_value_string_keeps_escapes_undecoded():
    _, value = parse_property_value(r'"a\nb"')
    assert value == VString("a\\nb")

def test_value_empty_string():
    assert parse_property_value('""') == ("", VString(""))

def test_value_json():
    _, value = parse_property_value('jsonencode({"a": [1,2,3]})')
    assert value == VJson(JObject({
        "a": JArray((JNum(1.0), JNum(2.0), JNum(3.0))),
    }))

def test_value_json_allows_inner_whitespace():
    assert parse_property_value("jsonencode( null )") == ("", VJson(JNull))

def test_value_set():
    assert parse_property_value('toset(["a","b"])') == ("", VSet(("a", "b")))

def test_value_empty_set():
    assert parse_property_value("toset([ ])") == ("", VSet(()))

def test_value_reference_discards_trailing_segments():
    _, value = parse_property_value("foo.bar.baz")
    assert value == VReference(res_type="foo", res_name="bar")

def test_value_reference_stops_at_whitespace():
    assert parse_property_value("a.b.id  next") == ("next", VReference("a", "b"))

def test_value_each_key():
    _, value = parse_property_value("each.key")
    assert value is VEach

def test_value_each_key_with_suffix_is_reference():
    _, value = parse_property_value("each.key.upper")
    assert value == VReference("each", "key")

@pytest.mark.parametrize("text,expected", [("true", True), ("  false  ", False)])
def test_value_boolean(text, expected):
    assert parse_property_value(text) == ("", VBoolean(expected))

def test_value_null():
    _, value = parse_property_value("null")
    assert value is VNull

@pytest.mark.parametrize("text", ["42", "foo", "[1]", ""])
def test_value_unrecognized_is_mismatch(text):
    with pytest.raises(ParseError) as info:
        parse_property_value(text)
    assert info.value.fatal is False

def test_value_unterminated_string_is_fatal():
    with pytest.raises(ParseError) as info:
        parse_property_value('"abc.def')
    assert info.value.fatal is True
    assert info.value.contexts == ("string",)

def test_value_json_scalar_root_is_fatal():
    with pytest.raises(ParseError) as info:
        parse_property_value('jsonencode("x")')
    assert info.value.fatal is True
    assert info.value.contexts == ("jsonencode",)

def test_value_set_rejects_non_strings():
    with pytest.raises(ParseError) as info:
        parse_property_value("toset([1])")
    assert info.value.contexts == ("toset",)


# ---------------------------------------------------------------------------
# Resource blocks
# ---------------------------------------------------------------------------

def test_empty_resource():
    assert parse_resources('resource "T" "N" { }') == ParseResult(
        "", (Resource("T", "N", ()),)
    )

def test_resource_without_spaces():
    assert single('resource"T""N"{}') == Resource("T", "N")

def test_resource_simple():
    resource = single(block(
        '  unique_name       = "some_unique_name"',
        '  another_property     = "Another property that contains spaces and ="',
    ))
    assert resource == Resource(
        res_type="res_type",
        res_name="res_name",
        res_def=(
            ResourceProperty("unique_name", VString("some_unique_name")),
            ResourceProperty(
                "another_property",
                VString("Another property that contains spaces and ="),
            ),
        ),
    )

def test_resource_json():
    resource = single(block(
        '  unique_name       = "some_unique_name"',
        "  json_property     = jsonencode({",
        '      "array": [1,2,3],',
        '      "object": {"a": "a"},',
        '      "string": "Just a string with spaces",',
        '      "boolean": true',
        "  })",
    ))
    assert resource.res_def[1] == ResourceProperty(
        "json_property",
        VJson(JObject({
            "string": JStr("Just a string with spaces"),
            "boolean": JBool(True),
            "array": JArray((JNum(1.0), JNum(2.0), JNum(3.0))),
            "object": JObject({"a": JStr("a")}),
        })),
    )

def test_resource_set():
    resource = single(block('  set_property     = toset(["a", "b"])'))
    assert resource.res_def == (ResourceProperty("set_property", VSet(("a", "b"))),)

def test_resource_reference():
    resource = single(block(
        "  reference_property     = parent_ref_type.parent_ref_name.other",
    ))
    assert resource.res_def[0].value == VReference(
        "parent_ref_type", "parent_ref_name"
    )

def test_resource_null_and_bools():
    resource = single(block(
        "  null_property = null",
        "  true_property = true",
        "  false_property = false",
    ))
    assert [p.value for p in resource.res_def] == [
        VNull, VBoolean(True), VBoolean(False),
    ]

def test_resource_each_key():
    resource = single(block("  name = each.key"))
    assert resource.res_def[0].value is VEach

def test_duplicate_keys_are_kept_in_order():
    resource = single(block('  name = "a"', '  name = "b"'))
    assert resource.res_def == (
        ResourceProperty("name", VString("a")),
        ResourceProperty("name", VString("b")),
    )

def test_key_allows_punctuation():
    resource = single(block("  tags.Name\t= true"))
    assert resource.res_def[0].key == "tags.Name"

def test_empty_identifiers():
    assert single('resource "" "" {}') == Resource("", "")

def test_identifier_whitespace_is_kept():
    assert single('resource " a b " "n" {}').res_type == " a b "

def test_parse_resource_returns_rest():
    rest, resource = parse_resource('  resource "a" "b" {}  output "x" {}')
    assert resource == Resource("a", "b")
    assert rest == 'output "x" {}'

def test_parse_resource_mismatch_is_not_fatal():
    with pytest.raises(ParseError) as info:
        parse_resource('module "x" {}')
    assert info.value.fatal is False


# ---------------------------------------------------------------------------
# Fatal errors inside a block
# ---------------------------------------------------------------------------

def test_unterminated_json_is_fatal():
    text = block('  p = jsonencode({"a": 1)')
    with pytest.raises(ParseError) as info:
        parse_resources(text)
    assert info.value.fatal is True
    assert info.value.contexts == (
        'resource "res_type"', "property p", "jsonencode", "map",
    )

def test_missing_closing_brace_is_fatal():
    with pytest.raises(ParseError) as info:
        parse_resources('resource "a" "b" {\n  x = true\n')
    assert info.value.contexts == ('resource "a"',)
    assert "'}'" in info.value.message

def test_missing_name_is_fatal():
    with pytest.raises(ParseError) as info:
        parse_resources('resource "a" {}')
    assert info.value.message == "expected resource name"

def test_unterminated_type_is_fatal():
    with pytest.raises(ParseError) as info:
        parse_resources('resource "abc {}')
    assert info.value.contexts == ("resource type",)

def test_unknown_value_is_fatal_with_position():
    with pytest.raises(ParseError) as info:
        parse_resources('resource "a" "b" {\n  x = foo\n}')
    err = info.value
    assert err.contexts == ('resource "a"', "property x")
    assert (err.line, err.column) == (2, 7)
    assert "line 2, column 7" in str(err)

def test_fatal_error_in_second_block_discards_first():
    text = 'resource "a" "b" {}\nresource "c" "d" {\n  x = toset([1])\n}'
    with pytest.raises(ParseError):
        parse_resources(text)


# ---------------------------------------------------------------------------
# Collection
# ---------------------------------------------------------------------------

def test_two_blocks_separated_by_whitespace():
    rest, resources = parse_resources(
        'resource "a" "one" {}\n\n  resource "b" "two" { x = true }\n'
    )
    assert rest == ""
    assert [r.res_name for r in resources] == ["one", "two"]

def test_trailing_text_stays_in_remainder():
    rest, resources = parse_resources(
        'resource "a" "one" {}\nsome trailing text\nresource "b" "two" {}'
    )
    assert [r.res_name for r in resources] == ["one"]
    assert rest == 'some trailing text\nresource "b" "two" {}'

def test_assignment_after_block_is_not_a_property():
    rest, resources = parse_resources('resource "a" "b" {}\nlocals = true')
    assert resources == (Resource("a", "b"),)
    assert rest == "locals = true"

def test_text_before_first_keyword_is_discarded():
    rest, resources = parse_resources('provider "aws" {}\nresource "a" "b" {}')
    assert rest == ""
    assert resources == (Resource("a", "b"),)

def test_keyword_inside_earlier_string_anchors_there():
    rest, resources = parse_resources('x = "resources"\nresource "a" "b" {}')
    assert resources == ()
    assert rest == 'resources"\nresource "a" "b" {}'

def test_document_without_keyword():
    assert parse_resources("nothing here") == ParseResult("nothing here", ())

def test_reinvoking_on_remainder():
    text = 'resource "a" "b" {}\nvariable "x" {}\nresource "c" "d" {}'
    first = parse_resources(text)
    assert first.resources == (Resource("a", "b"),)
    second = parse_resources(first.remainder)
    assert second.resources == (Resource("c", "d"),)
    assert second.remainder == ""
    assert parse_resources(first.remainder) == second

def test_reinvoking_on_unparseable_remainder_is_stable():
    text = "resource_group is not a block"
    first = parse_resources(text)
    assert first == ParseResult(text, ())
    assert parse_resources(first.remainder) == first


# ---------------------------------------------------------------------------
# Property keys
# ---------------------------------------------------------------------------

def test_key_ends_at_newline_before_equals():
    resource = single(block("  a", '  = "x"'))
    assert resource.res_def == (ResourceProperty("a", VString("x")),)

def test_key_cannot_span_lines():
    with pytest.raises(ParseError) as info:
        parse_resources(block("  a", '  b = "x"'))
    assert info.value.contexts == ('resource "res_type"',)
    assert (info.value.line, info.value.column) == (2, 3)
    assert "'}'" in info.value.message


# ---------------------------------------------------------------------------
# Immutability and worst case
# ---------------------------------------------------------------------------

def test_resources_are_hashable():
    _, resources = parse_resources(block('  x = jsonencode({"k": [1, {"j": null}]})'))
    again = parse_resources(block('  x = jsonencode({"k": [1, {"j": null}]})'))[1]
    assert hash(resources[0]) == hash(again[0])
    assert {resources[0], again[0]} == {resources[0]}

def test_nested_almost_matching_value_fails_fast():
    text = block("  x = jsonencode(" + "[" * 30 + "1, " * 20000 + "1,")
    started = time.perf_counter()
    with pytest.raises(ParseError) as info:
        parse_resources(text)
    assert time.perf_counter() - started < 2.0
    assert info.value.contexts[:3] == ('resource "res_type"', "property x", "jsonencode")
