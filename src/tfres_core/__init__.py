"""tfres-core — parses Terraform-style resource blocks into an AST."""

from .config import ParserConfig
from .errors import ConfigError, ParseError, TfResCoreError
from .json_reader import parse_json
from .model import (
    ParseResult,
    Resource,
    ResourceDefinition,
    ResourceProperty,
    ResourcePropertyValue,
    VBoolean,
    VEach,
    VJson,
    VNull,
    VReference,
    VSet,
    VString,
)
from .reader import parse_property_value, parse_resource, parse_resources
from .values import JArray, JBool, JNull, JNum, JObject, JStr, JsonValue

__all__ = [
    "parse_resources",
    "parse_resource",
    "parse_property_value",
    "parse_json",
    "ParserConfig",
    "ParseResult",
    "Resource",
    "ResourceDefinition",
    "ResourceProperty",
    "ResourcePropertyValue",
    "VBoolean",
    "VEach",
    "VJson",
    "VNull",
    "VReference",
    "VSet",
    "VString",
    "JsonValue",
    "JArray",
    "JBool",
    "JNull",
    "JNum",
    "JObject",
    "JStr",
    "TfResCoreError",
    "ParseError",
    "ConfigError",
]
