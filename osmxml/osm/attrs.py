from __future__ import annotations

import math
import re
import struct
from collections.abc import Callable
from collections.abc import Iterable
from typing import TypeVar

from osmxml.osm.errors import AttributeValueError
from osmxml.osm.errors import MissingAttributeError
from osmxml.osm.errors import ObjectTypeError
from osmxml.osm.types import ObjType
from osmxml.osm.types import OsmAttrs

ParsedAttrs = dict[str, str]

T = TypeVar("T")

INT64_RANGE = (-(2**63), 2**63 - 1)
UINT32_RANGE = (0, 2**32 - 1)
UINT64_RANGE = (0, 2**64 - 1)

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")


def collect_attrs(pairs: Iterable[tuple[str, str]]) -> ParsedAttrs:
    return {key: value for key, value in pairs}


def parse_int(value: str, bounds: tuple[int, int] = INT64_RANGE) -> int:
    if not _INT_PATTERN.fullmatch(value):
        raise AttributeValueError(f"invalid digit in integer {value!r}")
    low, high = bounds
    if low == 0 and value.startswith("-"):
        raise AttributeValueError(f"invalid digit in unsigned integer {value!r}")
    number = int(value)
    if not low <= number <= high:
        raise AttributeValueError(f"integer {value!r} out of range")
    return number


def parse_bool(value: str) -> bool:
    match value:
        case "true":
            return True
        case "false":
            return False
        case _:
            raise AttributeValueError(f"provided string was not `true` or `false`: {value!r}")


def parse_float(value: str) -> float:
    if value != value.strip() or "_" in value:
        raise AttributeValueError(f"invalid float literal {value!r}")
    try:
        return float(value)
    except ValueError:
        raise AttributeValueError(f"invalid float literal {value!r}") from None


def to_float32(value: float) -> float:
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def parse_float32(value: str) -> float:
    return to_float32(parse_float(value))


def parse_obj_type(value: str) -> ObjType:
    try:
        return ObjType(value)
    except ValueError:
        raise ObjectTypeError("object type is not node/way/relation") from None


def optional(attrs: ParsedAttrs, key: str, parse: Callable[[str], T]) -> T | None:
    value = attrs.get(key)
    if value is None:
        return None
    return parse(value)


def required(attrs: ParsedAttrs, key: str, message: str) -> str:
    value = attrs.get(key)
    if value is None:
        raise MissingAttributeError(message)
    return value


def decode_attrs(attrs: ParsedAttrs) -> OsmAttrs:
    return OsmAttrs(
        id=optional(attrs, "id", parse_int),
        timestamp=attrs.get("timestamp"),
        uid=optional(attrs, "uid", parse_int),
        user=attrs.get("user"),
        visible=optional(attrs, "visible", parse_bool),
        deleted=optional(attrs, "deleted", parse_bool),
        version=optional(attrs, "version", lambda v: parse_int(v, UINT32_RANGE)),
        changeset=optional(attrs, "changeset", lambda v: parse_int(v, UINT64_RANGE)),
    )
