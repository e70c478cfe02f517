"""Coercion of YAML scalar nodes into protobuf field values.

The node's text is interpreted according to the kind of the field it is
destined for. Numbers and booleans follow the YAML scalar rules of the
composing loader (the implicit tag PyYAML resolved for the node); strings
are taken verbatim and bytes are standard base64.
"""

from __future__ import annotations

import base64
import binascii
import enum
import math
from typing import Any

from google.protobuf import descriptor as descriptor_mod
from yaml.constructor import ConstructorError, SafeConstructor
from yaml.nodes import Node

from .errors import InvalidScalarLiteral, TypeMismatch


class FieldKind(enum.Enum):
    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BYTES = "bytes"
    ENUM = "enum"
    MESSAGE = "message"


_FD = descriptor_mod.FieldDescriptor

_FIELD_KINDS = {
    _FD.TYPE_BOOL: FieldKind.BOOL,
    _FD.TYPE_INT32: FieldKind.INT32,
    _FD.TYPE_SINT32: FieldKind.INT32,
    _FD.TYPE_SFIXED32: FieldKind.INT32,
    _FD.TYPE_INT64: FieldKind.INT64,
    _FD.TYPE_SINT64: FieldKind.INT64,
    _FD.TYPE_SFIXED64: FieldKind.INT64,
    _FD.TYPE_UINT32: FieldKind.UINT32,
    _FD.TYPE_FIXED32: FieldKind.UINT32,
    _FD.TYPE_UINT64: FieldKind.UINT64,
    _FD.TYPE_FIXED64: FieldKind.UINT64,
    _FD.TYPE_FLOAT: FieldKind.FLOAT,
    _FD.TYPE_DOUBLE: FieldKind.DOUBLE,
    _FD.TYPE_STRING: FieldKind.STRING,
    _FD.TYPE_BYTES: FieldKind.BYTES,
    _FD.TYPE_ENUM: FieldKind.ENUM,
    _FD.TYPE_MESSAGE: FieldKind.MESSAGE,
    _FD.TYPE_GROUP: FieldKind.MESSAGE,
}

_INT_RANGES = {
    FieldKind.INT32: (-(2**31), 2**31 - 1),
    FieldKind.INT64: (-(2**63), 2**63 - 1),
    FieldKind.UINT32: (0, 2**32 - 1),
    FieldKind.UINT64: (0, 2**64 - 1),
}

# Largest finite single-precision value.
_FLOAT32_MAX = 3.4028234663852886e38


def field_kind(field: descriptor_mod.FieldDescriptor) -> FieldKind:
    return _FIELD_KINDS[field.type]


def _native(node: Node) -> Any:
    """Construct the plain Python value YAML assigns to a scalar node."""
    # Explicitly tagged scalars such as `!!bool maybe` or `!!int ""` fail with
    # KeyError or IndexError inside the constructor.
    try:
        return SafeConstructor().construct_object(node)
    except (ConstructorError, ValueError, KeyError, IndexError) as exc:
        raise InvalidScalarLiteral(
            f"cannot interpret {node.value!r}: {exc}", node.start_mark
        ) from exc


def _decode_bool(field, node: Node) -> bool:
    value = _native(node)
    if not isinstance(value, bool):
        raise InvalidScalarLiteral(
            f"{node.value!r} is not a boolean for field {field.full_name}",
            node.start_mark,
        )
    return value


def _decode_int(field, node: Node, kind: FieldKind) -> int:
    value = _native(node)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidScalarLiteral(
            f"{node.value!r} is not an integer for field {field.full_name}",
            node.start_mark,
        )
    low, high = _INT_RANGES[kind]
    if not low <= value <= high:
        raise InvalidScalarLiteral(
            f"{node.value!r} overflows {kind.value} field {field.full_name}",
            node.start_mark,
        )
    return value


def _decode_float(field, node: Node, kind: FieldKind) -> float:
    value = _native(node)
    if isinstance(value, str) and not node.style:
        # The YAML 1.1 resolver tags exponent forms like 1e3 as strings.
        try:
            value = float(node.value)
        except ValueError:
            pass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScalarLiteral(
            f"{node.value!r} is not a number for field {field.full_name}",
            node.start_mark,
        )
    try:
        value = float(value)
    except OverflowError as exc:
        raise InvalidScalarLiteral(
            f"{node.value!r} overflows {kind.value} field {field.full_name}",
            node.start_mark,
        ) from exc
    if kind is FieldKind.FLOAT and math.isfinite(value) and abs(value) > _FLOAT32_MAX:
        raise InvalidScalarLiteral(
            f"{node.value!r} overflows float field {field.full_name}",
            node.start_mark,
        )
    return value


def _decode_bytes(field, node: Node) -> bytes:
    # Line breaks are allowed inside folded or literal base64 blocks.
    text = node.value.replace("\n", "").replace("\r", "")
    # Non-ASCII text raises a plain ValueError rather than binascii.Error.
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidScalarLiteral(
            f"invalid base64 for field {field.full_name}: {exc}", node.start_mark
        ) from exc


def _decode_enum(field, node: Node) -> int:
    value = field.enum_type.values_by_name.get(node.value)
    if value is not None:
        return value.number
    # Open enum: any number in range is accepted, declared or not.
    return _decode_int(field, node, FieldKind.INT32)


def decode_scalar(field: descriptor_mod.FieldDescriptor, node: Node) -> Any:
    """Return the value of a scalar node as the type ``field`` demands.

    Raises:
        TypeMismatch: the node is not a scalar, or the field is not of a
            primitive or enum kind.
        InvalidScalarLiteral: the text does not parse as the field's type.
    """
    kind = field_kind(field)
    if node.id != "scalar" or kind is FieldKind.MESSAGE:
        raise TypeMismatch(
            f"cannot decode a {node.id} into a {kind.value} field {field.full_name}",
            node.start_mark,
        )

    if kind is FieldKind.BOOL:
        return _decode_bool(field, node)
    if kind in _INT_RANGES:
        return _decode_int(field, node, kind)
    if kind in (FieldKind.FLOAT, FieldKind.DOUBLE):
        return _decode_float(field, node, kind)
    if kind is FieldKind.STRING:
        return node.value
    if kind is FieldKind.BYTES:
        return _decode_bytes(field, node)
    return _decode_enum(field, node)
