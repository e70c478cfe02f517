"""Decoding of protobuf well-known types from their idiomatic YAML form.

These messages are not written field by field. A Duration or a Timestamp is
a single scalar in the canonical JSON string form (``42s``,
``2006-01-02T15:04:05.999Z``), a FieldMask is a sequence of paths, and an
Any is a mapping holding the fields of the packed message next to an
``@type`` key naming its type.
"""

from __future__ import annotations

import enum
import json
import logging
from typing import TYPE_CHECKING, Callable, Optional

import yaml
from google.protobuf import json_format
from google.protobuf.descriptor import Descriptor
from google.protobuf.message import Message
from yaml.nodes import Node

from .errors import InvalidScalarLiteral, TypeMismatch, UnresolvedAnyType
from .resolver import message_class

if TYPE_CHECKING:
    from .decoder import Decoder

_log = logging.getLogger(__name__)


class WellKnownType(enum.Enum):
    ANY = "google.protobuf.Any"
    DURATION = "google.protobuf.Duration"
    FIELD_MASK = "google.protobuf.FieldMask"
    TIMESTAMP = "google.protobuf.Timestamp"

    @classmethod
    def of(cls, descriptor: Descriptor) -> Optional[WellKnownType]:
        try:
            return cls(descriptor.full_name)
        except ValueError:
            return None


def _parse_json_string(message: Message, node: Node) -> None:
    full_name = message.DESCRIPTOR.full_name
    if node.id != "scalar":
        raise TypeMismatch(
            f"cannot decode a {node.id} into a {full_name}", node.start_mark
        )
    try:
        json_format.Parse(json.dumps(node.value), message)
    except json_format.ParseError as exc:
        raise InvalidScalarLiteral(
            f"invalid {full_name} {node.value!r}: {exc}", node.start_mark
        ) from exc


def decode_duration(decoder: Decoder, message: Message, node: Node) -> None:
    _parse_json_string(message, node)


def decode_timestamp(decoder: Decoder, message: Message, node: Node) -> None:
    _parse_json_string(message, node)


def decode_field_mask(decoder: Decoder, message: Message, node: Node) -> None:
    if node.id != "sequence":
        raise TypeMismatch(
            f"cannot decode a {node.id} into a google.protobuf.FieldMask",
            node.start_mark,
        )
    message.ClearField("paths")
    for element in node.value:
        if element.id != "scalar":
            raise TypeMismatch(
                f"field mask paths must be scalars, got a {element.id}",
                element.start_mark,
            )
        message.paths.append(element.value)


def _embedded_value(descriptor: Descriptor, entries, node: Node) -> Node:
    # Packed well-known types keep their own YAML form under a "value" key.
    if len(entries) != 1 or entries[0][0].id != "scalar" or entries[0][0].value != "value":
        raise TypeMismatch(
            f"an Any holding a {descriptor.full_name} needs exactly one 'value' key",
            node.start_mark,
        )
    return entries[0][1]


def decode_any(decoder: Decoder, message: Message, node: Node) -> None:
    if node.id != "mapping":
        raise TypeMismatch(
            f"cannot decode a {node.id} into a google.protobuf.Any", node.start_mark
        )

    type_key = decoder.settings.any_type_key
    type_index = None
    for index, (key_node, _value_node) in enumerate(node.value):
        if key_node.id == "scalar" and key_node.value == type_key:
            type_index = index
    if type_index is None:
        raise UnresolvedAnyType(f"no {type_key} key in Any mapping", node.start_mark)

    type_node = node.value[type_index][1]
    if type_node.id != "scalar":
        raise TypeMismatch(
            f"the {type_key} of an Any must be a scalar, got a {type_node.id}",
            type_node.start_mark,
        )
    type_url = type_node.value
    try:
        descriptor = decoder.resolver.find_message_type_by_url(type_url)
    except KeyError as exc:
        raise UnresolvedAnyType(
            f"cannot resolve Any type {type_url!r}", type_node.start_mark
        ) from exc
    _log.debug("Resolved Any type %s to %s", type_url, descriptor.full_name)

    entries = node.value[:type_index] + node.value[type_index + 1 :]
    if WellKnownType.of(descriptor) is not None:
        body = _embedded_value(descriptor, entries, node)
    else:
        body = yaml.MappingNode(
            node.tag,
            entries,
            node.start_mark,
            node.end_mark,
            flow_style=node.flow_style,
        )

    payload = message_class(descriptor)()
    decoder.decode_message(payload, body)

    message.type_url = type_url
    message.value = payload.SerializeToString(deterministic=True)


_DECODERS: dict[WellKnownType, Callable[[Decoder, Message, Node], None]] = {
    WellKnownType.ANY: decode_any,
    WellKnownType.DURATION: decode_duration,
    WellKnownType.FIELD_MASK: decode_field_mask,
    WellKnownType.TIMESTAMP: decode_timestamp,
}


def decode_known_type(
    decoder: Decoder, known: WellKnownType, message: Message, node: Node
) -> None:
    _DECODERS[known](decoder, message, node)
