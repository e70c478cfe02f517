"""Schema-guided decoding of YAML node trees into protobuf messages.

The YAML stream is composed into nodes by PyYAML (aliases are resolved to the
node they denote) and each document is decoded into a message by walking the
message descriptor: mapping keys are field names, the declared cardinality of
the field decides which node shape is accepted, and scalars are coerced into
the exact type of the field.
"""

from __future__ import annotations

import contextlib
import enum
import logging
from typing import IO, Iterator, Optional, TypeVar, Union

import yaml
from google.protobuf import descriptor as descriptor_mod
from google.protobuf.message import Message
from yaml.nodes import Node

from .errors import (
    DecodeError,
    EndOfStream,
    InvalidDocument,
    InvalidMapKey,
    InvalidScalarLiteral,
    TypeMismatch,
    UnknownField,
)
from .known import WellKnownType, decode_known_type
from .resolver import MessageTypeResolver, default_resolver
from .scalars import FieldKind, decode_scalar, field_kind
from .settings import Settings, protoyaml_settings

_log = logging.getLogger(__name__)

Stream = Union[str, bytes, IO[str], IO[bytes]]
M = TypeVar("M", bound=Message)


class Cardinality(enum.Enum):
    SINGULAR = "singular"
    LIST = "list"
    MAP = "map"


def field_cardinality(field: descriptor_mod.FieldDescriptor) -> Cardinality:
    if not field.is_repeated:
        return Cardinality.SINGULAR
    if (
        field.type == descriptor_mod.FieldDescriptor.TYPE_MESSAGE
        and field.message_type.GetOptions().map_entry
    ):
        return Cardinality.MAP
    return Cardinality.LIST


@contextlib.contextmanager
def _assigning(field: descriptor_mod.FieldDescriptor, node: Node, value):
    # Protobuf rejects some coerced values only on assignment, e.g. an
    # undeclared number for a closed enum.
    try:
        yield
    except (TypeError, ValueError) as exc:
        raise InvalidScalarLiteral(
            f"cannot store {value!r} in field {field.full_name}: {exc}",
            node.start_mark,
        ) from exc


def _loader_class(settings: Settings):
    if settings.use_c_loader:
        return getattr(yaml, "CSafeLoader", yaml.SafeLoader)
    return yaml.SafeLoader


class DocumentReader:
    """Pulls one composed document root at a time from a YAML stream."""

    def __init__(self, stream: Stream, settings: Optional[Settings] = None) -> None:
        settings = settings or protoyaml_settings
        self._documents = yaml.compose_all(stream, Loader=_loader_class(settings))

    def read(self) -> Optional[Node]:
        """Return the root node of the next document, or None at end of stream."""
        try:
            return next(self._documents)
        except StopIteration:
            return None
        except yaml.YAMLError as exc:
            raise InvalidDocument(
                f"malformed YAML: {exc}", getattr(exc, "problem_mark", None)
            ) from exc


class Decoder:
    """Decodes one or more YAML documents as protobuf messages.

    A decoder keeps the read position of its stream, so it must not be
    shared between threads. Separate decoders are independent.
    """

    def __init__(
        self,
        stream: Stream,
        resolver: Optional[MessageTypeResolver] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self.settings = settings or protoyaml_settings
        self.resolver = resolver if resolver is not None else default_resolver
        self._reader = DocumentReader(stream, self.settings)

    def set_message_type_resolver(self, resolver: MessageTypeResolver) -> None:
        """Use ``resolver`` to look up the types packed in ``google.protobuf.Any``."""
        self.resolver = resolver

    def decode(self, message: Message) -> None:
        """Decode the next document into ``message``.

        Raises:
            EndOfStream: there are no more documents.
            DecodeError: the document does not fit the message.
        """
        if message is None:
            raise DecodeError("nil destination message")
        if not isinstance(message, Message):
            raise DecodeError(f"cannot decode into a {type(message).__name__}")

        node = self._reader.read()
        if node is None:
            raise EndOfStream()
        _log.debug(
            "Decoding document at line %d as %s",
            node.start_mark.line + 1,
            message.DESCRIPTOR.full_name,
        )
        self.decode_message(message, node)

    def iter_decode(self, message_class: type[M]) -> Iterator[M]:
        """Yield a new ``message_class`` instance for every remaining document."""
        while True:
            message = message_class()
            try:
                self.decode(message)
            except EndOfStream:
                return
            yield message

    def decode_message(self, message: Message, node: Node) -> None:
        known = WellKnownType.of(message.DESCRIPTOR)
        if known is not None:
            decode_known_type(self, known, message, node)
            return

        descriptor = message.DESCRIPTOR
        if node.id != "mapping":
            raise TypeMismatch(
                f"cannot decode a {node.id} into message {descriptor.full_name}",
                node.start_mark,
            )

        for key_node, value_node in node.value:
            if key_node.id != "scalar":
                raise TypeMismatch(
                    f"field names of message {descriptor.full_name} must be scalars, "
                    f"got a {key_node.id}",
                    key_node.start_mark,
                )
            field = descriptor.fields_by_name.get(key_node.value)
            if field is None:
                raise UnknownField(
                    f"unknown field: {descriptor.full_name}.{key_node.value}",
                    key_node.start_mark,
                )
            self.decode_field(message, field, value_node)

    def decode_field(
        self, message: Message, field: descriptor_mod.FieldDescriptor, node: Node
    ) -> None:
        """Decode ``node`` into ``field`` of ``message``.

        The declared cardinality of the field decides the accepted node shape:
        maps take a mapping, repeated fields a sequence, singular messages
        whatever the nested message accepts and everything else a scalar.
        """
        cardinality = field_cardinality(field)
        if cardinality is Cardinality.MAP:
            self._decode_map(message, field, node)
            return
        if cardinality is Cardinality.LIST:
            self._decode_list(message, field, node)
            return

        if field_kind(field) is FieldKind.MESSAGE:
            nested = getattr(message, field.name)
            nested.SetInParent()
            self.decode_message(nested, node)
            return

        if node.id != "scalar":
            raise TypeMismatch(
                f"cannot store a {node.id} in field {field.full_name}",
                node.start_mark,
            )
        value = decode_scalar(field, node)
        with _assigning(field, node, value):
            setattr(message, field.name, value)

    def _decode_list(
        self, message: Message, field: descriptor_mod.FieldDescriptor, node: Node
    ) -> None:
        if node.id != "sequence":
            raise TypeMismatch(
                f"cannot store a {node.id} in repeated field {field.full_name}",
                node.start_mark,
            )

        message.ClearField(field.name)
        container = getattr(message, field.name)
        if field_kind(field) is FieldKind.MESSAGE:
            for element in node.value:
                self.decode_message(container.add(), element)
            return

        for element in node.value:
            value = decode_scalar(field, element)
            with _assigning(field, element, value):
                container.append(value)

    def _decode_map(
        self, message: Message, field: descriptor_mod.FieldDescriptor, node: Node
    ) -> None:
        if node.id != "mapping":
            raise TypeMismatch(
                f"cannot store a {node.id} in map field {field.full_name}",
                node.start_mark,
            )

        key_field = field.message_type.fields_by_name["key"]
        value_field = field.message_type.fields_by_name["value"]
        container = getattr(message, field.name)
        for key_node, value_node in node.value:
            key = decode_scalar(key_field, key_node)
            # bool is an int subclass.
            if not isinstance(key, (int, str)):
                raise InvalidMapKey(
                    f"cannot use a {type(key).__name__} as a map key in {field.full_name}",
                    key_node.start_mark,
                )

            if field_kind(value_field) is FieldKind.MESSAGE:
                if key in container:
                    del container[key]
                self.decode_message(container.get_or_create(key), value_node)
                continue

            value = decode_scalar(value_field, value_node)
            with _assigning(field, value_node, value):
                container[key] = value


def unmarshal(
    data: Union[str, bytes],
    message: Message,
    resolver: Optional[MessageTypeResolver] = None,
) -> None:
    """Decode the first YAML document of ``data`` into ``message``."""
    Decoder(data, resolver=resolver).decode(message)
