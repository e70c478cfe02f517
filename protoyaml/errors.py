"""Exceptions raised while decoding YAML documents into protobuf messages."""

from __future__ import annotations

from typing import Optional

from yaml.error import Mark


class DecodeError(ValueError):
    """Base class for every decode failure.

    When the failure can be attributed to a node of the document, its start
    mark is kept on the exception and appended to the message.
    """

    def __init__(self, message: str, mark: Optional[Mark] = None) -> None:
        self.mark = mark
        if mark is not None:
            message = f"{message} (line {mark.line + 1}, column {mark.column + 1})"
        super().__init__(f"protoyaml: {message}")


class TypeMismatch(DecodeError):
    """The node shape is incompatible with what the field or message expects."""


class UnknownField(DecodeError):
    """A mapping key names no declared field of the target message."""


class InvalidScalarLiteral(DecodeError):
    """A scalar's text does not parse as the requested primitive type."""


class InvalidMapKey(DecodeError):
    """A decoded map key is not a bool, an integer or a string."""


class UnresolvedAnyType(DecodeError):
    """The Any discriminator is missing or names an unknown type."""


class InvalidDocument(DecodeError):
    """The YAML text itself could not be composed."""


class EndOfStream(Exception):
    """Raised by ``Decoder.decode`` when the stream holds no more documents."""
