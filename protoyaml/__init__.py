"""A YAML decoder for protobuf messages, in the spirit of ``json_format``.

YAML keys are protobuf field names (not JSON names) and enums can be given
as value names or as numbers.
"""

from .decoder import Decoder, DocumentReader, unmarshal
from .errors import (
    DecodeError,
    EndOfStream,
    InvalidDocument,
    InvalidMapKey,
    InvalidScalarLiteral,
    TypeMismatch,
    UnknownField,
    UnresolvedAnyType,
)
from .resolver import DescriptorPoolResolver, MessageTypeResolver

__all__ = [
    "DecodeError",
    "Decoder",
    "DescriptorPoolResolver",
    "DocumentReader",
    "EndOfStream",
    "InvalidDocument",
    "InvalidMapKey",
    "InvalidScalarLiteral",
    "MessageTypeResolver",
    "TypeMismatch",
    "UnknownField",
    "UnresolvedAnyType",
    "unmarshal",
]
