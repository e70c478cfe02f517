"""Test messages, registered in the default descriptor pool at import time.

Equivalent to compiling:

    syntax = "proto3";
    package protoyaml.test;

    enum Enum { ZERO = 0; ONE = 1; TWO = 2; }

    message Message {
      bool abool = 1;
      int32 anint32 = 2;
      ...
      map<string, Message> astring_message_map = 21;
    }

    message Known {
      google.protobuf.Duration aduration = 1;
      google.protobuf.Timestamp atimestamp = 2;
      google.protobuf.Any anany = 3;
      google.protobuf.FieldMask afieldmask = 4;
      repeated google.protobuf.Duration arepeated_duration = 5;
    }
"""

from google.protobuf import (
    any_pb2,
    descriptor_pb2,
    descriptor_pool,
    duration_pb2,
    field_mask_pb2,
    message_factory,
    timestamp_pb2,
)

_FD = descriptor_pb2.FieldDescriptorProto

WELL_KNOWN_FILES = [
    any_pb2.DESCRIPTOR,
    duration_pb2.DESCRIPTOR,
    field_mask_pb2.DESCRIPTOR,
    timestamp_pb2.DESCRIPTOR,
]


def _field(name, number, type_, type_name=None, repeated=False):
    field = _FD(
        name=name,
        number=number,
        type=type_,
        label=_FD.LABEL_REPEATED if repeated else _FD.LABEL_OPTIONAL,
    )
    if type_name:
        field.type_name = type_name
    return field


def _map_entry(name, key_type, value_type, value_type_name=None):
    entry = descriptor_pb2.DescriptorProto(name=name)
    entry.options.map_entry = True
    entry.field.append(_field("key", 1, key_type))
    entry.field.append(_field("value", 2, value_type, value_type_name))
    return entry


def _build_file():
    file = descriptor_pb2.FileDescriptorProto(
        name="protoyaml/test/test.proto",
        package="protoyaml.test",
        syntax="proto3",
    )
    file.dependency.extend(f.name for f in WELL_KNOWN_FILES)

    enum = file.enum_type.add(name="Enum")
    for number, name in enumerate(["ZERO", "ONE", "TWO"]):
        enum.value.add(name=name, number=number)

    message = file.message_type.add(name="Message")
    message.field.extend(
        [
            _field("abool", 1, _FD.TYPE_BOOL),
            _field("anint32", 2, _FD.TYPE_INT32),
            _field("ansint32", 3, _FD.TYPE_SINT32),
            _field("ansfixed32", 4, _FD.TYPE_SFIXED32),
            _field("anint64", 5, _FD.TYPE_INT64),
            _field("ansint64", 6, _FD.TYPE_SINT64),
            _field("ansfixed64", 7, _FD.TYPE_SFIXED64),
            _field("auint32", 8, _FD.TYPE_UINT32),
            _field("afixed32", 9, _FD.TYPE_FIXED32),
            _field("auint64", 10, _FD.TYPE_UINT64),
            _field("afixed64", 11, _FD.TYPE_FIXED64),
            _field("afloat", 12, _FD.TYPE_FLOAT),
            _field("adouble", 13, _FD.TYPE_DOUBLE),
            _field("astring", 14, _FD.TYPE_STRING),
            _field("abytes", 15, _FD.TYPE_BYTES),
            _field("anenum", 16, _FD.TYPE_ENUM, ".protoyaml.test.Enum"),
            _field("amessage", 17, _FD.TYPE_MESSAGE, ".protoyaml.test.Message"),
            _field("arepeated_int32", 18, _FD.TYPE_INT32, repeated=True),
            _field(
                "arepeated_message",
                19,
                _FD.TYPE_MESSAGE,
                ".protoyaml.test.Message",
                repeated=True,
            ),
            _field(
                "astring_int32_map",
                20,
                _FD.TYPE_MESSAGE,
                ".protoyaml.test.Message.AstringInt32MapEntry",
                repeated=True,
            ),
            _field(
                "astring_message_map",
                21,
                _FD.TYPE_MESSAGE,
                ".protoyaml.test.Message.AstringMessageMapEntry",
                repeated=True,
            ),
            _field(
                "abool_string_map",
                22,
                _FD.TYPE_MESSAGE,
                ".protoyaml.test.Message.AboolStringMapEntry",
                repeated=True,
            ),
            _field(
                "anint64_string_map",
                23,
                _FD.TYPE_MESSAGE,
                ".protoyaml.test.Message.Anint64StringMapEntry",
                repeated=True,
            ),
            _field(
                "auint32_string_map",
                24,
                _FD.TYPE_MESSAGE,
                ".protoyaml.test.Message.Auint32StringMapEntry",
                repeated=True,
            ),
            _field("arepeated_string", 25, _FD.TYPE_STRING, repeated=True),
        ]
    )
    message.nested_type.extend(
        [
            _map_entry("AstringInt32MapEntry", _FD.TYPE_STRING, _FD.TYPE_INT32),
            _map_entry(
                "AstringMessageMapEntry",
                _FD.TYPE_STRING,
                _FD.TYPE_MESSAGE,
                ".protoyaml.test.Message",
            ),
            _map_entry("AboolStringMapEntry", _FD.TYPE_BOOL, _FD.TYPE_STRING),
            _map_entry("Anint64StringMapEntry", _FD.TYPE_INT64, _FD.TYPE_STRING),
            _map_entry("Auint32StringMapEntry", _FD.TYPE_UINT32, _FD.TYPE_STRING),
        ]
    )

    known = file.message_type.add(name="Known")
    known.field.extend(
        [
            _field("aduration", 1, _FD.TYPE_MESSAGE, ".google.protobuf.Duration"),
            _field("atimestamp", 2, _FD.TYPE_MESSAGE, ".google.protobuf.Timestamp"),
            _field("anany", 3, _FD.TYPE_MESSAGE, ".google.protobuf.Any"),
            _field("afieldmask", 4, _FD.TYPE_MESSAGE, ".google.protobuf.FieldMask"),
            _field(
                "arepeated_duration",
                5,
                _FD.TYPE_MESSAGE,
                ".google.protobuf.Duration",
                repeated=True,
            ),
        ]
    )
    return file


FILE = _build_file()

_pool = descriptor_pool.Default()
_pool.AddSerializedFile(FILE.SerializeToString())

Message = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName("protoyaml.test.Message")
)
Known = message_factory.GetMessageClass(
    _pool.FindMessageTypeByName("protoyaml.test.Known")
)
ENUM = _pool.FindEnumTypeByName("protoyaml.test.Enum")
MESSAGE_URL = "type.googleapis.com/protoyaml.test.Message"


def descriptor_set():
    """Return a self-contained FileDescriptorSet holding the test file."""
    file_set = descriptor_pb2.FileDescriptorSet()
    for file in WELL_KNOWN_FILES:
        file.CopyToProto(file_set.file.add())
    file_set.file.add().CopyFrom(FILE)
    return file_set
