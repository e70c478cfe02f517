from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.descriptor import Descriptor
from google.protobuf.message import Message

_log = logging.getLogger(__name__)


class MessageTypeResolver(Protocol):
    """Resolves the type URL of a ``google.protobuf.Any`` to a descriptor.

    Implementations raise ``KeyError`` for type URLs they do not know.
    """

    def find_message_type_by_url(self, type_url: str) -> Descriptor: ...


class DescriptorPoolResolver:
    """Resolve type URLs against a descriptor pool.

    Only the part after the last ``/`` of a type URL is significant, so
    ``type.googleapis.com/my.pkg.Config`` and ``my.pkg.Config`` both resolve
    to ``my.pkg.Config``.
    """

    def __init__(self, pool: Optional[descriptor_pool.DescriptorPool] = None) -> None:
        self.pool = pool if pool is not None else descriptor_pool.Default()

    def find_message_type_by_url(self, type_url: str) -> Descriptor:
        full_name = type_url.rsplit("/", 1)[-1]
        return self.pool.FindMessageTypeByName(full_name)

    @classmethod
    def from_descriptor_set(cls, path: Union[str, Path]) -> DescriptorPoolResolver:
        """Load a serialized FileDescriptorSet into a fresh pool.

        The set must be self-contained, i.e. produced with
        ``protoc --descriptor_set_out=... --include_imports``.
        """
        file_set = descriptor_pb2.FileDescriptorSet.FromString(Path(path).read_bytes())
        pool = descriptor_pool.DescriptorPool()
        for file_proto in file_set.file:
            pool.AddSerializedFile(file_proto.SerializeToString())
        _log.debug("Loaded %d files from descriptor set %s", len(file_set.file), path)
        return cls(pool)


def message_class(descriptor: Descriptor) -> type[Message]:
    """Return the concrete message class for ``descriptor``."""
    return message_factory.GetMessageClass(descriptor)


default_resolver = DescriptorPoolResolver()
