from ..media_type_registration import default_serialization_registry
from ..mimetypes import PLAIN_MIME_TYPE
from ..structures.core import ResourceFamily


@default_serialization_registry.register(ResourceFamily.table, PLAIN_MIME_TYPE)
def serialize_table(media_type, descriptor):
    return str(descriptor).encode()


@default_serialization_registry.register(ResourceFamily.regions, PLAIN_MIME_TYPE)
def serialize_regions(media_type, start_keys):
    # One start key per line. The first region's start key is empty.
    return b"".join(key + b"\n" for key in start_keys)
