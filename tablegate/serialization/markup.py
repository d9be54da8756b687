import base64
import io
import re
import xml.etree.ElementTree as ET

from ..media_type_registration import (
    default_deserialization_registry,
    default_serialization_registry,
)
from ..mimetypes import XML_MIME_TYPE
from ..structures.core import ResourceFamily
from ..structures.schema import (
    DEFAULT_BLOCKCACHE,
    DEFAULT_BLOOMFILTER,
    DEFAULT_COMPRESSION,
    DEFAULT_IN_MEMORY,
    DEFAULT_LENGTH,
    DEFAULT_TTL,
    DEFAULT_VERSIONS,
    FAMILY_DELIMITER,
    ColumnFamilyDescriptor,
    CompressionType,
    TableDescriptor,
)
from ..utils import MalformedRequest

# Tags are matched case-sensitively.
TABLE_TAG = "table"
NAME_TAG = "name"
COLUMN_FAMILIES_TAG = "columnfamilies"
COLUMN_FAMILY_TAG = "columnfamily"
REGIONS_TAG = "regions"
REGION_TAG = "region"

# XML 1.0 text characters (the Char production), less the carriage return
# that parsers normalize away.
XML_TEXT = re.compile(r"[\x09\x0A\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]*")

# Integers are written in decimal ASCII and must fit in 32 bits.
INTEGER = re.compile("[+-]?[0-9]+")
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def _to_bytes(root):
    with io.BytesIO() as buffer:
        ET.ElementTree(root).write(buffer, encoding="UTF-8", xml_declaration=True)
        return buffer.getvalue()


def _sub_element(parent, tag, text):
    element = ET.SubElement(parent, tag)
    element.text = text
    return element


def _bool_str(value):
    return "true" if value else "false"


@default_serialization_registry.register(ResourceFamily.table, XML_MIME_TYPE)
def serialize_table(media_type, descriptor):
    root = ET.Element(TABLE_TAG)
    _sub_element(root, NAME_TAG, descriptor.name)
    families = ET.SubElement(root, COLUMN_FAMILIES_TAG)
    for family in descriptor.families:
        element = ET.SubElement(families, COLUMN_FAMILY_TAG)
        _sub_element(element, NAME_TAG, family.name)
        _sub_element(element, "compression", str(family.compression))
        _sub_element(element, "bloomfilter", _bool_str(family.bloomfilter))
        _sub_element(element, "max-versions", str(family.max_versions))
        _sub_element(element, "maximum-cell-size", str(family.max_cell_size))
        _sub_element(element, "in-memory", _bool_str(family.in_memory))
        _sub_element(element, "block-cache", _bool_str(family.block_cache))
        _sub_element(element, "time-to-live", str(family.time_to_live))
    return _to_bytes(root)


@default_serialization_registry.register(ResourceFamily.regions, XML_MIME_TYPE)
def serialize_regions(media_type, start_keys):
    root = ET.Element(REGIONS_TAG)
    for key in start_keys:
        try:
            text = key.decode("utf-8")
        except UnicodeDecodeError:
            text = None
        if text is not None and XML_TEXT.fullmatch(text):
            _sub_element(root, REGION_TAG, text)
        else:
            # Keys that are not valid XML text are sent as base64.
            element = _sub_element(
                root, REGION_TAG, base64.b64encode(key).decode("ascii")
            )
            element.set("encoding", "base64")
    return _to_bytes(root)


def parse_document(buffer):
    "Parse a request body, raising MalformedRequest if it is not XML."
    try:
        return ET.fromstring(buffer)
    except ET.ParseError as err:
        raise MalformedRequest(f"Request body is not well-formed XML: {err}")


def _first(scope, tag):
    """
    Find the first element named tag anywhere inside scope, in document order.

    Duplicates resolve to the first occurrence, whatever their nesting.
    """
    return next(scope.iter(tag), None)


def _text(element):
    text = (element.text or "").strip()
    if not text:
        raise MalformedRequest(f"Element <{element.tag}> must not be empty.")
    return text


def _parse_int(element):
    text = _text(element)
    if not INTEGER.fullmatch(text):
        raise MalformedRequest(
            f"Element <{element.tag}> must be an integer, got {text!r}."
        )
    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        raise MalformedRequest(
            f"Element <{element.tag}> must fit in 32 bits, got {text!r}."
        )
    return value


def _parse_bool(element):
    text = _text(element)
    if text == "true":
        return True
    if text == "false":
        return False
    raise MalformedRequest(
        f"Element <{element.tag}> must be 'true' or 'false', got {text!r}."
    )


def _parse_compression(element):
    text = _text(element)
    try:
        return CompressionType[text]
    except KeyError:
        allowed = ", ".join(member.name for member in CompressionType)
        raise MalformedRequest(
            f"Element <{element.tag}> must be one of {allowed}, got {text!r}."
        )


# (tag, attribute, parser, default) for every optional column family attribute
COLUMN_FAMILY_ATTRIBUTES = [
    ("max-versions", "max_versions", _parse_int, DEFAULT_VERSIONS),
    ("compression", "compression", _parse_compression, DEFAULT_COMPRESSION),
    ("in-memory", "in_memory", _parse_bool, DEFAULT_IN_MEMORY),
    ("block-cache", "block_cache", _parse_bool, DEFAULT_BLOCKCACHE),
    ("max-cell-size", "max_cell_size", _parse_int, DEFAULT_LENGTH),
    ("time-to-live", "time_to_live", _parse_int, DEFAULT_TTL),
    ("bloomfilter", "bloomfilter", _parse_bool, DEFAULT_BLOOMFILTER),
]

# Metadata responses spell the cell size out in full; accept that on input too.
ATTRIBUTE_ALIASES = {"max-cell-size": "maximum-cell-size"}


def decode_column_family(element):
    """
    Build a ColumnFamilyDescriptor from a <columnfamily> element.

    Every attribute whose element is absent takes its default value.
    The family name gains a trailing ':' if it has none.
    """
    name_element = _first(element, NAME_TAG)
    if name_element is None:
        raise MalformedRequest("Column family is missing a <name> element.")
    name = _text(name_element)
    if FAMILY_DELIMITER not in name:
        name += FAMILY_DELIMITER
    kwargs = {}
    for tag, attribute, parse, default in COLUMN_FAMILY_ATTRIBUTES:
        found = _first(element, tag)
        if found is None and tag in ATTRIBUTE_ALIASES:
            found = _first(element, ATTRIBUTE_ALIASES[tag])
        kwargs[attribute] = default if found is None else parse(found)
    try:
        return ColumnFamilyDescriptor(name, **kwargs)
    except ValueError as err:
        raise MalformedRequest(f"Invalid column family {name!r}: {err}")


@default_deserialization_registry.register(ResourceFamily.table, XML_MIME_TYPE)
def deserialize_table(buffer):
    root = parse_document(buffer)
    name_element = _first(root, NAME_TAG)
    if name_element is None:
        raise MalformedRequest("Table is missing a <name> element.")
    descriptor = TableDescriptor(_text(name_element))
    for element in root.iter(COLUMN_FAMILY_TAG):
        descriptor.add_family(decode_column_family(element))
    return descriptor


@default_deserialization_registry.register(
    ResourceFamily.columnfamilies, XML_MIME_TYPE
)
def deserialize_column_families(buffer):
    """
    Parse the whole document now, but decode each <columnfamily> lazily.

    A malformed document fails before anything is yielded; a malformed
    family fails only when it is reached.
    """
    root = parse_document(buffer)
    return (decode_column_family(element) for element in root.iter(COLUMN_FAMILY_TAG))
