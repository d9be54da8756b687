import xml.etree.ElementTree as ET

import pytest

from ..serialization.markup import (
    deserialize_column_families,
    deserialize_table,
    serialize_regions,
    serialize_table,
)
from ..serialization.text import serialize_regions as serialize_regions_as_text
from ..serialization.text import serialize_table as serialize_table_as_text
from ..structures.schema import (
    DEFAULT_LENGTH,
    FOREVER,
    ColumnFamilyDescriptor,
    CompressionType,
    TableDescriptor,
)
from ..utils import MalformedRequest


def test_defaults_for_absent_elements():
    descriptor = deserialize_table(
        b"<table><name>t</name><columnfamilies>"
        b"<columnfamily><name>cf</name></columnfamily>"
        b"</columnfamilies></table>"
    )
    assert descriptor.name == "t"
    (family,) = descriptor.families
    assert family == ColumnFamilyDescriptor("cf:")
    assert family.max_versions == 3
    assert family.compression is CompressionType.NONE
    assert family.in_memory is False
    assert family.block_cache is False
    assert family.max_cell_size == DEFAULT_LENGTH
    assert family.time_to_live == FOREVER
    assert family.bloomfilter is False


def test_all_elements():
    descriptor = deserialize_table(
        b"""<?xml version="1.0" encoding="UTF-8"?>
        <table>
          <name>orders</name>
          <columnfamilies>
            <columnfamily>
              <name>history:</name>
              <max-versions>10</max-versions>
              <compression>BLOCK</compression>
              <in-memory>true</in-memory>
              <block-cache>true</block-cache>
              <max-cell-size>1024</max-cell-size>
              <time-to-live>86400</time-to-live>
              <bloomfilter>true</bloomfilter>
            </columnfamily>
          </columnfamilies>
        </table>"""
    )
    assert descriptor.families == [
        ColumnFamilyDescriptor(
            "history:",
            max_versions=10,
            compression=CompressionType.BLOCK,
            in_memory=True,
            block_cache=True,
            max_cell_size=1024,
            time_to_live=86400,
            bloomfilter=True,
        )
    ]


def test_family_name_keeps_existing_delimiter():
    descriptor = deserialize_table(
        b"<table><name>t</name><columnfamily><name>a:b</name></columnfamily></table>"
    )
    assert descriptor.families[0].name == "a:b"


def test_table_without_families():
    descriptor = deserialize_table(b"<table><name>empty</name></table>")
    assert descriptor == TableDescriptor("empty")


def test_first_occurrence_wins():
    # The table name is the first <name> in the document, even when duplicated.
    descriptor = deserialize_table(
        b"<table><name>first</name><name>second</name>"
        b"<columnfamily><name>cf</name><max-versions>5</max-versions>"
        b"<max-versions>7</max-versions></columnfamily></table>"
    )
    assert descriptor.name == "first"
    assert descriptor.families[0].max_versions == 5


def test_name_is_found_at_any_depth():
    descriptor = deserialize_table(
        b"<table><columnfamily><name>cf</name></columnfamily></table>"
    )
    assert descriptor.name == "cf"
    assert descriptor.families[0].name == "cf:"


@pytest.mark.parametrize(
    "body",
    [
        b"not xml at all",
        b"<table><name>t</name>",
        b"<table></table>",
        b"<table><name> </name></table>",
        b"<table><name>t</name><columnfamily></columnfamily></table>",
        b"<table><name>t</name><columnfamily><name>cf</name>"
        b"<max-versions>three</max-versions></columnfamily></table>",
        b"<table><name>t</name><columnfamily><name>cf</name>"
        b"<max-versions>0</max-versions></columnfamily></table>",
        b"<table><name>t</name><columnfamily><name>cf</name>"
        b"<compression>ZIP</compression></columnfamily></table>",
        b"<table><name>t</name><columnfamily><name>cf</name>"
        b"<in-memory>yes</in-memory></columnfamily></table>",
        b"<table><name>t</name><columnfamily><name>cf</name>"
        b"<max-versions>1_000</max-versions></columnfamily></table>",
        b"<table><name>t</name><columnfamily><name>cf</name>"
        b"<max-versions>\xd9\xa3</max-versions></columnfamily></table>",
        b"<table><name>t</name><columnfamily><name>cf</name>"
        b"<max-cell-size>2147483648</max-cell-size></columnfamily></table>",
        b"<table><name>t</name><columnfamily><name>cf</name>"
        b"<time-to-live>-2147483649</time-to-live></columnfamily></table>",
    ],
)
def test_malformed_table(body):
    with pytest.raises(MalformedRequest):
        deserialize_table(body)


def test_column_families_are_decoded_lazily():
    families = deserialize_column_families(
        b"<columnfamilies>"
        b"<columnfamily><name>a</name></columnfamily>"
        b"<columnfamily><name>b</name><bloomfilter>maybe</bloomfilter></columnfamily>"
        b"</columnfamilies>"
    )
    assert next(families).name == "a:"
    with pytest.raises(MalformedRequest):
        next(families)


def test_column_families_malformed_document_fails_early():
    with pytest.raises(MalformedRequest):
        deserialize_column_families(b"<columnfamilies>")


def test_serialize_table(orders):
    root = ET.fromstring(serialize_table("text/xml", orders))
    assert root.tag == "table"
    assert root.find("name").text == "orders"
    families = root.find("columnfamilies").findall("columnfamily")
    assert [family.find("name").text for family in families] == [
        "details:",
        "history:",
    ]
    history = families[1]
    assert history.find("compression").text == "NONE"
    assert history.find("bloomfilter").text == "false"
    assert history.find("max-versions").text == "10"
    assert history.find("maximum-cell-size").text == str(DEFAULT_LENGTH)
    assert history.find("time-to-live").text == "86400"


def test_metadata_document_can_be_posted_back(orders):
    assert deserialize_table(serialize_table("text/xml", orders)) == orders


def test_explicit_attributes_survive_round_trip():
    descriptor = TableDescriptor(
        "events",
        [
            ColumnFamilyDescriptor(
                "raw:",
                max_versions=1,
                compression=CompressionType.BLOCK,
                in_memory=True,
                block_cache=True,
                max_cell_size=4096,
                time_to_live=3600,
                bloomfilter=True,
            ),
            ColumnFamilyDescriptor("summary:", compression=CompressionType.RECORD),
        ],
    )
    assert deserialize_table(serialize_table("text/xml", descriptor)) == descriptor


def test_integer_bounds():
    (family,) = deserialize_table(
        b"<table><name>t</name><columnfamily><name>cf</name>"
        b"<max-cell-size>+2147483647</max-cell-size>"
        b"<time-to-live>-1</time-to-live></columnfamily></table>"
    ).families
    assert family.max_cell_size == 2147483647
    assert family.time_to_live == FOREVER


def test_serialize_regions():
    root = ET.fromstring(serialize_regions("text/xml", [b"", b"m"]))
    assert root.tag == "regions"
    assert [(region.text or "") for region in root.findall("region")] == ["", "m"]


def test_plain_text(orders):
    assert serialize_table_as_text("text/plain", orders).decode() == (
        "{NAME => 'orders', FAMILIES => ["
        "{NAME => 'details:', VERSIONS => '3', COMPRESSION => 'NONE', "
        "IN_MEMORY => 'false', BLOCKCACHE => 'false', LENGTH => '2147483647', "
        "TTL => 'FOREVER', BLOOMFILTER => 'false'}, "
        "{NAME => 'history:', VERSIONS => '10', COMPRESSION => 'NONE', "
        "IN_MEMORY => 'false', BLOCKCACHE => 'false', LENGTH => '2147483647', "
        "TTL => '86400', BLOOMFILTER => 'false'}]}"
    )
    assert serialize_regions_as_text("text/plain", [b"", b"m"]) == b"\nm\n"


def test_descriptor_validation():
    with pytest.raises(ValueError):
        TableDescriptor("")
    with pytest.raises(ValueError):
        ColumnFamilyDescriptor("cf:", max_versions=-1)
    with pytest.raises(ValueError):
        ColumnFamilyDescriptor("cf:", compression="GZIP")
    table = TableDescriptor("t", [ColumnFamilyDescriptor("cf:")])
    assert table.family("cf:").name == "cf:"
    with pytest.raises(KeyError):
        table.family("missing:")
