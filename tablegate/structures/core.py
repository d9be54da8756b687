"""
Names for the kinds of resources the server can encode and decode.

"""

import enum


class ResourceFamily(str, enum.Enum):
    # A full table descriptor, as served for a metadata read or posted to
    # create a table.
    table = "table"
    # A sequence of column family descriptors, as put to alter a table.
    columnfamilies = "columnfamilies"
    # The start keys of a table's regions.
    regions = "regions"
