import enum
from dataclasses import dataclass, field
from typing import List

# A column family name is qualified by this trailing separator.
FAMILY_DELIMITER = ":"

# Time-to-live sentinel meaning "keep cells forever".
FOREVER = -1


class CompressionType(str, enum.Enum):
    NONE = "NONE"
    RECORD = "RECORD"
    BLOCK = "BLOCK"

    def __str__(self):
        return self.value


DEFAULT_VERSIONS = 3
DEFAULT_COMPRESSION = CompressionType.NONE
DEFAULT_IN_MEMORY = False
DEFAULT_BLOCKCACHE = False
DEFAULT_LENGTH = 2**31 - 1
DEFAULT_TTL = FOREVER
DEFAULT_BLOOMFILTER = False


def _bool_str(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class ColumnFamilyDescriptor:
    name: str
    max_versions: int = DEFAULT_VERSIONS
    compression: CompressionType = DEFAULT_COMPRESSION
    in_memory: bool = DEFAULT_IN_MEMORY
    block_cache: bool = DEFAULT_BLOCKCACHE
    max_cell_size: int = DEFAULT_LENGTH
    time_to_live: int = DEFAULT_TTL
    bloomfilter: bool = DEFAULT_BLOOMFILTER

    def __post_init__(self):
        self.compression = CompressionType(self.compression)
        if not self.name:
            raise ValueError("Column family name must not be empty.")
        if self.max_versions <= 0:
            raise ValueError(
                f"max_versions must be positive, got {self.max_versions}."
            )
        if self.max_cell_size <= 0:
            raise ValueError(
                f"max_cell_size must be positive, got {self.max_cell_size}."
            )

    def __str__(self):
        ttl = "FOREVER" if self.time_to_live == FOREVER else str(self.time_to_live)
        return (
            f"{{NAME => '{self.name}', "
            f"VERSIONS => '{self.max_versions}', "
            f"COMPRESSION => '{self.compression}', "
            f"IN_MEMORY => '{_bool_str(self.in_memory)}', "
            f"BLOCKCACHE => '{_bool_str(self.block_cache)}', "
            f"LENGTH => '{self.max_cell_size}', "
            f"TTL => '{ttl}', "
            f"BLOOMFILTER => '{_bool_str(self.bloomfilter)}'}}"
        )


@dataclass
class TableDescriptor:
    name: str
    families: List[ColumnFamilyDescriptor] = field(default_factory=list)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Table name must not be empty.")
        self.families = list(self.families)

    def add_family(self, family: ColumnFamilyDescriptor) -> None:
        self.families.append(family)

    def family(self, name: str) -> ColumnFamilyDescriptor:
        "Look up a family by its (normalized) name."
        for family in self.families:
            if family.name == name:
                return family
        raise KeyError(name)

    def __str__(self):
        families = ", ".join(str(family) for family in self.families)
        return f"{{NAME => '{self.name}', FAMILIES => [{families}]}}"
