import copy
import threading
from typing import Dict, Iterable, List, Optional

from ..server.protocols import AdminClient, TableHandle
from ..structures.schema import ColumnFamilyDescriptor, TableDescriptor


class NotFoundError(KeyError):
    # KeyError would quote the message.
    def __str__(self):
        return str(self.args[0])


class TableNotFoundError(NotFoundError):
    pass


class ColumnFamilyNotFoundError(NotFoundError):
    pass


class TableExistsError(ValueError):
    pass


class TableNotDisabledError(RuntimeError):
    pass


class InMemoryTable(TableHandle):
    def __init__(self, start_keys: Iterable[bytes]):
        self._start_keys = list(start_keys)

    def start_keys_of_regions(self) -> List[bytes]:
        return list(self._start_keys)


class InMemoryAdmin(AdminClient):
    """
    Administer tables held in a dictionary.

    This is useful for demos and tests. It follows the usual lifecycle rules:
    a table must be disabled before it is deleted, and only existing column
    families may be modified.

    Parameters
    ----------
    tables : list, optional
        Descriptors (or dicts accepted by TableDescriptor) to start with.
    regions : dict, optional
        Map table names to the start keys of their regions. A table not
        listed here has a single region, whose start key is empty.
    """

    def __init__(
        self,
        tables: Optional[Iterable] = None,
        regions: Optional[Dict[str, Iterable]] = None,
    ):
        self._lock = threading.Lock()
        self._tables: Dict[str, TableDescriptor] = {}
        self._enabled: Dict[str, bool] = {}
        self._regions: Dict[str, List[bytes]] = {}
        for table in tables or []:
            self.create_table(_as_descriptor(table))
        for name, start_keys in (regions or {}).items():
            self._check_exists(name)
            self._regions[name] = [_as_bytes(key) for key in start_keys]

    def __repr__(self):
        return f"<{type(self).__name__} {sorted(self._tables)!r}>"

    def _check_exists(self, name):
        if name not in self._tables:
            raise TableNotFoundError(f"Table {name!r} does not exist.")

    def is_enabled(self, name: str) -> bool:
        self._check_exists(name)
        return self._enabled[name]

    def list_table_descriptors(self) -> List[TableDescriptor]:
        with self._lock:
            # Hand out copies so callers cannot mutate our state.
            return [copy.deepcopy(table) for table in self._tables.values()]

    def create_table(self, descriptor: TableDescriptor) -> None:
        with self._lock:
            if descriptor.name in self._tables:
                raise TableExistsError(f"Table {descriptor.name!r} already exists.")
            self._tables[descriptor.name] = copy.deepcopy(descriptor)
            self._enabled[descriptor.name] = True
            self._regions[descriptor.name] = [b""]

    def enable_table(self, name: str) -> None:
        with self._lock:
            self._check_exists(name)
            self._enabled[name] = True

    def disable_table(self, name: str) -> None:
        with self._lock:
            self._check_exists(name)
            self._enabled[name] = False

    def delete_table(self, name: str) -> None:
        with self._lock:
            self._check_exists(name)
            if self._enabled[name]:
                raise TableNotDisabledError(
                    f"Table {name!r} must be disabled before it is deleted."
                )
            del self._tables[name]
            del self._enabled[name]
            del self._regions[name]

    def modify_column_family(
        self, table_name: str, family_name: str, descriptor: ColumnFamilyDescriptor
    ) -> None:
        with self._lock:
            self._check_exists(table_name)
            families = self._tables[table_name].families
            for i, family in enumerate(families):
                if family.name == family_name:
                    families[i] = copy.deepcopy(descriptor)
                    return
            raise ColumnFamilyNotFoundError(
                f"Column family {family_name!r} does not exist in table {table_name!r}."
            )

    def get_table(self, name: str) -> InMemoryTable:
        with self._lock:
            self._check_exists(name)
            return InMemoryTable(self._regions[name])


def _as_descriptor(table):
    if isinstance(table, TableDescriptor):
        return table
    families = [
        family
        if isinstance(family, ColumnFamilyDescriptor)
        else ColumnFamilyDescriptor(**family)
        for family in table.get("families", [])
    ]
    return TableDescriptor(table["name"], families)


def _as_bytes(key):
    if isinstance(key, str):
        return key.encode()
    return bytes(key)
