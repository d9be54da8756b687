from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence

from ..structures.schema import ColumnFamilyDescriptor, TableDescriptor


class TableHandle(ABC):
    @abstractmethod
    def start_keys_of_regions(self) -> Sequence[bytes]:
        ...


class AdminClient(ABC):
    """
    The table-administration client the server delegates to.

    Methods may be plain functions or coroutines. Plain functions are run
    in a worker thread. Any exception raised is reported to the HTTP client
    as a 500 carrying the exception's message.
    """

    @abstractmethod
    def list_table_descriptors(self) -> Sequence[TableDescriptor]:
        ...

    @abstractmethod
    def create_table(self, descriptor: TableDescriptor) -> None:
        ...

    @abstractmethod
    def enable_table(self, name: str) -> None:
        ...

    @abstractmethod
    def disable_table(self, name: str) -> None:
        ...

    @abstractmethod
    def delete_table(self, name: str) -> None:
        ...

    @abstractmethod
    def modify_column_family(
        self, table_name: str, family_name: str, descriptor: ColumnFamilyDescriptor
    ) -> None:
        ...

    @abstractmethod
    def get_table(self, name: str) -> TableHandle:
        ...


@dataclass
class BlockLocalPathInfo:
    """Local file paths backing one block on a storage node."""

    block: int
    data_path: str
    metadata_path: str


class BlockRecoveryProtocol(ABC):
    """
    Block-recovery RPC a host process may expose next to this server.

    Only the interface is declared here. Callers must either be configured
    as trusted local clients or have authenticated.
    """

    version_id = 3

    @abstractmethod
    def get_replica_visible_length(self, block: int) -> int:
        ...

    @abstractmethod
    def get_block_local_path_info(self, block: int, token: bytes) -> BlockLocalPathInfo:
        ...
