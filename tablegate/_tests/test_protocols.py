import pytest

from ..adapters.memory import InMemoryAdmin, InMemoryTable
from ..server.protocols import (
    AdminClient,
    BlockLocalPathInfo,
    BlockRecoveryProtocol,
    TableHandle,
)


def test_in_memory_admin_satisfies_protocols():
    admin = InMemoryAdmin()
    assert isinstance(admin, AdminClient)
    assert isinstance(InMemoryTable([b""]), TableHandle)


def test_protocols_are_abstract():
    with pytest.raises(TypeError):
        AdminClient()
    with pytest.raises(TypeError):
        BlockRecoveryProtocol()


class TrustedBlockRecovery(BlockRecoveryProtocol):
    def __init__(self, trusted, blocks):
        self.trusted = trusted
        self.blocks = blocks

    def get_replica_visible_length(self, block):
        return self.blocks[block]

    def get_block_local_path_info(self, block, token):
        if not (self.trusted or token):
            raise PermissionError("Caller must be trusted or authenticate.")
        return BlockLocalPathInfo(
            block, f"/data/blk_{block}", f"/data/blk_{block}.meta"
        )


def test_block_recovery_protocol():
    recovery = TrustedBlockRecovery(trusted=False, blocks={7: 4096})
    assert recovery.version_id == 3
    assert recovery.get_replica_visible_length(7) == 4096
    info = recovery.get_block_local_path_info(7, b"token")
    assert info == BlockLocalPathInfo(7, "/data/blk_7", "/data/blk_7.meta")
    with pytest.raises(PermissionError):
        recovery.get_block_local_path_info(7, b"")
