import pytest
from starlette.testclient import TestClient

from ..adapters.memory import InMemoryAdmin
from ..server.app import build_app
from ..server.protocols import AdminClient, TableHandle
from ..server.settings import get_settings
from ..structures.schema import ColumnFamilyDescriptor, TableDescriptor


@pytest.fixture(autouse=True)
def reset_settings():
    """
    Reset the FastAPI Settings.

    Fast API uses a global singleton for Settings.  It is difficult to get
    around this, so our best option is to reset it.
    """
    get_settings.cache_clear()
    yield


class RecordingTable(TableHandle):
    def __init__(self, start_keys):
        self.start_keys = start_keys

    def start_keys_of_regions(self):
        return self.start_keys


class RecordingAdmin(AdminClient):
    """
    Record every call, and fail on demand.

    Set failures[method_name] to an exception to have that method raise it.
    """

    def __init__(self, tables=(), start_keys=(b"",)):
        self.tables = list(tables)
        self.start_keys = list(start_keys)
        self.calls = []
        self.failures = {}

    def _record(self, method, *args):
        self.calls.append((method, *args))
        if method in self.failures:
            raise self.failures[method]

    def list_table_descriptors(self):
        self._record("list_table_descriptors")
        return list(self.tables)

    def create_table(self, descriptor):
        self._record("create_table", descriptor)

    def enable_table(self, name):
        self._record("enable_table", name)

    def disable_table(self, name):
        self._record("disable_table", name)

    def delete_table(self, name):
        self._record("delete_table", name)

    def modify_column_family(self, table_name, family_name, descriptor):
        self._record("modify_column_family", table_name, family_name, descriptor)

    def get_table(self, name):
        self._record("get_table", name)
        return RecordingTable(self.start_keys)


@pytest.fixture
def orders():
    return TableDescriptor(
        "orders",
        [
            ColumnFamilyDescriptor("details:"),
            ColumnFamilyDescriptor("history:", max_versions=10, time_to_live=86400),
        ],
    )


@pytest.fixture
def recording_admin(orders):
    return RecordingAdmin(tables=[orders], start_keys=[b"", b"m", b"t"])


@pytest.fixture
def client(recording_admin):
    with TestClient(build_app(recording_admin)) as client:
        yield client


@pytest.fixture
def memory_client(orders):
    admin = InMemoryAdmin([orders])
    with TestClient(build_app(admin)) as client:
        client.admin = admin
        yield client
