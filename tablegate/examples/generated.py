from tablegate.adapters.memory import InMemoryAdmin
from tablegate.structures.schema import (
    ColumnFamilyDescriptor,
    CompressionType,
    TableDescriptor,
)

admin = InMemoryAdmin(
    [
        TableDescriptor(
            "orders",
            [
                ColumnFamilyDescriptor("details:"),
                ColumnFamilyDescriptor(
                    "history:",
                    max_versions=10,
                    compression=CompressionType.BLOCK,
                    time_to_live=86400,
                ),
            ],
        ),
        TableDescriptor("customers", [ColumnFamilyDescriptor("profile:")]),
    ],
    regions={"orders": [b"", b"m", b"t"]},
)
