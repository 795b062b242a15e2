from archgraph.store.snapshot import SnapshotStore, OperationResult, SNAPSHOT_KEY
from archgraph.store.storage import LocalStorage, MemoryStorage, FileStorage

__all__ = [
    "SnapshotStore",
    "OperationResult",
    "SNAPSHOT_KEY",
    "LocalStorage",
    "MemoryStorage",
    "FileStorage",
]
