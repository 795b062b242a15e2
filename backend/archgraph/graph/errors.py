class ArchGraphError(Exception):
    """Base class for errors raised by the architecture graph engine."""


class RootDeletionError(ArchGraphError):
    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Cannot delete the root node '{node_id}'")


class FocusNotFoundError(ArchGraphError):
    """Raised on a focus miss when navigation runs in strict mode."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node '{node_id}' is not part of the architecture")


class ExternalServiceError(ArchGraphError):
    """The generation / analysis / documentation service failed."""


class PersistenceError(ArchGraphError):
    """Reading or writing the client-local snapshot failed."""
