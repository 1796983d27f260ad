"""auditstream - Declarative management of enterprise audit log streams."""

__version__ = "0.1.0"

from auditstream.streams import (
    StreamIdentity,
    StreamDeclaration,
    BlobDestination,
    ReconciledStreamState,
    StreamLifecycleController,
)

__all__ = [
    "StreamIdentity",
    "StreamDeclaration",
    "BlobDestination",
    "ReconciledStreamState",
    "StreamLifecycleController",
]
