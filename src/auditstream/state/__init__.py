"""Reconciled state persistence.

Components:
- StateStore: Abstract base class for storage backends
- FileStateStore: One JSON file per resource
- S3StateStore: One S3 object per resource
- create_state_store: Factory driven by configuration
"""

from auditstream.state.store import StateStore, FileStateStore
from auditstream.state.config import create_state_store

__all__ = [
    "StateStore",
    "FileStateStore",
    "create_state_store",
]
