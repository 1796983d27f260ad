"""State Store - Persistence for reconciled stream state.

Each managed resource is stored under its name. The stored document holds
the reconciled state including the trust-carried vendor config, which is
the only record of what was last written to the remote service.

Design principles:
- ABC interface so backends (file, S3) are interchangeable
- Thread-safe operations
- Atomic writes
"""

import json
import logging
import os
import re
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from auditstream.common.constants import StateConstants
from auditstream.common.exceptions import StateStoreError
from auditstream.streams.schemas import ReconciledStreamState

logger = logging.getLogger(__name__)

_RESOURCE_NAME = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")


def validate_resource_name(name: str) -> str:
    if not _RESOURCE_NAME.match(name or ""):
        raise StateStoreError(
            f"invalid resource name {name!r}", details={"resource": name}
        )
    return name


def encode_state(state: ReconciledStreamState) -> str:
    document = {
        "version": StateConstants.STATE_FORMAT_VERSION,
        "resource": state.to_state_dict(),
    }
    return json.dumps(document, indent=2, sort_keys=True)


def decode_state(raw: bytes, source: str) -> ReconciledStreamState:
    try:
        document = json.loads(raw.decode("utf-8"))
        version = document.get("version")
        if version != StateConstants.STATE_FORMAT_VERSION:
            raise StateStoreError(
                f"unsupported state version {version!r} in {source}",
                details={"source": source},
            )
        return ReconciledStreamState.from_state_dict(document["resource"])
    except (ValueError, KeyError, TypeError, AttributeError, ValidationError) as e:
        raise StateStoreError(
            f"corrupt state in {source}: {type(e).__name__}",
            details={"source": source},
        ) from e


class StateStore(ABC):
    """Abstract base class for reconciled state backends."""
    
    @abstractmethod
    def load(self, name: str) -> Optional[ReconciledStreamState]:
        """Load the state for a resource.
        
        Returns:
            The stored state, or None if the resource is not tracked
            
        Raises:
            StateStoreError: If the stored document is unreadable
        """
        pass
    
    @abstractmethod
    def save(self, name: str, state: ReconciledStreamState) -> None:
        """Persist the state for a resource, replacing any previous value."""
        pass
    
    @abstractmethod
    def delete(self, name: str) -> None:
        """Forget a resource. Deleting an untracked resource is a no-op."""
        pass
    
    @abstractmethod
    def list_names(self) -> List[str]:
        """List tracked resource names."""
        pass


class FileStateStore(StateStore):
    """File-based state store, one JSON document per resource."""
    
    def __init__(self, state_dir: Optional[str] = None):
        self.state_dir = Path(state_dir or StateConstants.DEFAULT_STATE_DIR)
        self.state_dir.mkdir(parents=True, exist_ok=True)
        self._lock = threading.RLock()
    
    def _path(self, name: str) -> Path:
        return self.state_dir / f"{validate_resource_name(name)}{StateConstants.STATE_FILE_SUFFIX}"
    
    def load(self, name: str) -> Optional[ReconciledStreamState]:
        path = self._path(name)
        with self._lock:
            if not path.exists():
                return None
            try:
                raw = path.read_bytes()
            except OSError as e:
                raise StateStoreError(f"could not read {path}: {e}") from e
        return decode_state(raw, str(path))
    
    def save(self, name: str, state: ReconciledStreamState) -> None:
        path = self._path(name)
        content = encode_state(state)
        with self._lock:
            fd, tmp_path = tempfile.mkstemp(dir=self.state_dir, prefix=f".{name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(content)
                # State holds the encrypted access URL
                os.chmod(tmp_path, 0o600)
                os.replace(tmp_path, path)
            except OSError as e:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise StateStoreError(f"could not write {path}: {e}") from e
        logger.debug(f"Saved state for {name} to {path}")
    
    def delete(self, name: str) -> None:
        path = self._path(name)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                return
            except OSError as e:
                raise StateStoreError(f"could not delete {path}: {e}") from e
        logger.debug(f"Deleted state for {name}")
    
    def list_names(self) -> List[str]:
        suffix = StateConstants.STATE_FILE_SUFFIX
        with self._lock:
            return sorted(p.name[: -len(suffix)] for p in self.state_dir.glob(f"*{suffix}"))
