"""Shared fixtures for auditstream tests."""

import shutil
import tempfile

import pytest

from auditstream.common.exceptions import RemoteNotFoundError
from auditstream.state.store import FileStateStore
from auditstream.streams.controller import StreamLifecycleController
from auditstream.streams.schemas import (
    BlobDestination,
    ObservedStreamState,
    StreamDeclaration,
    StreamSigningKey,
)


class FakeRemoteStreamClient:
    """In-memory remote service.
    
    Like the real service it accepts vendor config on write and never
    returns it on read.
    """
    
    def __init__(self, first_id: int = 101):
        self.streams = {}
        self.calls = []
        self.failures = {}
        self._next_id = first_id
    
    def fail(self, operation: str, error: Exception) -> None:
        """Make the next call to ``operation`` raise ``error``."""
        self.failures[operation] = error
    
    def _call(self, operation: str, *args) -> None:
        self.calls.append((operation,) + args)
        error = self.failures.pop(operation, None)
        if error is not None:
            raise error
    
    def _observed(self, scope, stream_id) -> ObservedStreamState:
        stream = self.streams[(scope, stream_id)]
        return ObservedStreamState.model_validate(
            {
                "id": stream_id,
                "enabled": stream["enabled"],
                "stream_type": stream["stream_type"],
                "stream_details": f"container {stream['vendor_specific']['container']}",
            }
        )
    
    def create_stream(self, scope, config):
        self._call("create_stream", scope)
        stream_id = self._next_id
        self._next_id += 1
        self.streams[(scope, stream_id)] = config.to_request_body()
        return self._observed(scope, stream_id)
    
    def get_stream(self, scope, stream_id):
        self._call("get_stream", scope, stream_id)
        if (scope, stream_id) not in self.streams:
            raise RemoteNotFoundError(f"stream {stream_id} not found")
        return self._observed(scope, stream_id)
    
    def update_stream(self, scope, stream_id, config):
        self._call("update_stream", scope, stream_id)
        if (scope, stream_id) not in self.streams:
            raise RemoteNotFoundError(f"stream {stream_id} not found")
        self.streams[(scope, stream_id)] = config.to_request_body()
    
    def delete_stream(self, scope, stream_id):
        self._call("delete_stream", scope, stream_id)
        if self.streams.pop((scope, stream_id), None) is None:
            raise RemoteNotFoundError(f"stream {stream_id} not found")
    
    def get_stream_signing_key(self, scope):
        self._call("get_stream_signing_key", scope)
        return StreamSigningKey(key_id="568250167242549743", key="MTIzNDU2Nzg5MA==")


@pytest.fixture
def fake_remote():
    return FakeRemoteStreamClient()


@pytest.fixture
def controller(fake_remote):
    return StreamLifecycleController(fake_remote)


@pytest.fixture
def blob_destination():
    return BlobDestination(container="c1", key_id="k1", encrypted_access_url="s1")


@pytest.fixture
def declaration(blob_destination):
    return StreamDeclaration(scope="octo-corp", enabled=True, vendor_config=blob_destination)


@pytest.fixture
def temp_state_dir():
    """Create a temporary directory for state files."""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def state_store(temp_state_dir):
    return FileStateStore(state_dir=temp_state_dir)
