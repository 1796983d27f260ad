"""Unit tests for the stream lifecycle controller.

Covers the reconciliation rules: vendor config is carried across reads,
not-found reads mean absence, and declarations without a vendor config
never reach the remote service.
"""

import pytest
from unittest.mock import MagicMock

from auditstream.common.exceptions import (
    InvalidConfigurationError,
    MalformedIdentityError,
    RemoteFailureError,
    RemoteNotFoundError,
)
from auditstream.streams.controller import StreamLifecycleController
from auditstream.streams.identity import StreamIdentity
from auditstream.streams.schemas import BlobDestination, StreamDeclaration
from auditstream.streams.signing_key import lookup_signing_key


class TestCreate:
    """Test Create."""
    
    def test_returns_composed_identity(self, controller, declaration):
        identity = controller.create(declaration)
        
        assert identity == StreamIdentity(scope="octo-corp", stream_id=101)
        assert str(identity) == "octo-corp:101"
    
    def test_sends_full_config(self, controller, fake_remote, declaration):
        controller.create(declaration)
        
        body = fake_remote.streams[("octo-corp", 101)]
        assert body["enabled"] is True
        assert body["vendor_specific"]["encrypted_sas_url"] == "s1"
    
    def test_omitted_enabled_sends_true(self, controller, fake_remote, blob_destination):
        declaration = StreamDeclaration.from_config({
            "scope": "octo-corp",
            "vendor_config": blob_destination.to_state_dict(),
        })
        controller.create(declaration)
        
        assert fake_remote.streams[("octo-corp", 101)]["enabled"] is True
    
    def test_missing_variant_rejected_without_remote_call(self, controller, fake_remote):
        with pytest.raises(InvalidConfigurationError, match="at least one vendor config"):
            controller.create(StreamDeclaration(scope="octo-corp"))
        
        assert fake_remote.calls == []
    
    def test_remote_failure_produces_nothing(self, controller, fake_remote, declaration):
        fake_remote.fail("create_stream", RemoteFailureError("boom", status_code=500))
        
        with pytest.raises(RemoteFailureError):
            controller.create(declaration)
        
        assert fake_remote.streams == {}


class TestRead:
    """Test Read and the reconciliation rule."""
    
    def test_vendor_config_persists_across_read(self, controller, declaration):
        identity = controller.create(declaration)
        
        state = controller.read(identity, vendor_config=declaration.vendor_config)
        
        assert state.vendor_config == BlobDestination(
            container="c1", key_id="k1", encrypted_access_url="s1"
        )
        assert state.scope == "octo-corp"
        assert state.stream_id == 101
        assert state.enabled is True
        assert state.summary == "container c1"
    
    def test_read_never_synthesizes_vendor_config(self, controller, declaration):
        identity = controller.create(declaration)
        
        state = controller.read(identity)
        
        assert state.vendor_config is None
    
    def test_accepts_identity_string(self, controller, declaration):
        controller.create(declaration)
        
        state = controller.read("octo-corp:101")
        
        assert state.identity == StreamIdentity(scope="octo-corp", stream_id=101)
    
    def test_not_found_returns_none(self, controller, fake_remote, declaration):
        identity = controller.create(declaration)
        fake_remote.streams.clear()
        
        assert controller.read(identity, vendor_config=declaration.vendor_config) is None
    
    def test_other_failures_propagate_unchanged(self, controller, fake_remote, declaration):
        identity = controller.create(declaration)
        error = RemoteFailureError("server error", status_code=502)
        fake_remote.fail("get_stream", error)
        
        with pytest.raises(RemoteFailureError) as exc_info:
            controller.read(identity)
        
        assert exc_info.value is error
    
    def test_single_attempt_per_read(self, controller, fake_remote, declaration):
        identity = controller.create(declaration)
        fake_remote.fail("get_stream", RemoteFailureError("flaky", status_code=503))
        
        with pytest.raises(RemoteFailureError):
            controller.read(identity)
        
        assert [c[0] for c in fake_remote.calls].count("get_stream") == 1
    
    def test_malformed_identity_is_fatal(self, controller, fake_remote):
        with pytest.raises(MalformedIdentityError):
            controller.read("octo-corp")
        
        assert fake_remote.calls == []
    
    def test_every_read_fetches(self, controller, fake_remote, declaration):
        identity = controller.create(declaration)
        controller.read(identity)
        controller.read(identity)
        
        assert [c[0] for c in fake_remote.calls].count("get_stream") == 2


class TestUpdate:
    """Test Update."""
    
    def test_disable_flips_only_enabled(self, controller, declaration, blob_destination):
        identity = controller.create(declaration)
        disabled = StreamDeclaration(
            scope="octo-corp", enabled=False, vendor_config=blob_destination
        )
        
        state = controller.update(identity, disabled)
        
        assert state.enabled is False
        assert state.scope == "octo-corp"
        assert state.stream_id == identity.stream_id
        assert state.vendor_config == blob_destination
    
    def test_replaces_whole_config(self, controller, fake_remote, declaration):
        identity = controller.create(declaration)
        rotated = BlobDestination(container="c2", key_id="k2", encrypted_access_url="s2")
        
        state = controller.update(
            identity, StreamDeclaration(scope="octo-corp", vendor_config=rotated)
        )
        
        assert fake_remote.streams[("octo-corp", 101)]["vendor_specific"] == {
            "key_id": "k2",
            "encrypted_sas_url": "s2",
            "container": "c2",
        }
        assert state.vendor_config == rotated
    
    def test_missing_variant_rejected_without_remote_call(self, controller, fake_remote):
        with pytest.raises(InvalidConfigurationError):
            controller.update("octo-corp:101", StreamDeclaration(scope="octo-corp"))
        
        assert fake_remote.calls == []
    
    def test_scope_change_rejected(self, controller, fake_remote, declaration, blob_destination):
        identity = controller.create(declaration)
        moved = StreamDeclaration(scope="other-corp", vendor_config=blob_destination)
        
        with pytest.raises(InvalidConfigurationError, match="replaced"):
            controller.update(identity, moved)
        
        assert ("update_stream", "octo-corp", 101) not in fake_remote.calls
    
    def test_remote_failure_propagates(self, controller, fake_remote, declaration):
        identity = controller.create(declaration)
        fake_remote.fail("update_stream", RemoteFailureError("denied", status_code=403))
        
        with pytest.raises(RemoteFailureError):
            controller.update(identity, declaration)


class TestDelete:
    """Test Delete."""
    
    def test_deletes_remote_stream(self, controller, fake_remote, declaration):
        identity = controller.create(declaration)
        
        controller.delete(identity)
        
        assert fake_remote.streams == {}
        assert controller.read(identity) is None
    
    def test_surfaces_not_found(self, controller):
        with pytest.raises(RemoteNotFoundError):
            controller.delete("octo-corp:999")
    
    def test_malformed_identity(self, controller):
        with pytest.raises(MalformedIdentityError):
            controller.delete("octo-corp:x")


class TestClientInjection:
    """Test that the controller only talks to the client it was given."""
    
    def test_uses_injected_client(self, declaration):
        client = MagicMock()
        client.create_stream.return_value.stream_id = 77
        
        identity = StreamLifecycleController(client).create(declaration)
        
        client.create_stream.assert_called_once()
        scope, payload = client.create_stream.call_args[0]
        assert scope == "octo-corp"
        assert payload.vendor_config == declaration.vendor_config
        assert identity.stream_id == 77


class TestSigningKey:
    """Test signing key lookup."""
    
    def test_fetches_key_for_scope(self, fake_remote):
        key = lookup_signing_key(fake_remote, "octo-corp")
        
        assert key.key_id == "568250167242549743"
        assert fake_remote.calls == [("get_stream_signing_key", "octo-corp")]
    
    def test_empty_scope_rejected(self, fake_remote):
        with pytest.raises(InvalidConfigurationError):
            lookup_signing_key(fake_remote, "")
        assert fake_remote.calls == []
