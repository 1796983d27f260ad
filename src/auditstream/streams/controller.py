"""Stream Lifecycle Controller - create/read/update/delete with reconciliation.

The remote service returns only a subset of what it accepts. Reads refresh
scope, enabled flag, stream id and summary; the vendor config is never
returned, so it is carried forward verbatim from whatever the caller last
wrote successfully.

The controller holds no state between calls. Each call performs exactly one
attempt per remote operation and blocks on the round trip.
"""

import logging
from typing import TYPE_CHECKING, Optional, Union

from auditstream.common.exceptions import InvalidConfigurationError, RemoteNotFoundError
from auditstream.streams.identity import StreamIdentity
from auditstream.streams.schemas import (
    ReconciledStreamState,
    StreamConfigPayload,
    StreamDeclaration,
    VendorConfig,
)
from auditstream.streams.vendor import build_stream_config

if TYPE_CHECKING:
    from auditstream.remote.base import RemoteStreamClient

logger = logging.getLogger(__name__)

IdentityLike = Union[str, StreamIdentity]


class StreamLifecycleController:
    """Drives one audit log stream against the remote service."""
    
    def __init__(self, client: "RemoteStreamClient"):
        self.client = client
    
    def _require_config(self, declaration: StreamDeclaration) -> StreamConfigPayload:
        # enabled is already defaulted to True by the declaration model
        config = build_stream_config(declaration, declaration.enabled)
        if config is None:
            raise InvalidConfigurationError(
                "at least one vendor config required",
                details={"scope": declaration.scope, "one_of": ["vendor_config"]},
            )
        return config
    
    def create(self, declaration: StreamDeclaration) -> StreamIdentity:
        """Create a stream and return its durable identity.
        
        Args:
            declaration: Desired stream configuration
            
        Returns:
            The identity composed from the scope and the assigned stream id
            
        Raises:
            InvalidConfigurationError: If no vendor config is declared
            RemoteError: If the remote call fails; nothing is produced
        """
        config = self._require_config(declaration)
        
        stream = self.client.create_stream(declaration.scope, config)
        identity = StreamIdentity(scope=declaration.scope, stream_id=stream.stream_id)
        
        logger.info(
            f"Created audit log stream {stream.stream_id} in {declaration.scope} "
            f"(type={config.stream_type}, enabled={config.enabled})"
        )
        return identity
    
    def read(
        self,
        identity: IdentityLike,
        vendor_config: Optional[VendorConfig] = None,
    ) -> Optional[ReconciledStreamState]:
        """Fetch a stream and reconcile it with the carried vendor config.
        
        Args:
            identity: Durable identity of the stream
            vendor_config: Vendor config last written successfully, carried
                through unchanged. None on import.
            
        Returns:
            The reconciled state, or None when the stream no longer exists
            remotely. Callers must forget the identity in that case.
            
        Raises:
            MalformedIdentityError: If the identity is corrupt
            RemoteFailureError: On any remote failure other than not-found
        """
        identity = StreamIdentity.parse(identity)
        
        try:
            observed = self.client.get_stream(identity.scope, identity.stream_id)
        except RemoteNotFoundError:
            logger.info(
                f"Removing audit log stream {identity.stream_id} from state "
                f"because it no longer exists in {identity.scope}"
            )
            return None
        
        return ReconciledStreamState(
            scope=identity.scope,
            observed=observed,
            vendor_config=vendor_config,
        )
    
    def update(
        self,
        identity: IdentityLike,
        declaration: StreamDeclaration,
    ) -> Optional[ReconciledStreamState]:
        """Replace a stream's whole config, then read it back.
        
        Scope is part of the identity and is never changed here; a scope
        change is a destroy-then-create decision for the caller.
        
        Returns:
            The reconciled state carrying the newly written vendor config,
            or None if the stream vanished between the write and the read.
        """
        identity = StreamIdentity.parse(identity)
        config = self._require_config(declaration)
        if declaration.scope != identity.scope:
            raise InvalidConfigurationError(
                "scope cannot be changed in place; the stream must be replaced",
                details={"current": identity.scope, "declared": declaration.scope},
            )
        
        self.client.update_stream(identity.scope, identity.stream_id, config)
        logger.info(
            f"Updated audit log stream {identity.stream_id} in {identity.scope} "
            f"(enabled={config.enabled})"
        )
        
        return self.read(identity, vendor_config=config.vendor_config)
    
    def delete(self, identity: IdentityLike) -> None:
        """Delete a stream. Remote errors, including not-found, propagate."""
        identity = StreamIdentity.parse(identity)
        self.client.delete_stream(identity.scope, identity.stream_id)
        logger.info(f"Deleted audit log stream {identity.stream_id} in {identity.scope}")
