"""Remote stream service contract.

The lifecycle controller receives an implementation of this protocol as a
constructor argument. Implementations raise RemoteNotFoundError when a
stream does not exist and RemoteFailureError for every other failure.
"""

from typing import Protocol

from auditstream.streams.schemas import (
    ObservedStreamState,
    StreamConfigPayload,
    StreamSigningKey,
)


class RemoteStreamClient(Protocol):
    """Operations offered by the remote audit log streaming service."""
    
    def create_stream(self, scope: str, config: StreamConfigPayload) -> ObservedStreamState:
        """Create a stream and return it with its assigned id."""
        ...
    
    def get_stream(self, scope: str, stream_id: int) -> ObservedStreamState:
        """Fetch the observable fields of a stream."""
        ...
    
    def update_stream(self, scope: str, stream_id: int, config: StreamConfigPayload) -> None:
        """Replace a stream's whole configuration."""
        ...
    
    def delete_stream(self, scope: str, stream_id: int) -> None:
        """Delete a stream."""
        ...
    
    def get_stream_signing_key(self, scope: str) -> StreamSigningKey:
        """Fetch the public key used to encrypt vendor secrets."""
        ...
