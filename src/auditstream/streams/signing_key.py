"""Stream signing key lookup.

Read-only and always refetched; vendor secrets are encrypted with this key
before they are declared.
"""

from typing import TYPE_CHECKING

from auditstream.common.exceptions import InvalidConfigurationError
from auditstream.streams.schemas import StreamSigningKey

if TYPE_CHECKING:
    from auditstream.remote.base import RemoteStreamClient


def lookup_signing_key(client: "RemoteStreamClient", scope: str) -> StreamSigningKey:
    """Fetch the current stream signing key for an enterprise."""
    if not scope:
        raise InvalidConfigurationError("scope is required")
    return client.get_stream_signing_key(scope)
