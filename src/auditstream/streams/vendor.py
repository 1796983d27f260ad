"""Vendor config builder.

Turns a declaration's vendor config variant into the create/update payload
for the remote service. Pure; performs no I/O.
"""

from typing import Optional

from auditstream.streams.schemas import StreamConfigPayload, StreamDeclaration


def build_stream_config(
    declaration: StreamDeclaration,
    enabled: bool,
) -> Optional[StreamConfigPayload]:
    """Build the stream config payload for a declaration.
    
    Args:
        declaration: The declared stream
        enabled: Effective enabled flag (already defaulted)
        
    Returns:
        The populated payload, or None if no variant is declared
    """
    variant = declaration.vendor_config
    if variant is None:
        return None
    return StreamConfigPayload(
        enabled=enabled,
        stream_type=variant.STREAM_TYPE,
        vendor_config=variant,
    )
