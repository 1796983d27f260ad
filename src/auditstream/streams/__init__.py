"""Audit log stream model, identity codec and lifecycle controller."""

from auditstream.streams.identity import StreamIdentity, compose, decompose
from auditstream.streams.schemas import (
    BlobDestination,
    VendorConfig,
    StreamDeclaration,
    StreamConfigPayload,
    ObservedStreamState,
    ReconciledStreamState,
    StreamSigningKey,
)
from auditstream.streams.vendor import build_stream_config
from auditstream.streams.controller import StreamLifecycleController
from auditstream.streams.signing_key import lookup_signing_key

__all__ = [
    "StreamIdentity",
    "compose",
    "decompose",
    "BlobDestination",
    "VendorConfig",
    "StreamDeclaration",
    "StreamConfigPayload",
    "ObservedStreamState",
    "ReconciledStreamState",
    "StreamSigningKey",
    "build_stream_config",
    "StreamLifecycleController",
    "lookup_signing_key",
]
