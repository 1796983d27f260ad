"""Identity codec for audit log streams.

A stream's durable key is "<scope>:<stream_id>", where scope is the
enterprise slug and stream_id is the numeric id assigned by the remote
service.
"""

from dataclasses import dataclass
from typing import Tuple, Union

from auditstream.common.constants import IdentityConstants
from auditstream.common.exceptions import MalformedIdentityError

SEPARATOR = IdentityConstants.SEPARATOR
MAX_STREAM_ID = IdentityConstants.MAX_STREAM_ID


def build_two_part_id(left: str, right: str) -> str:
    """Join two id parts with the fixed separator."""
    return f"{left}{SEPARATOR}{right}"


def parse_two_part_id(identity: str, left_name: str, right_name: str) -> Tuple[str, str]:
    """Split an identity into exactly two non-empty parts.
    
    Raises:
        MalformedIdentityError: If the separator is missing, repeated, or
            either part is empty.
    """
    parts = identity.split(SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise MalformedIdentityError(
            f"unexpected ID format ({identity!r}); expected {left_name}{SEPARATOR}{right_name}",
            identity=identity,
        )
    return parts[0], parts[1]


def compose(scope: str, stream_id: int) -> str:
    """Encode a scope and stream id as a durable identity string."""
    if not isinstance(scope, str) or not scope:
        raise MalformedIdentityError("scope must be a non-empty string")
    if SEPARATOR in scope:
        raise MalformedIdentityError(
            f"scope {scope!r} must not contain {SEPARATOR!r}"
        )
    if (
        isinstance(stream_id, bool)
        or not isinstance(stream_id, int)
        or not 0 < stream_id <= MAX_STREAM_ID
    ):
        raise MalformedIdentityError(
            f"stream_id must be a positive 64-bit integer, got {stream_id!r}"
        )
    return build_two_part_id(scope, str(stream_id))


def decompose(identity: str) -> Tuple[str, int]:
    """Decode a durable identity string into (scope, stream_id).
    
    Raises:
        MalformedIdentityError: If the identity is corrupt.
    """
    scope, raw_stream_id = parse_two_part_id(
        identity, IdentityConstants.SCOPE_FIELD, IdentityConstants.STREAM_ID_FIELD
    )
    # int() also accepts "+5", " 5" and "5_0"; durable keys are plain digits
    if not (raw_stream_id.isascii() and raw_stream_id.isdigit()):
        raise MalformedIdentityError(
            f"invalid stream_id {raw_stream_id!r}", identity=identity
        )
    stream_id = int(raw_stream_id)
    if not 0 < stream_id <= MAX_STREAM_ID:
        raise MalformedIdentityError(
            f"invalid stream_id {raw_stream_id!r}: must be a positive 64-bit integer",
            identity=identity,
        )
    return scope, stream_id


@dataclass(frozen=True)
class StreamIdentity:
    """Composite key of a stream resource. Immutable once assigned."""
    
    scope: str
    stream_id: int
    
    def __post_init__(self):
        # Validates both parts.
        compose(self.scope, self.stream_id)
    
    @classmethod
    def parse(cls, identity: Union[str, "StreamIdentity"]) -> "StreamIdentity":
        if isinstance(identity, StreamIdentity):
            return identity
        if not isinstance(identity, str):
            raise MalformedIdentityError(
                f"identity must be a string, got {type(identity).__name__}"
            )
        scope, stream_id = decompose(identity)
        return cls(scope=scope, stream_id=stream_id)
    
    def __str__(self) -> str:
        return compose(self.scope, self.stream_id)
