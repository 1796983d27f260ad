"""Stream schemas - type definitions for declared, observed and reconciled state.

The remote service accepts vendor configuration on write but never returns
it on read. Observed fields and trust-carried fields are therefore kept in
separate models and only combined in ReconciledStreamState.
"""

from datetime import datetime
from typing import Any, ClassVar, Dict, Literal, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)

from auditstream.common.constants import IdentityConstants, VendorConstants
from auditstream.common.exceptions import InvalidConfigurationError
from auditstream.streams.identity import StreamIdentity


class BlobDestination(BaseModel):
    """Azure Blob Storage delivery destination.
    
    All three fields are required together. The access URL is encrypted
    with the enterprise's stream signing key and is never echoed back.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")
    
    STREAM_TYPE: ClassVar[str] = VendorConstants.AZURE_BLOB_STREAM_TYPE
    
    vendor: Literal["azure_blob"] = Field(
        default=VendorConstants.AZURE_BLOB_TAG,
        description="Variant discriminant"
    )
    container: str = Field(
        ...,
        min_length=1,
        description="The name of the Azure Blob Storage container"
    )
    key_id: str = Field(
        ...,
        min_length=1,
        description="The ID of the public key used to encrypt the SAS URL"
    )
    encrypted_access_url: SecretStr = Field(
        ...,
        description="The encrypted SAS URL for the container"
    )
    
    @field_validator("encrypted_access_url")
    @classmethod
    def _secret_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("encrypted_access_url must not be empty")
        return value
    
    def vendor_specific(self) -> Dict[str, str]:
        """Wire shape of this variant's payload (reveals the secret)."""
        return {
            "key_id": self.key_id,
            "encrypted_sas_url": self.encrypted_access_url.get_secret_value(),
            "container": self.container,
        }
    
    def to_state_dict(self) -> Dict[str, str]:
        """Stored shape of this variant (reveals the secret)."""
        return {
            "vendor": self.vendor,
            "container": self.container,
            "key_id": self.key_id,
            "encrypted_access_url": self.encrypted_access_url.get_secret_value(),
        }


# New variants join a union discriminated on ``vendor``; existing variants
# keep their tag and payload.
VendorConfig = BlobDestination


class StreamDeclaration(BaseModel):
    """Desired state of one audit log stream."""
    model_config = ConfigDict(frozen=True, extra="forbid")
    
    scope: str = Field(
        ...,
        min_length=1,
        description="Enterprise slug. Changing it forces a new stream."
    )
    enabled: bool = Field(
        default=True,
        description="Whether the audit log stream is enabled"
    )
    vendor_config: Optional[VendorConfig] = Field(
        default=None,
        description="Destination-specific delivery configuration"
    )
    
    @field_validator("scope")
    @classmethod
    def _scope_has_no_separator(cls, value: str) -> str:
        if IdentityConstants.SEPARATOR in value:
            raise ValueError(
                f"scope must not contain {IdentityConstants.SEPARATOR!r}"
            )
        return value
    
    @field_validator("enabled", mode="before")
    @classmethod
    def _default_enabled(cls, value: Any) -> Any:
        return True if value is None else value
    
    @classmethod
    def from_config(cls, data: Mapping[str, Any]) -> "StreamDeclaration":
        """Validate a declared configuration block.
        
        Enforces that at least one vendor config variant is present.
        
        Raises:
            InvalidConfigurationError: If the block does not validate.
        """
        try:
            declaration = cls.model_validate(dict(data))
        except ValidationError as e:
            errors = [
                {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                for err in e.errors(include_input=False)
            ]
            raise InvalidConfigurationError(
                f"invalid stream declaration: {len(errors)} validation error(s)",
                details={"errors": errors},
            ) from None
        if declaration.vendor_config is None:
            raise InvalidConfigurationError(
                "at least one vendor config required",
                details={"one_of": ["vendor_config"]},
            )
        return declaration


class StreamConfigPayload(BaseModel):
    """Create/update request built from a declaration."""
    model_config = ConfigDict(frozen=True)
    
    enabled: bool
    stream_type: str
    vendor_config: VendorConfig
    
    def to_request_body(self) -> Dict[str, Any]:
        """Render the JSON request body sent to the remote service."""
        return {
            "enabled": self.enabled,
            "stream_type": self.stream_type,
            "vendor_specific": self.vendor_config.vendor_specific(),
        }


class ObservedStreamState(BaseModel):
    """What the remote service reports for a stream.
    
    Contains no vendor config fields; the remote service never returns them.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")
    
    stream_id: int = Field(..., alias="id", gt=0, le=IdentityConstants.MAX_STREAM_ID)
    enabled: bool
    stream_type: Optional[str] = None
    summary: str = Field(default="", alias="stream_details")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    
    @field_validator("summary", mode="before")
    @classmethod
    def _summary_not_null(cls, value: Any) -> Any:
        return "" if value is None else value


class ReconciledStreamState(BaseModel):
    """Persisted source of truth after a read.
    
    ``scope`` and ``observed`` come from the remote read. ``vendor_config``
    is carried forward from the last successful write and is never refreshed
    from the remote service.
    """
    model_config = ConfigDict(frozen=True)
    
    scope: str
    observed: ObservedStreamState
    vendor_config: Optional[VendorConfig] = None
    
    @property
    def enabled(self) -> bool:
        return self.observed.enabled
    
    @property
    def stream_id(self) -> int:
        return self.observed.stream_id
    
    @property
    def summary(self) -> str:
        return self.observed.summary
    
    @property
    def identity(self) -> StreamIdentity:
        return StreamIdentity(scope=self.scope, stream_id=self.stream_id)
    
    def to_state_dict(self) -> Dict[str, Any]:
        """Serialize for a state store, including the carried secret."""
        return {
            "id": str(self.identity),
            "scope": self.scope,
            "observed": self.observed.model_dump(mode="json"),
            "vendor_config": (
                self.vendor_config.to_state_dict() if self.vendor_config else None
            ),
        }
    
    @classmethod
    def from_state_dict(cls, data: Mapping[str, Any]) -> "ReconciledStreamState":
        return cls.model_validate(
            {
                "scope": data["scope"],
                "observed": data["observed"],
                "vendor_config": data.get("vendor_config"),
            }
        )


class StreamSigningKey(BaseModel):
    """Public key used to encrypt vendor secrets for an enterprise."""
    model_config = ConfigDict(frozen=True, extra="ignore")
    
    key_id: str
    key: str
