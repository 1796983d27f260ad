"""S3-backed state store for reconciled stream state."""

import logging
import os
from typing import List, Optional

import boto3
from botocore.exceptions import ClientError

from auditstream.common.constants import StateConstants
from auditstream.common.exceptions import StateStoreError
from auditstream.state.store import (
    StateStore,
    decode_state,
    encode_state,
    validate_resource_name,
)
from auditstream.streams.schemas import ReconciledStreamState

logger = logging.getLogger(__name__)


class S3StateStore(StateStore):
    """S3-backed state store, one JSON object per resource."""
    
    DEFAULT_REGION = "us-east-1"
    
    def __init__(self, bucket_name: Optional[str] = None,
                 prefix: str = StateConstants.DEFAULT_S3_PREFIX,
                 region: Optional[str] = None, aws_profile: Optional[str] = None):
        self.bucket_name = bucket_name or os.environ.get("AUDITSTREAM_STATE_S3_BUCKET")
        if not self.bucket_name:
            raise ValueError(
                "S3 bucket name required. Set AUDITSTREAM_STATE_S3_BUCKET or pass bucket_name."
            )
        
        self.prefix = prefix
        self.region = region or os.environ.get("AWS_DEFAULT_REGION", self.DEFAULT_REGION)
        
        if aws_profile:
            session = boto3.Session(profile_name=aws_profile)
            self.s3_client = session.client("s3", region_name=self.region)
        else:
            self.s3_client = boto3.client("s3", region_name=self.region)
        
        logger.info(f"Initialized S3StateStore: bucket={self.bucket_name}, prefix={self.prefix}")
    
    def _key(self, name: str) -> str:
        return f"{self.prefix}{validate_resource_name(name)}{StateConstants.STATE_FILE_SUFFIX}"
    
    def load(self, name: str) -> Optional[ReconciledStreamState]:
        key = self._key(name)
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
            body = response["Body"].read()
        except ClientError as e:
            if e.response["Error"]["Code"] in ("NoSuchKey", "404"):
                return None
            logger.error(f"Failed to read state from S3: {e}")
            raise StateStoreError(f"S3 read failed for {key}: {e}") from e
        return decode_state(body, f"s3://{self.bucket_name}/{key}")
    
    def save(self, name: str, state: ReconciledStreamState) -> None:
        key = self._key(name)
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=encode_state(state).encode("utf-8"),
                ContentType="application/json",
                ServerSideEncryption="AES256",
                Metadata={
                    "stream-id": str(state.stream_id),
                    "scope": state.scope,
                },
            )
        except ClientError as e:
            logger.error(f"Failed to write state to S3: {e}")
            raise StateStoreError(f"S3 write failed for {key}: {e}") from e
        logger.debug(f"Saved state for {name} to s3://{self.bucket_name}/{key}")
    
    def delete(self, name: str) -> None:
        key = self._key(name)
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            logger.error(f"Failed to delete state from S3: {e}")
            raise StateStoreError(f"S3 delete failed for {key}: {e}") from e
    
    def list_names(self) -> List[str]:
        suffix = StateConstants.STATE_FILE_SUFFIX
        names = []
        try:
            paginator = self.s3_client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket_name, Prefix=self.prefix):
                for obj in page.get("Contents", []):
                    key = obj["Key"][len(self.prefix):]
                    if key.endswith(suffix) and "/" not in key:
                        names.append(key[: -len(suffix)])
        except ClientError as e:
            logger.error(f"Failed to list S3 state objects: {e}")
            raise StateStoreError(f"S3 list failed: {e}") from e
        return sorted(names)
