"""State store factory."""

import logging
from typing import Optional

from auditstream.common.config import Config, StateBackend, get_config
from auditstream.state.store import FileStateStore, StateStore

logger = logging.getLogger(__name__)


def create_state_store(config: Optional[Config] = None, **kwargs) -> StateStore:
    """Create the state store selected by configuration.
    
    Args:
        config: Configuration to use (default: global config)
        **kwargs: Extra arguments for the store constructor
        
    Returns:
        Configured StateStore instance
    """
    config = config or get_config()
    
    if config.state_backend == StateBackend.S3:
        from auditstream.state.s3_store import S3StateStore
        
        return S3StateStore(
            bucket_name=config.state_s3_bucket,
            prefix=config.state_s3_prefix,
            region=config.aws_region,
            **kwargs
        )
    
    return FileStateStore(state_dir=str(config.state_dir), **kwargs)
