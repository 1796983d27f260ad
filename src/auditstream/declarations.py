"""Declaration file loading.

Declarations are YAML documents of the form::

    resources:
      corp_stream:
        scope: my-enterprise
        enabled: true
        vendor_config:
          container: audit-logs
          key_id: "0123"
          encrypted_access_url: "..."
"""

from pathlib import Path
from typing import Dict, Union

import yaml

from auditstream.common.exceptions import InvalidConfigurationError, StateStoreError
from auditstream.state.store import validate_resource_name
from auditstream.streams.schemas import StreamDeclaration


def parse_declarations(document) -> Dict[str, StreamDeclaration]:
    """Validate a parsed declaration document.
    
    Raises:
        InvalidConfigurationError: If the document or any resource is invalid
    """
    if document is None:
        return {}
    if not isinstance(document, dict) or not isinstance(document.get("resources") or {}, dict):
        raise InvalidConfigurationError(
            "declaration document must be a mapping with a 'resources' mapping"
        )
    
    declarations = {}
    for name, block in (document.get("resources") or {}).items():
        try:
            validate_resource_name(str(name))
        except StateStoreError as e:
            raise InvalidConfigurationError(e.message, details={"resource": name}) from None
        if not isinstance(block, dict):
            raise InvalidConfigurationError(
                f"resource {name!r} must be a mapping", details={"resource": name}
            )
        try:
            declarations[str(name)] = StreamDeclaration.from_config(block)
        except InvalidConfigurationError as e:
            raise InvalidConfigurationError(
                f"{name}: {e.message}", details={**e.details, "resource": name}
            ) from None
    return declarations


def load_declarations(path: Union[str, Path]) -> Dict[str, StreamDeclaration]:
    """Load and validate a YAML declaration file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = yaml.safe_load(f)
    except OSError as e:
        raise InvalidConfigurationError(
            f"could not read {path}: {e.strerror}", details={"path": str(path)}
        ) from e
    except yaml.YAMLError as e:
        raise InvalidConfigurationError(
            f"could not parse {path}: {e}", details={"path": str(path)}
        ) from e
    return parse_declarations(document)
