"""Plan types - what an apply would change for one stream resource.

Sensitive values never appear in a rendered plan; they are replaced by a
placeholder, and only the fact that they differ is reported.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import SecretStr

from auditstream.common.constants import StateConstants
from auditstream.streams.schemas import (
    ReconciledStreamState,
    StreamDeclaration,
    VendorConfig,
)


class PlanAction(str, Enum):
    """What apply will do to the remote stream."""
    NOOP = "noop"
    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DELETE = "delete"


@dataclass(frozen=True)
class FieldChange:
    """A single attribute difference between stored and declared state."""
    
    path: str
    before: Any = None
    after: Any = None
    sensitive: bool = False
    forces_replacement: bool = False
    
    def render(self) -> str:
        if self.sensitive:
            before = StateConstants.SENSITIVE_PLACEHOLDER if self.before is not None else None
            after = StateConstants.SENSITIVE_PLACEHOLDER if self.after is not None else None
        else:
            before, after = self.before, self.after
        suffix = " (forces replacement)" if self.forces_replacement else ""
        return f"{self.path}: {before!r} -> {after!r}{suffix}"


@dataclass
class StreamPlan:
    """Planned action for one resource."""
    
    resource: str
    action: PlanAction
    changes: List[FieldChange] = field(default_factory=list)
    
    @property
    def has_changes(self) -> bool:
        return self.action != PlanAction.NOOP
    
    def render(self) -> List[str]:
        lines = [f"{self.resource}: {self.action.value}"]
        lines.extend(f"  {change.render()}" for change in self.changes)
        return lines
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "resource": self.resource,
            "action": self.action.value,
            "changes": [change.render() for change in self.changes],
        }


def _vendor_fields(config: Optional[VendorConfig]) -> Dict[str, Tuple[Any, bool]]:
    if config is None:
        return {}
    flattened = {}
    for name, value in config:
        if isinstance(value, SecretStr):
            flattened[f"vendor_config.{name}"] = (value, True)
        else:
            flattened[f"vendor_config.{name}"] = (value, False)
    return flattened


def _declared_fields(declaration: StreamDeclaration) -> Dict[str, Tuple[Any, bool]]:
    fields = {
        "scope": (declaration.scope, False),
        "enabled": (declaration.enabled, False),
    }
    fields.update(_vendor_fields(declaration.vendor_config))
    return fields


def _stored_fields(state: ReconciledStreamState) -> Dict[str, Tuple[Any, bool]]:
    fields = {
        "scope": (state.scope, False),
        "enabled": (state.enabled, False),
    }
    fields.update(_vendor_fields(state.vendor_config))
    return fields


def _plain(value: Any) -> Any:
    if isinstance(value, SecretStr):
        return value.get_secret_value()
    return value


def diff_fields(
    before: Dict[str, Tuple[Any, bool]],
    after: Dict[str, Tuple[Any, bool]],
) -> List[FieldChange]:
    """Field-by-field differences, with secrets compared by value but kept wrapped."""
    changes = []
    for path in sorted(set(before) | set(after)):
        old, old_sensitive = before.get(path, (None, False))
        new, new_sensitive = after.get(path, (None, False))
        if _plain(old) == _plain(new):
            continue
        changes.append(
            FieldChange(
                path=path,
                before=old,
                after=new,
                sensitive=old_sensitive or new_sensitive,
                forces_replacement=(path == "scope" and old is not None),
            )
        )
    return changes


def build_plan(
    resource: str,
    current: Optional[ReconciledStreamState],
    declaration: Optional[StreamDeclaration],
) -> StreamPlan:
    """Compare stored state with a declaration.
    
    Args:
        resource: Resource name
        current: Refreshed stored state, or None if the stream is absent
        declaration: Desired state, or None if the resource was removed
        
    Returns:
        The plan for the resource
    """
    before = _stored_fields(current) if current is not None else {}
    after = _declared_fields(declaration) if declaration is not None else {}
    changes = diff_fields(before, after)
    
    if declaration is None:
        action = PlanAction.DELETE if current is not None else PlanAction.NOOP
    elif current is None:
        action = PlanAction.CREATE
    elif current.scope != declaration.scope:
        action = PlanAction.REPLACE
    elif changes:
        action = PlanAction.UPDATE
    else:
        action = PlanAction.NOOP
    
    return StreamPlan(resource=resource, action=action, changes=changes)
