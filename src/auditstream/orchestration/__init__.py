"""Resource orchestration - plan/apply/destroy/import over stored state."""

from auditstream.orchestration.plan import (
    PlanAction,
    FieldChange,
    StreamPlan,
    build_plan,
)
from auditstream.orchestration.resource import LifecycleState, StreamResource

__all__ = [
    "PlanAction",
    "FieldChange",
    "StreamPlan",
    "build_plan",
    "LifecycleState",
    "StreamResource",
]
