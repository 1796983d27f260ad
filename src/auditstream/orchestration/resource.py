"""Stream Resource - per-instance lifecycle over the controller and a state store.

One StreamResource manages one named stream. Calls are sequential: each
lifecycle call completes, and its outcome is persisted, before the next
starts. Distinct resources share nothing and may be driven concurrently.
"""

import logging
from enum import Enum
from typing import Optional, Union

from auditstream.common.exceptions import (
    InvalidConfigurationError,
    LifecycleError,
    RemoteNotFoundError,
)
from auditstream.orchestration.plan import PlanAction, StreamPlan, build_plan
from auditstream.state.store import StateStore, validate_resource_name
from auditstream.streams.controller import StreamLifecycleController
from auditstream.streams.identity import StreamIdentity
from auditstream.streams.schemas import (
    ObservedStreamState,
    ReconciledStreamState,
    StreamDeclaration,
)

logger = logging.getLogger(__name__)


class LifecycleState(str, Enum):
    """Lifecycle states of one stream resource."""
    ABSENT = "absent"
    CREATING = "creating"
    PRESENT = "present"
    UPDATING = "updating"
    DELETING = "deleting"


# Failed calls fall back to the state they started from.
_TRANSITIONS = {
    LifecycleState.ABSENT: {LifecycleState.CREATING, LifecycleState.PRESENT},
    LifecycleState.CREATING: {LifecycleState.PRESENT, LifecycleState.ABSENT},
    LifecycleState.PRESENT: {
        LifecycleState.UPDATING,
        LifecycleState.DELETING,
        LifecycleState.ABSENT,
    },
    LifecycleState.UPDATING: {LifecycleState.PRESENT, LifecycleState.ABSENT},
    LifecycleState.DELETING: {LifecycleState.ABSENT, LifecycleState.PRESENT},
}


class StreamResource:
    """A named audit log stream tracked in a state store."""
    
    def __init__(
        self,
        name: str,
        controller: StreamLifecycleController,
        store: StateStore,
    ):
        self.name = validate_resource_name(name)
        self.controller = controller
        self.store = store
        self._state = store.load(name)
        self.lifecycle = (
            LifecycleState.PRESENT if self._state is not None else LifecycleState.ABSENT
        )
    
    @property
    def state(self) -> Optional[ReconciledStreamState]:
        return self._state
    
    def _transition(self, target: LifecycleState) -> None:
        if target not in _TRANSITIONS[self.lifecycle]:
            raise LifecycleError(
                f"cannot move {self.name} from {self.lifecycle.value} to {target.value}",
                resource=self.name,
            )
        logger.debug(f"{self.name}: {self.lifecycle.value} -> {target.value}")
        self.lifecycle = target
    
    def _record(self, state: ReconciledStreamState) -> None:
        self.store.save(self.name, state)
        self._state = state
    
    def _forget(self) -> None:
        self.store.delete(self.name)
        self._state = None
    
    def refresh(self) -> Optional[ReconciledStreamState]:
        """Re-read the remote stream, carrying the stored vendor config.
        
        A stream deleted out-of-band is forgotten so the next apply
        recreates it.
        """
        if self._state is None:
            return None
        
        refreshed = self.controller.read(
            self._state.identity, vendor_config=self._state.vendor_config
        )
        if refreshed is None:
            self._forget()
            self._transition(LifecycleState.ABSENT)
            return None
        
        self._record(refreshed)
        return refreshed
    
    def plan(self, declaration: Optional[StreamDeclaration]) -> StreamPlan:
        """Plan against the currently held state (no remote calls)."""
        if declaration is not None and declaration.vendor_config is None:
            raise InvalidConfigurationError(
                "at least one vendor config required",
                details={"resource": self.name, "one_of": ["vendor_config"]},
            )
        return build_plan(self.name, self._state, declaration)
    
    def apply(
        self, declaration: Optional[StreamDeclaration]
    ) -> Optional[ReconciledStreamState]:
        """Refresh, plan and converge the remote stream on the declaration.
        
        Args:
            declaration: Desired state, or None to remove the stream
            
        Returns:
            The reconciled state, or None if the stream is absent afterwards
        """
        self.refresh()
        plan = self.plan(declaration)
        logger.info(f"{self.name}: {plan.action.value} ({len(plan.changes)} change(s))")
        
        if plan.action == PlanAction.CREATE:
            return self._create(declaration)
        if plan.action == PlanAction.UPDATE:
            return self._update(declaration)
        if plan.action == PlanAction.REPLACE:
            self._destroy()
            return self._create(declaration)
        if plan.action == PlanAction.DELETE:
            self._destroy()
            return None
        return self._state
    
    def destroy(self) -> None:
        """Delete the stream. An untracked or already-deleted stream is a success."""
        if self._state is None:
            logger.info(f"{self.name}: nothing to destroy")
            return
        self._destroy()
    
    def import_stream(self, identity: Union[str, StreamIdentity]) -> ReconciledStreamState:
        """Start tracking an existing stream.
        
        Only remote-observable fields are populated. The vendor config stays
        empty because the remote service never returns it; the next apply
        writes the declared one.
        """
        if self._state is not None:
            raise LifecycleError(
                f"{self.name} already tracks stream {self._state.identity}",
                resource=self.name,
            )
        identity = StreamIdentity.parse(identity)
        state = self.controller.read(identity, vendor_config=None)
        if state is None:
            raise RemoteNotFoundError(
                f"cannot import {identity}: stream does not exist",
                details={"identity": str(identity)},
            )
        self._record(state)
        self._transition(LifecycleState.PRESENT)
        logger.info(f"{self.name}: imported stream {identity}")
        return state
    
    def _create(self, declaration: StreamDeclaration) -> Optional[ReconciledStreamState]:
        self._transition(LifecycleState.CREATING)
        try:
            identity = self.controller.create(declaration)
        except Exception:
            self._transition(LifecycleState.ABSENT)
            raise
        
        try:
            state = self.controller.read(identity, vendor_config=declaration.vendor_config)
        except Exception:
            # The stream exists remotely; keep its identity so it is not orphaned.
            self._record(
                ReconciledStreamState(
                    scope=identity.scope,
                    observed=ObservedStreamState(
                        stream_id=identity.stream_id, enabled=declaration.enabled
                    ),
                    vendor_config=declaration.vendor_config,
                )
            )
            self._transition(LifecycleState.PRESENT)
            raise
        
        if state is None:
            logger.warning(f"{self.name}: stream {identity} disappeared right after create")
            self._transition(LifecycleState.ABSENT)
            return None
        
        self._record(state)
        self._transition(LifecycleState.PRESENT)
        return state
    
    def _update(self, declaration: StreamDeclaration) -> Optional[ReconciledStreamState]:
        self._transition(LifecycleState.UPDATING)
        try:
            state = self.controller.update(self._state.identity, declaration)
        except Exception:
            self._transition(LifecycleState.PRESENT)
            raise
        
        if state is None:
            self._forget()
            self._transition(LifecycleState.ABSENT)
            return None
        
        self._record(state)
        self._transition(LifecycleState.PRESENT)
        return state
    
    def _destroy(self) -> None:
        identity = self._state.identity
        self._transition(LifecycleState.DELETING)
        try:
            self.controller.delete(identity)
        except RemoteNotFoundError:
            logger.info(f"{self.name}: stream {identity} was already deleted")
        except Exception:
            self._transition(LifecycleState.PRESENT)
            raise
        
        self._forget()
        self._transition(LifecycleState.ABSENT)
