"""Event Writer - Append-only election events"""
from typing import Optional

from ..domain.models import ElectionEvent
from ..domain.enums import ElectionEventType, WorkflowPhase
from ..repositories.event_log import EventLog
from ..utils.idgen import generate_event_id
from ..utils.time import utc_now
from ..utils.logger import get_logger

logger = get_logger(__name__)


class EventWriter:
    """
    Write election events (append-only)
    
    Every successful state change produces one or more events. Sequence
    numbers give the total order in which changes were applied.
    """
    
    def __init__(self, sink: EventLog):
        self.sink = sink
        self._sequence = sink.count()
    
    @property
    def last_sequence(self) -> int:
        return self._sequence
    
    def write_event(
        self,
        event_type: ElectionEventType,
        actor_id: Optional[str],
        correlation_id: Optional[str] = None,
        **payload
    ) -> ElectionEvent:
        """Write a single election event"""
        event = ElectionEvent(
            event_id=generate_event_id(),
            sequence=self._sequence + 1,
            event_type=event_type,
            actor_id=actor_id,
            timestamp=utc_now(),
            correlation_id=correlation_id,
            **payload
        )
        
        self.sink.append(event)
        self._sequence = event.sequence
        return event
    
    def write_voter_registered(
        self,
        actor_id: str,
        voter_id: str,
        correlation_id: Optional[str] = None
    ) -> ElectionEvent:
        return self.write_event(
            ElectionEventType.VOTER_REGISTERED,
            actor_id,
            correlation_id,
            voter_id=voter_id
        )
    
    def write_phase_changed(
        self,
        actor_id: str,
        previous_phase: WorkflowPhase,
        new_phase: WorkflowPhase,
        correlation_id: Optional[str] = None
    ) -> ElectionEvent:
        return self.write_event(
            ElectionEventType.WORKFLOW_STATUS_CHANGED,
            actor_id,
            correlation_id,
            previous_phase=previous_phase,
            new_phase=new_phase
        )
    
    def write_proposal_registered(
        self,
        actor_id: str,
        proposal_index: int,
        correlation_id: Optional[str] = None
    ) -> ElectionEvent:
        return self.write_event(
            ElectionEventType.PROPOSAL_REGISTERED,
            actor_id,
            correlation_id,
            proposal_index=proposal_index
        )
    
    def write_voted(
        self,
        voter_id: str,
        proposal_index: int,
        correlation_id: Optional[str] = None
    ) -> ElectionEvent:
        return self.write_event(
            ElectionEventType.VOTED,
            voter_id,
            correlation_id,
            voter_id=voter_id,
            proposal_index=proposal_index
        )
