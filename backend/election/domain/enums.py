"""Domain Enumerations - Phase, operation and event type definitions"""
from enum import Enum
from typing import Optional


class WorkflowPhase(str, Enum):
    """Election workflow phase, in the only order it may advance"""
    REGISTERING_VOTERS = "REGISTERING_VOTERS"
    PROPOSALS_REGISTRATION_STARTED = "PROPOSALS_REGISTRATION_STARTED"
    PROPOSALS_REGISTRATION_ENDED = "PROPOSALS_REGISTRATION_ENDED"
    VOTING_SESSION_STARTED = "VOTING_SESSION_STARTED"
    VOTING_SESSION_ENDED = "VOTING_SESSION_ENDED"
    VOTES_TALLIED = "VOTES_TALLIED"  # Terminal label, tallying itself is a pure read
    
    @property
    def order(self) -> int:
        """Position of the phase in the workflow (0-based)"""
        return list(WorkflowPhase).index(self)
    
    @property
    def successor(self) -> Optional["WorkflowPhase"]:
        """The phase directly after this one, None for the terminal phase"""
        phases = list(WorkflowPhase)
        position = phases.index(self)
        if position + 1 < len(phases):
            return phases[position + 1]
        return None
    
    @property
    def is_terminal(self) -> bool:
        return self.successor is None


class EngineOperation(str, Enum):
    """Operations the engine gates by phase"""
    REGISTER_VOTERS = "REGISTER_VOTERS"
    OPEN_PROPOSALS_REGISTRATION = "OPEN_PROPOSALS_REGISTRATION"
    ADD_PROPOSALS = "ADD_PROPOSALS"
    SUBMIT_PROPOSAL = "SUBMIT_PROPOSAL"
    CLOSE_PROPOSALS_REGISTRATION = "CLOSE_PROPOSALS_REGISTRATION"
    OPEN_VOTING_SESSION = "OPEN_VOTING_SESSION"
    CAST_VOTE = "CAST_VOTE"
    CLOSE_VOTING_SESSION = "CLOSE_VOTING_SESSION"
    TALLY_VOTES = "TALLY_VOTES"


class ElectionEventType(str, Enum):
    """Types of events written to the election event log"""
    VOTER_REGISTERED = "VOTER_REGISTERED"
    WORKFLOW_STATUS_CHANGED = "WORKFLOW_STATUS_CHANGED"
    PROPOSAL_REGISTERED = "PROPOSAL_REGISTERED"
    VOTED = "VOTED"


class EventLogBackend(str, Enum):
    """Where election events are appended"""
    MEMORY = "memory"
    MONGO = "mongo"
