"""Domain Models - Pydantic schemas for all entities"""
from datetime import datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, ConfigDict

from .enums import WorkflowPhase, ElectionEventType


# ============================================================================
# Identity
# ============================================================================

class ActorContext(BaseModel):
    """Current actor context from JWT token"""
    model_config = ConfigDict(extra="forbid")
    
    identity: str = Field(..., min_length=1, description="Opaque caller identity (token subject)")
    display_name: str = Field(..., description="Caller display name")
    roles: List[str] = Field(default_factory=list, description="Roles claimed by the token")


# ============================================================================
# Election State
# ============================================================================

class Voter(BaseModel):
    """Registration and vote status of one participant"""
    model_config = ConfigDict(extra="forbid")
    
    is_registered: bool = Field(default=False, description="Set by the administrator, never reset")
    has_voted: bool = Field(default=False, description="One-way latch set by casting a vote")
    voted_proposal_id: Optional[int] = Field(None, description="Chosen proposal index once has_voted is set")


class Proposal(BaseModel):
    """Candidate option with its accumulated vote count"""
    model_config = ConfigDict(extra="forbid")
    
    description: str = Field(..., description="Free-form label")
    vote_count: int = Field(default=0, ge=0, description="Votes received")


class ElectionSnapshot(BaseModel):
    """Point-in-time copy of the whole election state"""
    phase: WorkflowPhase
    voters: Dict[str, Voter] = Field(default_factory=dict)
    proposals: List[Proposal] = Field(default_factory=list)
    
    @property
    def voted_count(self) -> int:
        return sum(1 for v in self.voters.values() if v.has_voted)
    
    @property
    def total_votes(self) -> int:
        return sum(p.vote_count for p in self.proposals)


# ============================================================================
# Events
# ============================================================================

class ElectionEvent(BaseModel):
    """Append-only record of a state change"""
    model_config = ConfigDict(extra="forbid")
    
    event_id: str = Field(..., description="Unique event ID")
    sequence: int = Field(..., ge=1, description="Position in the total order of events")
    event_type: ElectionEventType
    actor_id: Optional[str] = Field(None, description="Identity that triggered the change")
    voter_id: Optional[str] = Field(None, description="VOTER_REGISTERED and VOTED")
    proposal_index: Optional[int] = Field(None, description="PROPOSAL_REGISTERED and VOTED")
    previous_phase: Optional[WorkflowPhase] = Field(None, description="WORKFLOW_STATUS_CHANGED")
    new_phase: Optional[WorkflowPhase] = Field(None, description="WORKFLOW_STATUS_CHANGED")
    timestamp: datetime
    correlation_id: Optional[str] = None
