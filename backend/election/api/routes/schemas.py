"""
Election Schemas

Request and response models for election API endpoints.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator

from ...domain.enums import WorkflowPhase


# =============================================================================
# Voter Schemas
# =============================================================================

class RegisterVotersRequest(BaseModel):
    """Request to register voters"""
    identities: List[str] = Field(..., min_length=1)
    
    @field_validator("identities")
    @classmethod
    def identities_not_blank(cls, v: List[str]) -> List[str]:
        if any(not identity.strip() for identity in v):
            raise ValueError("identities must not contain blank values")
        return v


class RegisterVotersResponse(BaseModel):
    registered: List[str]
    registered_voter_count: int


class VoterResponse(BaseModel):
    identity: str
    is_registered: bool
    has_voted: bool
    voted_proposal_id: Optional[int] = None


# =============================================================================
# Proposal Schemas
# =============================================================================

class AddProposalsRequest(BaseModel):
    """Admin bulk proposal registration"""
    descriptions: List[str] = Field(..., min_length=1)


class AddProposalsResponse(BaseModel):
    proposal_indices: List[int]


class SubmitProposalRequest(BaseModel):
    """Single proposal from a registered voter"""
    description: str = Field(..., max_length=2000)
    reject_duplicates: bool = Field(
        default=False,
        description="Reject the proposal if one with the same description exists"
    )


class SubmitProposalResponse(BaseModel):
    proposal_index: int
    description: str


class ProposalResponse(BaseModel):
    proposal_index: int
    description: str
    vote_count: int


# =============================================================================
# Vote Schemas
# =============================================================================

class CastVoteRequest(BaseModel):
    proposal_index: int = Field(..., ge=0, strict=True)


class CastVoteResponse(BaseModel):
    voter_id: str
    proposal_index: int
    vote_count: int


class WinnerResponse(BaseModel):
    proposal_index: int
    description: str
    vote_count: int
    phase: str
    final: bool


# =============================================================================
# Election Schemas
# =============================================================================

class PhaseChangeResponse(BaseModel):
    previous_phase: str
    phase: str


class ElectionStatusResponse(BaseModel):
    phase: str
    registered_voter_count: int
    voted_count: int
    proposal_count: int
    total_votes: int
    available_operations: List[str]


class EventListResponse(BaseModel):
    items: List[Dict[str, Any]]
    count: int
    last_sequence: int
    since: Optional[datetime] = None


class EventAuditResponse(BaseModel):
    valid: bool
    event_count: int
    phase: WorkflowPhase
    registered_voter_count: int
    vote_counts: List[int]
    winning_proposal_id: int
    violations: List[str]
