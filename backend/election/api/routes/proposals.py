"""
Proposal Routes

- Bulk registration (administrator)
- Single submission (registered voter)
- Listing and lookup
"""

from typing import List

from fastapi import APIRouter, Depends

from ..deps import get_current_user_dep, get_correlation_id_dep, get_election_service_dep
from ...domain.models import ActorContext
from ...services.election_service import ElectionService
from .schemas import (
    AddProposalsRequest, AddProposalsResponse, SubmitProposalRequest,
    SubmitProposalResponse, ProposalResponse
)

router = APIRouter()


@router.post("/bulk", response_model=AddProposalsResponse)
async def add_proposals(
    request: AddProposalsRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ElectionService = Depends(get_election_service_dep)
):
    """Register several proposals at once, in order, without duplicate checks."""
    result = service.add_proposals(request.descriptions, actor=actor, correlation_id=correlation_id)
    return AddProposalsResponse(**result)


@router.post("", response_model=SubmitProposalResponse)
async def submit_proposal(
    request: SubmitProposalRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ElectionService = Depends(get_election_service_dep)
):
    """
    Submit a proposal as a registered voter.
    
    With reject_duplicates, an exact duplicate description is refused.
    """
    result = service.submit_proposal(
        request.description,
        actor=actor,
        reject_duplicates=request.reject_duplicates,
        correlation_id=correlation_id
    )
    return SubmitProposalResponse(**result)


@router.get("", response_model=List[ProposalResponse])
async def list_proposals(
    service: ElectionService = Depends(get_election_service_dep)
):
    return [ProposalResponse(**p) for p in service.list_proposals()]


@router.get("/{proposal_index}", response_model=ProposalResponse)
async def get_proposal(
    proposal_index: int,
    service: ElectionService = Depends(get_election_service_dep)
):
    proposal = service.get_proposal(proposal_index)
    return ProposalResponse(proposal_index=proposal_index, **proposal.model_dump())
