"""
Vote Routes

- Cast a vote (registered voter)
- Read the winning proposal
"""

from fastapi import APIRouter, Depends

from ..deps import get_current_user_dep, get_correlation_id_dep, get_election_service_dep
from ...domain.models import ActorContext
from ...services.election_service import ElectionService
from .schemas import CastVoteRequest, CastVoteResponse, WinnerResponse

router = APIRouter()


@router.post("/votes", response_model=CastVoteResponse)
async def cast_vote(
    request: CastVoteRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ElectionService = Depends(get_election_service_dep)
):
    """Cast the caller's single vote while the voting session is open."""
    result = service.cast_vote(request.proposal_index, actor=actor, correlation_id=correlation_id)
    return CastVoteResponse(**result)


@router.get("/results/winner", response_model=WinnerResponse)
async def get_winner(
    service: ElectionService = Depends(get_election_service_dep)
):
    """
    Winning proposal at query time.
    
    Ties go to the lowest index. Readable in every phase; "final" is set once
    the voting session has ended.
    """
    return WinnerResponse(**service.get_winner())
