"""
Voter Routes

- Register voters (administrator)
- Look up a voter record
"""

from fastapi import APIRouter, Depends

from ..deps import get_current_user_dep, get_correlation_id_dep, get_election_service_dep
from ...domain.models import ActorContext
from ...services.election_service import ElectionService
from .schemas import RegisterVotersRequest, RegisterVotersResponse, VoterResponse

router = APIRouter()


@router.post("", response_model=RegisterVotersResponse)
async def register_voters(
    request: RegisterVotersRequest,
    actor: ActorContext = Depends(get_current_user_dep),
    correlation_id: str = Depends(get_correlation_id_dep),
    service: ElectionService = Depends(get_election_service_dep)
):
    """
    Register voters.
    
    Administrator only. Allowed in every phase; registering an identity
    twice is accepted and logged again.
    """
    result = service.register_voters(request.identities, actor=actor, correlation_id=correlation_id)
    return RegisterVotersResponse(**result)


@router.get("/{identity}", response_model=VoterResponse)
async def get_voter(
    identity: str,
    service: ElectionService = Depends(get_election_service_dep)
):
    """Voter record; unknown identities return the unregistered default."""
    voter = service.get_voter(identity)
    return VoterResponse(identity=identity, **voter.model_dump())
