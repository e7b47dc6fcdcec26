"""
Election Routes

Administrator phase transitions and election status.
"""

from fastapi import APIRouter, Depends

from ..deps import get_current_user_dep, get_correlation_id_dep, get_election_service_dep
from ...domain.models import ActorContext
from ...domain.enums import EngineOperation
from ...services.election_service import ElectionService
from ...utils.logger import get_logger
from .schemas import ElectionStatusResponse, PhaseChangeResponse

logger = get_logger(__name__)
router = APIRouter()


@router.get("/status", response_model=ElectionStatusResponse)
async def get_status(
    service: ElectionService = Depends(get_election_service_dep)
):
    """Current phase and counters. Open to every caller."""
    return ElectionStatusResponse(**service.get_status())


def _phase_route(operation: EngineOperation):
    async def change_phase(
        actor: ActorContext = Depends(get_current_user_dep),
        correlation_id: str = Depends(get_correlation_id_dep),
        service: ElectionService = Depends(get_election_service_dep)
    ):
        result = service.change_phase(operation, actor=actor, correlation_id=correlation_id)
        return PhaseChangeResponse(**result)
    
    change_phase.__name__ = operation.value.lower()
    change_phase.__doc__ = f"{operation.value.replace('_', ' ').capitalize()} (administrator only)."
    return change_phase


router.add_api_route(
    "/proposals-registration/open",
    _phase_route(EngineOperation.OPEN_PROPOSALS_REGISTRATION),
    methods=["POST"],
    response_model=PhaseChangeResponse,
)
router.add_api_route(
    "/proposals-registration/close",
    _phase_route(EngineOperation.CLOSE_PROPOSALS_REGISTRATION),
    methods=["POST"],
    response_model=PhaseChangeResponse,
)
router.add_api_route(
    "/voting-session/open",
    _phase_route(EngineOperation.OPEN_VOTING_SESSION),
    methods=["POST"],
    response_model=PhaseChangeResponse,
)
router.add_api_route(
    "/voting-session/close",
    _phase_route(EngineOperation.CLOSE_VOTING_SESSION),
    methods=["POST"],
    response_model=PhaseChangeResponse,
)
router.add_api_route(
    "/tally",
    _phase_route(EngineOperation.TALLY_VOTES),
    methods=["POST"],
    response_model=PhaseChangeResponse,
)
