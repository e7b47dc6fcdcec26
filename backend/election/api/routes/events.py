"""
Event Routes

Read access to the election event log for external observers.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_election_service_dep
from ...domain.enums import ElectionEventType
from ...domain.errors import ValidationError
from ...services.election_service import ElectionService
from ...utils.time import parse_iso
from .schemas import EventAuditResponse, EventListResponse

router = APIRouter()


@router.get("", response_model=EventListResponse)
async def list_events(
    event_type: Optional[List[ElectionEventType]] = Query(None),
    since_sequence: int = Query(0, ge=0),
    since: Optional[str] = Query(None, description="ISO 8601 timestamp"),
    limit: int = Query(100, ge=1, le=1000),
    service: ElectionService = Depends(get_election_service_dep)
):
    """Events in the order they were applied."""
    try:
        since_dt = parse_iso(since) if since else None
    except (ValueError, OverflowError):
        raise ValidationError("since must be an ISO 8601 timestamp", details={"since": since})
    events = service.list_events(
        event_types=event_type,
        since_sequence=since_sequence,
        since=since_dt,
        limit=limit
    )
    return EventListResponse(
        items=[e.model_dump(mode="json") for e in events],
        count=len(events),
        last_sequence=events[-1].sequence if events else since_sequence,
        since=since_dt
    )


@router.get("/audit", response_model=EventAuditResponse)
async def audit_events(
    service: ElectionService = Depends(get_election_service_dep)
):
    """Replay the event log and report any rule it breaks."""
    report = service.audit_events()
    return EventAuditResponse(
        valid=report.is_valid,
        event_count=report.event_count,
        phase=report.phase,
        registered_voter_count=len(report.registered_voters),
        vote_counts=report.vote_counts,
        winning_proposal_id=report.winning_proposal_id,
        violations=report.violations
    )
