"""Event Audit - Rebuild and check an election from its event log alone

External observers only see the event log. Replaying it must give back
the same phase, registrations and tallies the engine holds, and must never
show a forbidden sequence (skipped phase, double vote, vote outside the
voting session, ...).
"""
from typing import Dict, Iterable, List, Optional, Set

from pydantic import BaseModel, Field

from ..domain.models import ElectionEvent
from ..domain.enums import ElectionEventType, WorkflowPhase
from ..utils.logger import get_logger

logger = get_logger(__name__)


class AuditReport(BaseModel):
    """Outcome of replaying an event log"""
    event_count: int = 0
    phase: WorkflowPhase = WorkflowPhase.REGISTERING_VOTERS
    registered_voters: List[str] = Field(default_factory=list)
    vote_counts: List[int] = Field(default_factory=list)
    votes: Dict[str, int] = Field(default_factory=dict)
    winning_proposal_id: int = 0
    violations: List[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations


def audit_events(events: Iterable[ElectionEvent]) -> AuditReport:
    """
    Replay events in sequence order and collect every rule they break

    Returns:
        AuditReport; an empty violations list means the log is consistent
    """
    report = AuditReport()
    registered: Set[str] = set()
    expected_sequence: Optional[int] = None

    for event in events:
        report.event_count += 1
        where = f"event {event.sequence} ({event.event_type.value})"

        if expected_sequence is not None and event.sequence != expected_sequence:
            report.violations.append(f"{where}: expected sequence {expected_sequence}")
        expected_sequence = event.sequence + 1

        if event.event_type == ElectionEventType.VOTER_REGISTERED:
            if not event.voter_id:
                report.violations.append(f"{where}: missing voter")
                continue
            if event.voter_id not in registered:
                registered.add(event.voter_id)
                report.registered_voters.append(event.voter_id)

        elif event.event_type == ElectionEventType.WORKFLOW_STATUS_CHANGED:
            if event.previous_phase != report.phase:
                report.violations.append(
                    f"{where}: starts from {_phase_name(event.previous_phase)}, log is in {report.phase.value}"
                )
            if event.new_phase is None or event.new_phase != report.phase.successor:
                report.violations.append(f"{where}: {_phase_name(event.new_phase)} is not the next phase")
            if event.new_phase is not None:
                report.phase = event.new_phase

        elif event.event_type == ElectionEventType.PROPOSAL_REGISTERED:
            if report.phase != WorkflowPhase.PROPOSALS_REGISTRATION_STARTED:
                report.violations.append(f"{where}: proposal registered during {report.phase.value}")
            if event.proposal_index != len(report.vote_counts):
                report.violations.append(
                    f"{where}: proposal index {event.proposal_index}, expected {len(report.vote_counts)}"
                )
            report.vote_counts.append(0)

        elif event.event_type == ElectionEventType.VOTED:
            if report.phase != WorkflowPhase.VOTING_SESSION_STARTED:
                report.violations.append(f"{where}: vote cast during {report.phase.value}")
            if event.voter_id not in registered:
                report.violations.append(f"{where}: {event.voter_id} is not registered")
            if event.voter_id in report.votes:
                report.violations.append(f"{where}: {event.voter_id} voted twice")
                continue
            index = event.proposal_index
            if index is None or not 0 <= index < len(report.vote_counts):
                report.violations.append(f"{where}: no proposal at index {index}")
                continue
            report.votes[event.voter_id] = index
            report.vote_counts[index] += 1

    report.winning_proposal_id = _first_maximum(report.vote_counts)

    if report.violations:
        logger.warning(
            f"Event log audit found {len(report.violations)} violation(s)",
            extra={"phase": report.phase.value}
        )
    return report


def _phase_name(phase: Optional[WorkflowPhase]) -> Optional[str]:
    return phase.value if phase is not None else None


def _first_maximum(counts: List[int]) -> int:
    winning_count = 0
    winning_index = 0
    for index, count in enumerate(counts):
        if count > winning_count:
            winning_count = count
            winning_index = index
    return winning_index
