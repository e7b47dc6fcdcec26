"""Tests for replaying the event log"""
from election.domain.enums import ElectionEventType, WorkflowPhase
from election.domain.models import ElectionEvent
from election.services.election_service import ElectionService
from election.services.event_audit import audit_events
from election.utils.time import utc_now

from tests.conftest import ADMIN, ALICE, BOB, MALLORY


def event(sequence, event_type, **fields):
    return ElectionEvent(
        event_id=f"EVT-{sequence}",
        sequence=sequence,
        event_type=event_type,
        actor_id=ADMIN,
        timestamp=utc_now(),
        **fields
    )


def phase_change(sequence, previous, new):
    return event(
        sequence,
        ElectionEventType.WORKFLOW_STATUS_CHANGED,
        previous_phase=previous,
        new_phase=new
    )


def test_replay_matches_engine(voting_engine, event_log):
    voting_engine.cast_vote(ALICE, 1)
    voting_engine.cast_vote(BOB, 1)
    voting_engine.close_voting_session(ADMIN)

    report = audit_events(event_log.list_events())

    assert report.is_valid
    assert report.event_count == event_log.count() == 10
    assert report.phase == WorkflowPhase.VOTING_SESSION_ENDED
    assert report.registered_voters == [ALICE, BOB]
    assert report.vote_counts == [0, 2]
    assert report.votes == {ALICE: 1, BOB: 1}
    assert report.winning_proposal_id == voting_engine.winning_proposal_id() == 1


def test_repeated_registration_counted_once(engine, event_log):
    engine.register_voters(ADMIN, [ALICE, ALICE])
    report = audit_events(event_log.list_events())
    assert report.is_valid
    assert report.registered_voters == [ALICE]


def test_empty_log():
    report = audit_events([])
    assert report.is_valid
    assert report.phase == WorkflowPhase.REGISTERING_VOTERS
    assert report.winning_proposal_id == 0


def test_skipped_phase_is_reported():
    report = audit_events([
        phase_change(1, WorkflowPhase.REGISTERING_VOTERS, WorkflowPhase.VOTING_SESSION_STARTED),
    ])
    assert report.violations == [
        "event 1 (WORKFLOW_STATUS_CHANGED): VOTING_SESSION_STARTED is not the next phase"
    ]


def test_phase_change_from_wrong_phase_names_both_phases():
    report = audit_events([
        phase_change(1, WorkflowPhase.REGISTERING_VOTERS, WorkflowPhase.PROPOSALS_REGISTRATION_STARTED),
        phase_change(2, WorkflowPhase.REGISTERING_VOTERS, WorkflowPhase.PROPOSALS_REGISTRATION_STARTED),
    ])
    assert report.violations == [
        "event 2 (WORKFLOW_STATUS_CHANGED): starts from REGISTERING_VOTERS, "
        "log is in PROPOSALS_REGISTRATION_STARTED",
        "event 2 (WORKFLOW_STATUS_CHANGED): PROPOSALS_REGISTRATION_STARTED is not the next phase",
    ]


def test_sequence_gap_is_reported():
    report = audit_events([
        event(1, ElectionEventType.VOTER_REGISTERED, voter_id=ALICE),
        event(3, ElectionEventType.VOTER_REGISTERED, voter_id=BOB),
    ])
    assert report.violations == ["event 3 (VOTER_REGISTERED): expected sequence 2"]


def test_forbidden_votes_are_reported():
    report = audit_events([
        event(1, ElectionEventType.VOTER_REGISTERED, voter_id=ALICE),
        phase_change(2, WorkflowPhase.REGISTERING_VOTERS, WorkflowPhase.PROPOSALS_REGISTRATION_STARTED),
        event(3, ElectionEventType.PROPOSAL_REGISTERED, proposal_index=0),
        event(4, ElectionEventType.VOTED, voter_id=ALICE, proposal_index=0),
        phase_change(5, WorkflowPhase.PROPOSALS_REGISTRATION_STARTED, WorkflowPhase.PROPOSALS_REGISTRATION_ENDED),
        phase_change(6, WorkflowPhase.PROPOSALS_REGISTRATION_ENDED, WorkflowPhase.VOTING_SESSION_STARTED),
        event(7, ElectionEventType.VOTED, voter_id=ALICE, proposal_index=0),
        event(8, ElectionEventType.VOTED, voter_id=MALLORY, proposal_index=4),
    ])

    assert len(report.violations) == 4
    assert "vote cast during PROPOSALS_REGISTRATION_STARTED" in report.violations[0]
    assert "voted twice" in report.violations[1]
    assert "mallory is not registered" in report.violations[2]
    assert "no proposal at index 4" in report.violations[3]
    assert report.vote_counts == [1]


def test_service_audit_compares_with_live_state(voting_engine, event_log):
    service = ElectionService(voting_engine)
    voting_engine.cast_vote(ALICE, 0)
    assert service.audit_events().is_valid

    # A sink that lost the last event no longer agrees with the engine
    event_log._events.pop()
    report = service.audit_events()
    assert report.violations == ["log tallies [0, 0], engine holds [1, 0]"]
