"""Tests for the phase transition table"""
import pytest

from election.domain.enums import EngineOperation, WorkflowPhase
from election.domain.errors import InvalidPhaseError, ProposalsNotOpenError, TransitionTableError
from election.engine.transition_resolver import (
    PHASE_TRANSITIONS, TransitionResolver, validate_transition_table
)


@pytest.fixture
def resolver():
    return TransitionResolver()


def test_phase_order():
    assert [p.order for p in WorkflowPhase] == list(range(6))
    assert WorkflowPhase.REGISTERING_VOTERS.successor == WorkflowPhase.PROPOSALS_REGISTRATION_STARTED
    assert WorkflowPhase.VOTES_TALLIED.successor is None
    assert WorkflowPhase.VOTES_TALLIED.is_terminal
    assert not WorkflowPhase.VOTING_SESSION_ENDED.is_terminal


def test_table_covers_every_non_terminal_phase():
    sources = {source for source, _ in PHASE_TRANSITIONS.values()}
    assert sources == {p for p in WorkflowPhase if not p.is_terminal}


@pytest.mark.parametrize(
    "operation,source,target",
    [(operation, source, target) for operation, (source, target) in PHASE_TRANSITIONS.items()]
)
def test_every_transition_moves_one_step(resolver, operation, source, target):
    assert resolver.resolve_next_phase(source, operation) == target
    assert target.order == source.order + 1


@pytest.mark.parametrize("phase", list(WorkflowPhase))
def test_wrong_phase_is_rejected(resolver, phase):
    for operation, (source, _) in PHASE_TRANSITIONS.items():
        if phase != source:
            with pytest.raises(InvalidPhaseError):
                resolver.resolve_next_phase(phase, operation)


def test_non_transition_operation_cannot_be_resolved(resolver):
    with pytest.raises(InvalidPhaseError):
        resolver.resolve_next_phase(WorkflowPhase.VOTING_SESSION_STARTED, EngineOperation.CAST_VOTE)


def test_phase_requirements(resolver):
    resolver.ensure_phase(WorkflowPhase.VOTING_SESSION_STARTED, EngineOperation.CAST_VOTE)
    resolver.ensure_phase(WorkflowPhase.PROPOSALS_REGISTRATION_STARTED, EngineOperation.SUBMIT_PROPOSAL)
    with pytest.raises(InvalidPhaseError) as exc_info:
        resolver.ensure_phase(WorkflowPhase.PROPOSALS_REGISTRATION_STARTED, EngineOperation.CAST_VOTE)
    assert exc_info.value.details["required_phase"] == WorkflowPhase.VOTING_SESSION_STARTED.value


def test_bulk_proposals_use_dedicated_error(resolver):
    with pytest.raises(ProposalsNotOpenError):
        resolver.ensure_phase(WorkflowPhase.REGISTERING_VOTERS, EngineOperation.ADD_PROPOSALS)


@pytest.mark.parametrize("phase", list(WorkflowPhase))
def test_voter_registration_allowed_everywhere(resolver, phase):
    resolver.ensure_phase(phase, EngineOperation.REGISTER_VOTERS)


def test_available_operations(resolver):
    available = resolver.get_available_operations(WorkflowPhase.VOTING_SESSION_STARTED)
    assert set(available) == {
        EngineOperation.REGISTER_VOTERS,
        EngineOperation.CAST_VOTE,
        EngineOperation.CLOSE_VOTING_SESSION,
    }
    assert resolver.get_available_operations(WorkflowPhase.VOTES_TALLIED) == [EngineOperation.REGISTER_VOTERS]


def test_skipping_table_is_rejected():
    table = dict(PHASE_TRANSITIONS)
    table[EngineOperation.OPEN_VOTING_SESSION] = (
        WorkflowPhase.PROPOSALS_REGISTRATION_ENDED,
        WorkflowPhase.VOTING_SESSION_ENDED,
    )
    with pytest.raises(TransitionTableError):
        validate_transition_table(table)


def test_backward_table_is_rejected():
    table = dict(PHASE_TRANSITIONS)
    table[EngineOperation.TALLY_VOTES] = (
        WorkflowPhase.VOTING_SESSION_ENDED,
        WorkflowPhase.REGISTERING_VOTERS,
    )
    with pytest.raises(TransitionTableError):
        TransitionResolver(table)


def test_incomplete_table_is_rejected():
    table = dict(PHASE_TRANSITIONS)
    del table[EngineOperation.TALLY_VOTES]
    with pytest.raises(TransitionTableError) as exc_info:
        validate_transition_table(table)
    assert exc_info.value.details["phase"] == WorkflowPhase.VOTING_SESSION_ENDED.value


def test_ambiguous_table_is_rejected():
    table = dict(PHASE_TRANSITIONS)
    table[EngineOperation.CAST_VOTE] = (
        WorkflowPhase.VOTING_SESSION_STARTED,
        WorkflowPhase.VOTING_SESSION_ENDED,
    )
    with pytest.raises(TransitionTableError):
        validate_transition_table(table)
