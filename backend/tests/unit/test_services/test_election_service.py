"""Tests for the election service"""
import pytest

from election.domain.errors import EventLogNotEmptyError, ProposalIndexOutOfRangeError
from election.domain.models import ActorContext
from election.repositories.event_log import InMemoryEventLog
from election.services.election_service import ElectionService, build_election_service
from election.config.settings import settings

from tests.conftest import ADMIN, ALICE, BOB


def actor(identity):
    return ActorContext(identity=identity, display_name=identity.title())


def test_winner_reports_phase_with_result(voting_engine):
    service = ElectionService(voting_engine)
    service.cast_vote(1, actor(ALICE))

    live = service.get_winner()
    assert live == {
        "proposal_index": 1,
        "description": "Proposal2",
        "vote_count": 1,
        "phase": "VOTING_SESSION_STARTED",
        "final": False,
    }

    voting_engine.close_voting_session(ADMIN)
    assert service.get_winner()["final"] is True


def test_winner_without_proposals(engine):
    with pytest.raises(ProposalIndexOutOfRangeError):
        ElectionService(engine).get_winner()


def test_build_refuses_used_event_log():
    log = InMemoryEventLog()
    build_election_service(settings, event_log=log).register_voters([BOB], actor(ADMIN))

    with pytest.raises(EventLogNotEmptyError):
        build_election_service(settings, event_log=log)
