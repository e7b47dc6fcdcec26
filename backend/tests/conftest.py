"""
Pytest Configuration and Fixtures

This file contains shared fixtures and configuration for all tests.
"""

import os

# Settings are read once on first import, so the environment is fixed here
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("ADMIN_IDENTITY", "admin")
os.environ.setdefault("JWT_SECRET", "test-election-secret-with-enough-bytes")
os.environ.setdefault("EVENT_LOG_BACKEND", "memory")

import jwt
import pytest
from typing import Callable, Dict, Generator

from election.config.settings import settings
from election.engine import ElectionEngine, SingleAdminAuthority
from election.repositories.event_log import InMemoryEventLog

ADMIN = "admin"
ALICE = "alice"
BOB = "bob"
MALLORY = "mallory"


@pytest.fixture
def event_log() -> InMemoryEventLog:
    return InMemoryEventLog()


@pytest.fixture
def engine(event_log) -> ElectionEngine:
    """Fresh election in the voter registration phase"""
    return ElectionEngine(is_admin=SingleAdminAuthority(ADMIN), event_log=event_log)


@pytest.fixture
def proposals_open_engine(engine) -> ElectionEngine:
    """Alice and Bob registered, proposal registration open"""
    engine.register_voters(ADMIN, [ALICE, BOB])
    engine.open_proposals_registration(ADMIN)
    return engine


@pytest.fixture
def voting_engine(proposals_open_engine) -> ElectionEngine:
    """Two proposals (Proposal1, Proposal2) and an open voting session"""
    engine = proposals_open_engine
    engine.submit_proposal(ALICE, "Proposal1")
    engine.submit_proposal(BOB, "Proposal2")
    engine.close_proposals_registration(ADMIN)
    engine.open_voting_session(ADMIN)
    return engine


@pytest.fixture
def make_token() -> Callable[..., str]:
    def _make(identity: str, **claims) -> str:
        payload = {"sub": identity, "name": identity.title(), **claims}
        return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    return _make


@pytest.fixture
def auth_headers(make_token) -> Callable[[str], Dict[str, str]]:
    def _headers(identity: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(identity)}"}
    return _headers


@pytest.fixture
def client() -> Generator:
    """API client bound to its own in-memory election"""
    from fastapi.testclient import TestClient
    from election.main import create_app
    from election.services.election_service import build_election_service

    app = create_app(build_election_service(settings, event_log=InMemoryEventLog()))
    with TestClient(app) as test_client:
        yield test_client
