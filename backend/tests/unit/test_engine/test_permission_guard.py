"""Tests for permission checks and the administrator authority"""
import pytest

from election.domain.errors import AdminRequiredError, UnauthorizedError, VoterNotRegisteredError
from election.engine.permission_guard import PermissionGuard, SingleAdminAuthority
from election.engine.registry import VoterRegistry


@pytest.fixture
def guard():
    voters = VoterRegistry()
    voters.register("alice")
    return PermissionGuard(SingleAdminAuthority("admin"), voters)


def test_single_admin_authority():
    authority = SingleAdminAuthority("admin")
    assert authority("admin")
    assert not authority("Admin")
    assert not authority("alice")


def test_authority_requires_identity():
    with pytest.raises(ValueError):
        SingleAdminAuthority("")


def test_require_admin(guard):
    guard.require_admin("admin", "OPEN_VOTING_SESSION")
    with pytest.raises(AdminRequiredError) as exc_info:
        guard.require_admin("alice", "OPEN_VOTING_SESSION")
    assert isinstance(exc_info.value, UnauthorizedError)
    assert exc_info.value.http_status == 403
    assert exc_info.value.details["operation"] == "OPEN_VOTING_SESSION"


@pytest.mark.parametrize("actor_id", [None, ""])
def test_missing_identity_is_never_authorized(guard, actor_id):
    assert not guard.is_admin(actor_id)
    assert not guard.is_registered_voter(actor_id)


def test_require_registered_voter(guard):
    guard.require_registered_voter("alice", "CAST_VOTE")
    with pytest.raises(VoterNotRegisteredError):
        guard.require_registered_voter("mallory", "CAST_VOTE")


def test_admin_is_not_implicitly_a_voter(guard):
    with pytest.raises(VoterNotRegisteredError):
        guard.require_registered_voter("admin", "CAST_VOTE")


def test_any_predicate_can_be_injected():
    voters = VoterRegistry()
    guard = PermissionGuard(lambda identity: identity.startswith("ops:"), voters)
    guard.require_admin("ops:carol", "TALLY_VOTES")
    with pytest.raises(AdminRequiredError):
        guard.require_admin("carol", "TALLY_VOTES")
