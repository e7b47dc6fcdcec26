"""
Election Engine - The Brain of the System

This module contains the ElectionEngine class that owns the election state
and sequences every operation on it.

=============================================================================
MODULE STRUCTURE
=============================================================================

1. INITIALIZATION
   - Constructor with injected authority and event log

2. VOTER REGISTRATION
   - register_voters: Admin bulk registration (any phase)

3. PROPOSALS
   - add_proposals: Admin bulk registration
   - submit_proposal: Single submission by a registered voter
   - submit_proposal_no_duplicate: Same, rejecting exact duplicates

4. VOTING
   - cast_vote: One vote per registered voter

5. PHASE TRANSITIONS
   - open_proposals_registration / close_proposals_registration
   - open_voting_session / close_voting_session
   - tally_votes: Finalize into the terminal phase

6. QUERIES
   - winning_proposal_id / winning_proposal_description
   - phase, get_voter, get_proposal, list_proposals, snapshot

=============================================================================
GUARD DISCIPLINE
=============================================================================

Each operation runs under the engine lock and in three stages:
authorization -> phase -> operation-specific guards. All guards complete
before the first write, so a failed call changes nothing and emits nothing.
Events are appended while the lock is still held.

=============================================================================
"""

import threading
from typing import Callable, Iterable, List, Optional, Tuple

from ..domain.models import Voter, Proposal, ElectionSnapshot, ElectionEvent
from ..domain.enums import WorkflowPhase, EngineOperation
from ..domain.errors import (
    AlreadyVotedError, DuplicateProposalError, EventLogNotEmptyError,
    InvalidProposalIndexError, ValidationError
)
from ..repositories.event_log import EventLog, InMemoryEventLog
from .permission_guard import PermissionGuard
from .transition_resolver import TransitionResolver
from .event_writer import EventWriter
from .registry import VoterRegistry, ProposalRegistry
from ..utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


class ElectionEngine:
    """
    The Election Engine - Central state machine for one election

    Responsibilities:
    - Own the voter registry, proposal sequence and workflow phase
    - Enforce administrator and registered-voter permissions
    - Advance the phase one step at a time, never backwards
    - Write one event per state change to the event log
    - Serialize all callers behind a single lock
    """

    def __init__(
        self,
        is_admin: Callable[[str], bool],
        event_log: Optional[EventLog] = None,
        transition_resolver: Optional[TransitionResolver] = None
    ):
        self._lock = threading.RLock()
        self._phase = WorkflowPhase.REGISTERING_VOTERS
        self.voters = VoterRegistry()
        self.proposals = ProposalRegistry()
        self.event_log = event_log if event_log is not None else InMemoryEventLog()
        existing = self.event_log.count()
        if existing:
            logger.error(f"Refusing to start an election on an event log holding {existing} event(s)")
            raise EventLogNotEmptyError(
                "Event log already holds events from another election",
                details={"event_count": existing}
            )
        self.permission_guard = PermissionGuard(is_admin, self.voters)
        self.transition_resolver = transition_resolver or TransitionResolver()
        self.event_writer = EventWriter(self.event_log)

    # =========================================================================
    # VOTER REGISTRATION
    # =========================================================================

    def register_voters(
        self,
        actor_id: str,
        identities: Iterable[str],
        correlation_id: Optional[str] = None
    ) -> List[str]:
        """
        Register voters (admin only, any phase)

        Re-registering an identity has no effect on its record but the
        registration event is written again.

        Returns:
            The identities processed, in input order
        """
        identities = list(identities)
        correlation_id = correlation_id or get_correlation_id()

        with self._lock:
            self.permission_guard.require_admin(actor_id, EngineOperation.REGISTER_VOTERS.value)
            self.transition_resolver.ensure_phase(self._phase, EngineOperation.REGISTER_VOTERS)
            for identity in identities:
                if not isinstance(identity, str) or not identity:
                    raise ValidationError(
                        "Voter identity must be a non-empty string",
                        details={"identity": identity}
                    )

            for identity in identities:
                self.voters.register(identity)
                self.event_writer.write_voter_registered(actor_id, identity, correlation_id)

            logger.info(
                f"Registered {len(identities)} voter(s)",
                extra={"actor_id": actor_id, "operation": EngineOperation.REGISTER_VOTERS.value}
            )
            return identities

    # =========================================================================
    # PROPOSALS
    # =========================================================================

    def add_proposals(
        self,
        actor_id: str,
        descriptions: Iterable[str],
        correlation_id: Optional[str] = None
    ) -> List[int]:
        """
        Register proposals in bulk (admin only), keeping input order

        No duplicate checking is applied.

        Returns:
            Indices assigned to the new proposals
        """
        descriptions = list(descriptions)
        correlation_id = correlation_id or get_correlation_id()

        with self._lock:
            self.permission_guard.require_admin(actor_id, EngineOperation.ADD_PROPOSALS.value)
            self.transition_resolver.ensure_phase(self._phase, EngineOperation.ADD_PROPOSALS)
            self._require_descriptions(descriptions)

            indices = []
            for description in descriptions:
                index = self.proposals.append(description)
                self.event_writer.write_proposal_registered(actor_id, index, correlation_id)
                indices.append(index)

            logger.info(
                f"Added {len(indices)} proposal(s)",
                extra={"actor_id": actor_id, "operation": EngineOperation.ADD_PROPOSALS.value}
            )
            return indices

    def submit_proposal(
        self,
        actor_id: str,
        description: str,
        correlation_id: Optional[str] = None
    ) -> int:
        """Submit one proposal as a registered voter; returns its index"""
        correlation_id = correlation_id or get_correlation_id()

        with self._lock:
            self._check_can_submit(actor_id, description)
            return self._append_proposal(actor_id, description, correlation_id)

    def submit_proposal_no_duplicate(
        self,
        actor_id: str,
        description: str,
        correlation_id: Optional[str] = None
    ) -> int:
        """
        Submit one proposal, rejecting an exact duplicate description

        The duplicate scan runs before the phase and registration checks.

        Raises:
            DuplicateProposalError: If the description is already registered
        """
        correlation_id = correlation_id or get_correlation_id()

        with self._lock:
            if self.proposals.contains_description(description):
                logger.warning(
                    "Duplicate proposal rejected",
                    extra={"actor_id": actor_id, "operation": EngineOperation.SUBMIT_PROPOSAL.value}
                )
                raise DuplicateProposalError(
                    "A proposal with this description already exists",
                    details={"description": description}
                )
            self._check_can_submit(actor_id, description)
            return self._append_proposal(actor_id, description, correlation_id)

    def _check_can_submit(self, actor_id: str, description: str) -> None:
        self.transition_resolver.ensure_phase(self._phase, EngineOperation.SUBMIT_PROPOSAL)
        self.permission_guard.require_registered_voter(actor_id, EngineOperation.SUBMIT_PROPOSAL.value)
        self._require_descriptions([description])

    @staticmethod
    def _require_descriptions(descriptions: List[str]) -> None:
        for description in descriptions:
            if not isinstance(description, str):
                raise ValidationError(
                    "Proposal description must be a string",
                    details={"description": repr(description)}
                )

    def _append_proposal(
        self,
        actor_id: str,
        description: str,
        correlation_id: Optional[str]
    ) -> int:
        index = self.proposals.append(description)
        self.event_writer.write_proposal_registered(actor_id, index, correlation_id)
        logger.info(
            f"Proposal {index} submitted",
            extra={"actor_id": actor_id, "proposal_index": index}
        )
        return index

    # =========================================================================
    # VOTING
    # =========================================================================

    def cast_vote(
        self,
        actor_id: str,
        proposal_index: int,
        correlation_id: Optional[str] = None
    ) -> Proposal:
        """
        Cast the caller's single vote

        Guards, in order: voting session open, caller registered, caller has
        not voted, proposal index in range.

        Returns:
            Copy of the voted proposal after the increment
        """
        correlation_id = correlation_id or get_correlation_id()

        with self._lock:
            self.transition_resolver.ensure_phase(self._phase, EngineOperation.CAST_VOTE)
            self.permission_guard.require_registered_voter(actor_id, EngineOperation.CAST_VOTE.value)

            voter = self.voters.get(actor_id)
            if voter.has_voted:
                logger.warning(
                    "Second vote rejected",
                    extra={"voter_id": actor_id, "proposal_index": voter.voted_proposal_id}
                )
                raise AlreadyVotedError(
                    "Voter has already voted",
                    details={"voter_id": actor_id}
                )

            if (
                not isinstance(proposal_index, int)
                or isinstance(proposal_index, bool)
                or not self.proposals.in_range(proposal_index)
            ):
                raise InvalidProposalIndexError(
                    f"Proposal index {proposal_index} is out of range",
                    details={"proposal_index": proposal_index, "proposal_count": len(self.proposals)}
                )

            self.voters.record_vote(actor_id, proposal_index)
            proposal = self.proposals.increment_votes(proposal_index)
            self.event_writer.write_voted(actor_id, proposal_index, correlation_id)

            logger.info(
                "Vote cast",
                extra={"voter_id": actor_id, "proposal_index": proposal_index}
            )
            return proposal.model_copy()

    # =========================================================================
    # PHASE TRANSITIONS
    # =========================================================================

    def open_proposals_registration(self, actor_id: str, correlation_id: Optional[str] = None) -> WorkflowPhase:
        return self._advance(actor_id, EngineOperation.OPEN_PROPOSALS_REGISTRATION, correlation_id)

    def close_proposals_registration(self, actor_id: str, correlation_id: Optional[str] = None) -> WorkflowPhase:
        return self._advance(actor_id, EngineOperation.CLOSE_PROPOSALS_REGISTRATION, correlation_id)

    def open_voting_session(self, actor_id: str, correlation_id: Optional[str] = None) -> WorkflowPhase:
        return self._advance(actor_id, EngineOperation.OPEN_VOTING_SESSION, correlation_id)

    def close_voting_session(self, actor_id: str, correlation_id: Optional[str] = None) -> WorkflowPhase:
        return self._advance(actor_id, EngineOperation.CLOSE_VOTING_SESSION, correlation_id)

    def tally_votes(self, actor_id: str, correlation_id: Optional[str] = None) -> WorkflowPhase:
        """Move into the terminal phase; results themselves are always readable"""
        return self._advance(actor_id, EngineOperation.TALLY_VOTES, correlation_id)

    def _advance(
        self,
        actor_id: str,
        operation: EngineOperation,
        correlation_id: Optional[str]
    ) -> WorkflowPhase:
        """Apply one admin-only phase transition"""
        correlation_id = correlation_id or get_correlation_id()

        with self._lock:
            self.permission_guard.require_admin(actor_id, operation.value)
            previous_phase = self._phase
            new_phase = self.transition_resolver.resolve_next_phase(previous_phase, operation)

            self._phase = new_phase
            self.event_writer.write_phase_changed(actor_id, previous_phase, new_phase, correlation_id)

            logger.info(
                f"Workflow phase changed: {previous_phase.value} -> {new_phase.value}",
                extra={"actor_id": actor_id, "operation": operation.value, "phase": new_phase.value}
            )
            return new_phase

    # =========================================================================
    # QUERIES
    # =========================================================================

    @property
    def phase(self) -> WorkflowPhase:
        with self._lock:
            return self._phase

    def winning_proposal_id(self) -> int:
        """Lowest-indexed proposal with the strictly highest vote count (0 by default)"""
        with self._lock:
            return self.proposals.winning_index()

    def winning_proposal_description(self) -> str:
        """
        Description of the winning proposal

        Raises:
            ProposalIndexOutOfRangeError: If no proposal has been registered
        """
        with self._lock:
            return self.proposals.get(self.proposals.winning_index()).description

    def winning_proposal(self) -> Tuple[int, Proposal, WorkflowPhase]:
        """
        Winner index, a copy of the winning proposal and the phase, read together

        Raises:
            ProposalIndexOutOfRangeError: If no proposal has been registered
        """
        with self._lock:
            index = self.proposals.winning_index()
            return index, self.proposals.get(index).model_copy(), self._phase

    def is_registered(self, identity: str) -> bool:
        with self._lock:
            return self.voters.is_registered(identity)

    def get_voter(self, identity: str) -> Voter:
        with self._lock:
            return self.voters.get(identity).model_copy()

    def get_proposal(self, index: int) -> Proposal:
        with self._lock:
            return self.proposals.get(index).model_copy()

    def list_proposals(self) -> List[Proposal]:
        with self._lock:
            return self.proposals.copy_records()

    def registered_voter_count(self) -> int:
        with self._lock:
            return self.voters.registered_count()

    def available_operations(self) -> List[EngineOperation]:
        with self._lock:
            return self.transition_resolver.get_available_operations(self._phase)

    def snapshot(self) -> ElectionSnapshot:
        """Consistent deep copy of phase, voters and proposals"""
        with self._lock:
            return ElectionSnapshot(
                phase=self._phase,
                voters=self.voters.copy_records(),
                proposals=self.proposals.copy_records()
            )

    def snapshot_with_events(self) -> Tuple[ElectionSnapshot, List[ElectionEvent]]:
        """Snapshot plus every logged event, read without an interleaving write"""
        with self._lock:
            return self.snapshot(), self.event_log.list_events()
