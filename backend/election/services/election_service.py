"""Election Service - Election operations for authenticated callers"""
from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime

from ..config.settings import Settings, settings as default_settings
from ..domain.models import ActorContext, ElectionEvent, Proposal, Voter
from ..domain.enums import ElectionEventType, EngineOperation, EventLogBackend, WorkflowPhase
from ..engine.engine import ElectionEngine
from ..engine.permission_guard import SingleAdminAuthority
from ..repositories.event_log import EventLog, InMemoryEventLog, MongoEventLog
from .event_audit import AuditReport, audit_events
from ..utils.logger import get_logger

logger = get_logger(__name__)


class ElectionService:
    """Service for election operations"""
    
    def __init__(self, engine: ElectionEngine):
        self.engine = engine
    
    # Voters
    
    def register_voters(
        self,
        identities: Sequence[str],
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        registered = self.engine.register_voters(actor.identity, identities, correlation_id)
        return {
            "registered": registered,
            "registered_voter_count": self.engine.registered_voter_count(),
        }
    
    def get_voter(self, identity: str) -> Voter:
        return self.engine.get_voter(identity)
    
    # Proposals
    
    def add_proposals(
        self,
        descriptions: Sequence[str],
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        indices = self.engine.add_proposals(actor.identity, descriptions, correlation_id)
        return {"proposal_indices": indices}
    
    def submit_proposal(
        self,
        description: str,
        actor: ActorContext,
        reject_duplicates: bool = False,
        correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        if reject_duplicates:
            index = self.engine.submit_proposal_no_duplicate(actor.identity, description, correlation_id)
        else:
            index = self.engine.submit_proposal(actor.identity, description, correlation_id)
        return {"proposal_index": index, "description": description}
    
    def list_proposals(self) -> List[Dict[str, Any]]:
        return [
            {"proposal_index": index, **proposal.model_dump()}
            for index, proposal in enumerate(self.engine.list_proposals())
        ]
    
    def get_proposal(self, index: int) -> Proposal:
        return self.engine.get_proposal(index)
    
    # Voting
    
    def cast_vote(
        self,
        proposal_index: int,
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        proposal = self.engine.cast_vote(actor.identity, proposal_index, correlation_id)
        return {
            "voter_id": actor.identity,
            "proposal_index": proposal_index,
            "vote_count": proposal.vote_count,
        }
    
    # Phase transitions
    
    def change_phase(
        self,
        operation: EngineOperation,
        actor: ActorContext,
        correlation_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Run one of the admin phase transitions"""
        transitions = {
            EngineOperation.OPEN_PROPOSALS_REGISTRATION: self.engine.open_proposals_registration,
            EngineOperation.CLOSE_PROPOSALS_REGISTRATION: self.engine.close_proposals_registration,
            EngineOperation.OPEN_VOTING_SESSION: self.engine.open_voting_session,
            EngineOperation.CLOSE_VOTING_SESSION: self.engine.close_voting_session,
            EngineOperation.TALLY_VOTES: self.engine.tally_votes,
        }
        new_phase = transitions[operation](actor.identity, correlation_id)
        previous_phase, _ = self.engine.transition_resolver.transitions[operation]
        return {
            "previous_phase": previous_phase.value,
            "phase": new_phase.value,
        }
    
    # Queries
    
    def get_status(self) -> Dict[str, Any]:
        snapshot = self.engine.snapshot()
        return {
            "phase": snapshot.phase.value,
            "registered_voter_count": sum(1 for v in snapshot.voters.values() if v.is_registered),
            "voted_count": snapshot.voted_count,
            "proposal_count": len(snapshot.proposals),
            "total_votes": snapshot.total_votes,
            "available_operations": [op.value for op in self.engine.available_operations()],
        }
    
    def get_winner(self) -> Dict[str, Any]:
        """Winning proposal; raises ProposalIndexOutOfRangeError when there are none"""
        winning_id, proposal, phase = self.engine.winning_proposal()
        return {
            "proposal_index": winning_id,
            "description": proposal.description,
            "vote_count": proposal.vote_count,
            "phase": phase.value,
            "final": phase in (WorkflowPhase.VOTING_SESSION_ENDED, WorkflowPhase.VOTES_TALLIED),
        }
    
    def list_events(
        self,
        event_types: Optional[Sequence[ElectionEventType]] = None,
        since_sequence: int = 0,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[ElectionEvent]:
        return self.engine.event_log.list_events(
            event_types=event_types,
            since_sequence=since_sequence,
            since=since,
            limit=limit
        )
    
    def audit_events(self) -> AuditReport:
        """Replay the whole event log and compare it with the live engine"""
        snapshot, events = self.engine.snapshot_with_events()
        report = audit_events(events)
        if report.phase != snapshot.phase:
            report.violations.append(
                f"log ends in {report.phase.value}, engine is in {snapshot.phase.value}"
            )
        live_counts = [p.vote_count for p in snapshot.proposals]
        if report.vote_counts != live_counts:
            report.violations.append(f"log tallies {report.vote_counts}, engine holds {live_counts}")
        return report


def build_event_log(config: Settings) -> EventLog:
    """Create the event log sink selected by configuration"""
    backend = EventLogBackend(config.event_log_backend)
    if backend == EventLogBackend.MONGO:
        from ..repositories.mongo_client import get_collection
        logger.info(f"Using MongoDB event log: {config.mongo_db}.{config.events_collection}")
        return MongoEventLog(get_collection(config.events_collection))
    logger.info("Using in-memory event log")
    return InMemoryEventLog()


def build_election_service(
    config: Optional[Settings] = None,
    event_log: Optional[EventLog] = None
) -> ElectionService:
    """Wire a fresh engine from settings"""
    config = config or default_settings
    engine = ElectionEngine(
        is_admin=SingleAdminAuthority(config.admin_identity),
        event_log=event_log if event_log is not None else build_event_log(config)
    )
    return ElectionService(engine)
