"""Transition Resolver - Phase transition table and phase guards"""
from typing import Dict, Optional, Tuple, Type

from ..domain.enums import WorkflowPhase, EngineOperation
from ..domain.errors import InvalidPhaseError, ProposalsNotOpenError, TransitionTableError
from ..utils.logger import get_logger

logger = get_logger(__name__)


# operation -> (required phase, next phase)
PHASE_TRANSITIONS: Dict[EngineOperation, Tuple[WorkflowPhase, WorkflowPhase]] = {
    EngineOperation.OPEN_PROPOSALS_REGISTRATION: (
        WorkflowPhase.REGISTERING_VOTERS,
        WorkflowPhase.PROPOSALS_REGISTRATION_STARTED,
    ),
    EngineOperation.CLOSE_PROPOSALS_REGISTRATION: (
        WorkflowPhase.PROPOSALS_REGISTRATION_STARTED,
        WorkflowPhase.PROPOSALS_REGISTRATION_ENDED,
    ),
    EngineOperation.OPEN_VOTING_SESSION: (
        WorkflowPhase.PROPOSALS_REGISTRATION_ENDED,
        WorkflowPhase.VOTING_SESSION_STARTED,
    ),
    EngineOperation.CLOSE_VOTING_SESSION: (
        WorkflowPhase.VOTING_SESSION_STARTED,
        WorkflowPhase.VOTING_SESSION_ENDED,
    ),
    EngineOperation.TALLY_VOTES: (
        WorkflowPhase.VOTING_SESSION_ENDED,
        WorkflowPhase.VOTES_TALLIED,
    ),
}

# Non-transition operations that may only run in one phase.
# Operations missing from both tables are allowed in every phase.
PHASE_REQUIREMENTS: Dict[EngineOperation, WorkflowPhase] = {
    EngineOperation.ADD_PROPOSALS: WorkflowPhase.PROPOSALS_REGISTRATION_STARTED,
    EngineOperation.SUBMIT_PROPOSAL: WorkflowPhase.PROPOSALS_REGISTRATION_STARTED,
    EngineOperation.CAST_VOTE: WorkflowPhase.VOTING_SESSION_STARTED,
}

PHASE_ERRORS: Dict[EngineOperation, Type[InvalidPhaseError]] = {
    EngineOperation.ADD_PROPOSALS: ProposalsNotOpenError,
}


def validate_transition_table(
    transitions: Dict[EngineOperation, Tuple[WorkflowPhase, WorkflowPhase]]
) -> None:
    """
    Check the table forms a single forward chain over every phase
    
    Every non-terminal phase needs exactly one outgoing transition and it
    must lead to the phase's immediate successor. The terminal phase has none.
    
    Raises:
        TransitionTableError: On any gap, skip, backward step or duplicate
    """
    outgoing: Dict[WorkflowPhase, EngineOperation] = {}
    
    for operation, (source, target) in transitions.items():
        if source in outgoing:
            raise TransitionTableError(
                f"Phase {source.value} has more than one transition",
                details={"phase": source.value, "operations": [outgoing[source].value, operation.value]}
            )
        if source.successor != target:
            raise TransitionTableError(
                f"{operation.value} does not advance {source.value} by exactly one step",
                details={"operation": operation.value, "from": source.value, "to": target.value}
            )
        outgoing[source] = operation
    
    for phase in WorkflowPhase:
        if not phase.is_terminal and phase not in outgoing:
            raise TransitionTableError(
                f"Phase {phase.value} has no outgoing transition",
                details={"phase": phase.value}
            )


validate_transition_table(PHASE_TRANSITIONS)


class TransitionResolver:
    """
    Resolve phase changes and phase requirements for engine operations
    
    Given current phase P and operation O:
    1. If O is a transition, P must be its source phase; returns the target
    2. If O has a phase requirement, P must equal it
    3. Otherwise O is legal in any phase
    """
    
    def __init__(
        self,
        transitions: Optional[Dict[EngineOperation, Tuple[WorkflowPhase, WorkflowPhase]]] = None
    ):
        if transitions is None:
            transitions = PHASE_TRANSITIONS
        else:
            validate_transition_table(transitions)
        self.transitions = transitions
    
    def is_transition(self, operation: EngineOperation) -> bool:
        return operation in self.transitions
    
    def resolve_next_phase(
        self,
        current_phase: WorkflowPhase,
        operation: EngineOperation
    ) -> WorkflowPhase:
        """
        Resolve the phase reached by a transition operation
        
        Raises:
            InvalidPhaseError: If the operation is not legal in current_phase
        """
        if operation not in self.transitions:
            raise InvalidPhaseError(
                f"{operation.value} is not a phase transition",
                details={"operation": operation.value, "current_phase": current_phase.value}
            )
        
        source, target = self.transitions[operation]
        if current_phase != source:
            raise InvalidPhaseError(
                f"{operation.value} requires phase {source.value}, current phase is {current_phase.value}",
                details={
                    "operation": operation.value,
                    "required_phase": source.value,
                    "current_phase": current_phase.value
                }
            )
        
        logger.debug(
            f"Resolved transition: {source.value} -> {target.value}",
            extra={"operation": operation.value, "phase": source.value}
        )
        return target
    
    def ensure_phase(self, current_phase: WorkflowPhase, operation: EngineOperation) -> None:
        """
        Check a non-transition operation is legal in the current phase
        
        Raises:
            InvalidPhaseError: Or the operation-specific subclass
        """
        if operation in self.transitions:
            self.resolve_next_phase(current_phase, operation)
            return
        
        required = PHASE_REQUIREMENTS.get(operation)
        if required is None or current_phase == required:
            return
        
        error_cls = PHASE_ERRORS.get(operation, InvalidPhaseError)
        raise error_cls(
            f"{operation.value} requires phase {required.value}, current phase is {current_phase.value}",
            details={
                "operation": operation.value,
                "required_phase": required.value,
                "current_phase": current_phase.value
            }
        )
    
    def get_available_operations(self, current_phase: WorkflowPhase) -> list:
        """Operations that are phase-legal right now (roles not considered)"""
        available = []
        for operation in EngineOperation:
            if operation in self.transitions:
                if self.transitions[operation][0] == current_phase:
                    available.append(operation)
            elif PHASE_REQUIREMENTS.get(operation, current_phase) == current_phase:
                available.append(operation)
        return available
