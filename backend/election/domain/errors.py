"""Domain Errors - Centralized Exception Hierarchy"""
from typing import Any, Dict, Optional


class DomainError(Exception):
    """Base domain error - all errors extend this"""
    
    error_code: str = "DOMAIN_ERROR"
    http_status: int = 400
    
    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        if error_code:
            self.error_code = error_code
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert error to API response dict"""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


# Authentication & Authorization Errors
class AuthenticationError(DomainError):
    """Token missing, invalid, or expired"""
    error_code = "AUTHENTICATION_ERROR"
    http_status = 401


class AuthorizationError(DomainError):
    """Caller lacks permission for action"""
    error_code = "AUTHORIZATION_ERROR"
    http_status = 403


class UnauthorizedError(AuthorizationError):
    """Caller lacks the role an election operation requires"""
    error_code = "UNAUTHORIZED"


class AdminRequiredError(UnauthorizedError):
    """Operation is reserved to the election administrator"""
    error_code = "ADMIN_REQUIRED"


class VoterNotRegisteredError(UnauthorizedError):
    """Operation is reserved to registered voters"""
    error_code = "VOTER_NOT_REGISTERED"


# Validation Errors
class ValidationError(DomainError):
    """Input validation failed"""
    error_code = "VALIDATION_ERROR"
    http_status = 400


class InvalidProposalIndexError(ValidationError):
    """Vote references a proposal index that does not exist"""
    error_code = "INVALID_PROPOSAL_INDEX"


# Not Found Errors
class NotFoundError(DomainError):
    """Resource not found"""
    error_code = "NOT_FOUND"
    http_status = 404


class ProposalIndexOutOfRangeError(NotFoundError):
    """Proposal lookup outside the proposal sequence"""
    error_code = "INDEX_OUT_OF_RANGE"


# Conflict Errors
class ConflictError(DomainError):
    """Resource conflict"""
    error_code = "CONFLICT"
    http_status = 409


class InvalidStateError(ConflictError):
    """Action not valid for current state"""
    error_code = "INVALID_STATE"


class InvalidPhaseError(InvalidStateError):
    """Operation attempted outside its workflow phase"""
    error_code = "INVALID_PHASE"


class ProposalsNotOpenError(InvalidPhaseError):
    """Bulk proposal registration attempted while registration is closed"""
    error_code = "PROPOSALS_NOT_OPEN"


class AlreadyExistsError(ConflictError):
    """Resource already exists"""
    error_code = "ALREADY_EXISTS"


class DuplicateProposalError(AlreadyExistsError):
    """A proposal with the same description is already registered"""
    error_code = "DUPLICATE_PROPOSAL"


class AlreadyVotedError(ConflictError):
    """Voter has already cast their vote"""
    error_code = "ALREADY_VOTED"


class EventLogNotEmptyError(InvalidStateError):
    """Event log already holds another election"""
    error_code = "EVENT_LOG_NOT_EMPTY"


# Engine Errors
class EngineError(DomainError):
    """Election engine error"""
    error_code = "ENGINE_ERROR"
    http_status = 500


class TransitionTableError(EngineError):
    """Phase transition table is not a single forward chain"""
    error_code = "TRANSITION_TABLE_ERROR"


# External Service Errors
class ExternalServiceError(DomainError):
    """External service failure"""
    error_code = "EXTERNAL_SERVICE_ERROR"
    http_status = 502


class EventLogError(ExternalServiceError):
    """Event log sink failed to accept an event"""
    error_code = "EVENT_LOG_ERROR"
