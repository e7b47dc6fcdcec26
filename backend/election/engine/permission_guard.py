"""Permission Guard - Authorization enforcement for election operations"""
from typing import Callable, Optional

from ..domain.errors import AdminRequiredError, VoterNotRegisteredError
from ..utils.logger import get_logger
from .registry import VoterRegistry

logger = get_logger(__name__)


AdminPredicate = Callable[[str], bool]


class SingleAdminAuthority:
    """Capability check that recognises exactly one administrator identity"""
    
    def __init__(self, admin_identity: str):
        if not admin_identity:
            raise ValueError("admin_identity must be a non-empty identity")
        self.admin_identity = admin_identity
    
    def __call__(self, identity: str) -> bool:
        return identity == self.admin_identity
    
    def __repr__(self) -> str:
        return f"SingleAdminAuthority({self.admin_identity!r})"


class PermissionGuard:
    """
    Permission enforcement for election operations
    
    Rules:
    - Phase changes, voter registration and bulk proposals are admin-only
    - Proposal submission and voting require a registered voter
    - Queries are open to every caller
    """
    
    def __init__(self, is_admin: AdminPredicate, voters: VoterRegistry):
        self._is_admin = is_admin
        self._voters = voters
    
    def is_admin(self, actor_id: Optional[str]) -> bool:
        return bool(actor_id) and self._is_admin(actor_id)
    
    def is_registered_voter(self, actor_id: Optional[str]) -> bool:
        return bool(actor_id) and self._voters.is_registered(actor_id)
    
    def require_admin(self, actor_id: Optional[str], operation: str) -> None:
        """Raise AdminRequiredError unless actor_id is the administrator"""
        if self.is_admin(actor_id):
            return
        logger.warning(
            f"{operation} denied: caller is not the administrator",
            extra={"actor_id": actor_id, "operation": operation}
        )
        raise AdminRequiredError(
            f"Only the administrator may perform {operation}",
            details={"actor_id": actor_id, "operation": operation}
        )
    
    def require_registered_voter(self, actor_id: Optional[str], operation: str) -> None:
        """Raise VoterNotRegisteredError unless actor_id is a registered voter"""
        if self.is_registered_voter(actor_id):
            return
        logger.warning(
            f"{operation} denied: caller is not a registered voter",
            extra={"actor_id": actor_id, "operation": operation}
        )
        raise VoterNotRegisteredError(
            f"Only registered voters may perform {operation}",
            details={"actor_id": actor_id, "operation": operation}
        )
