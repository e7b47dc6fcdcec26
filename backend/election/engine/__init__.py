"""Election Engine - The brain of the system"""
from .engine import ElectionEngine
from .permission_guard import PermissionGuard, SingleAdminAuthority
from .transition_resolver import TransitionResolver
from .event_writer import EventWriter
from .registry import VoterRegistry, ProposalRegistry

__all__ = [
    "ElectionEngine",
    "PermissionGuard",
    "SingleAdminAuthority",
    "TransitionResolver",
    "EventWriter",
    "VoterRegistry",
    "ProposalRegistry",
]
