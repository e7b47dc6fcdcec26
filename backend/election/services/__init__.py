"""Service modules - Business logic layer"""
from .election_service import ElectionService, build_election_service
from .event_audit import AuditReport, audit_events

__all__ = [
    "ElectionService",
    "build_election_service",
    "AuditReport",
    "audit_events",
]
