"""Repository modules - Event log sinks"""
from .event_log import EventLog, InMemoryEventLog, MongoEventLog

__all__ = [
    "EventLog",
    "InMemoryEventLog",
    "MongoEventLog",
]
