"""Event Log - Append-only sinks for election events

The engine only ever appends. Reads are for external observers (the HTTP
API, audits, tests).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable
from pymongo import ASCENDING
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from ..domain.models import ElectionEvent
from ..domain.enums import ElectionEventType
from ..domain.errors import EventLogError
from ..utils.logger import get_logger
from ..utils.time import to_utc

logger = get_logger(__name__)


@runtime_checkable
class EventLog(Protocol):
    """Write-only sink from the engine's point of view"""
    
    def append(self, event: ElectionEvent) -> ElectionEvent:
        ...
    
    def list_events(
        self,
        event_types: Optional[Sequence[ElectionEventType]] = None,
        since_sequence: int = 0,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[ElectionEvent]:
        ...
    
    def count(self) -> int:
        ...


class InMemoryEventLog:
    """Event log kept in a Python list"""
    
    def __init__(self):
        self._events: List[ElectionEvent] = []
    
    def append(self, event: ElectionEvent) -> ElectionEvent:
        self._events.append(event)
        return event
    
    def list_events(
        self,
        event_types: Optional[Sequence[ElectionEventType]] = None,
        since_sequence: int = 0,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[ElectionEvent]:
        """Events in append order, optionally filtered"""
        events = [
            e for e in self._events
            if e.sequence > since_sequence
            and (not event_types or e.event_type in event_types)
            and (since is None or e.timestamp >= to_utc(since))
        ]
        if limit is not None:
            events = events[:limit]
        return [e.model_copy() for e in events]
    
    def count(self) -> int:
        return len(self._events)


class MongoEventLog:
    """Event log persisted to a MongoDB collection (append-only)"""
    
    def __init__(self, collection: Optional[Collection] = None):
        if collection is None:
            from ..config.settings import settings
            from .mongo_client import get_collection
            collection = get_collection(settings.events_collection)
        self._events: Collection = collection
    
    def append(self, event: ElectionEvent) -> ElectionEvent:
        """Insert one event document keyed by its event ID"""
        doc = event.model_dump(mode="json")
        doc["_id"] = event.event_id
        # Stored as a BSON date so range queries compare instants
        doc["timestamp"] = to_utc(event.timestamp)
        
        try:
            self._events.insert_one(doc)
        except PyMongoError as e:
            logger.error(
                f"Failed to append election event: {e}",
                extra={"event_type": event.event_type.value}
            )
            raise EventLogError(
                "Event log rejected election event",
                details={"event_id": event.event_id, "sequence": event.sequence}
            ) from e
        
        logger.debug(
            f"Appended election event: {event.event_type.value}",
            extra={"event_type": event.event_type.value}
        )
        return event
    
    def list_events(
        self,
        event_types: Optional[Sequence[ElectionEventType]] = None,
        since_sequence: int = 0,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[ElectionEvent]:
        """Events ordered by sequence, optionally filtered"""
        query: Dict[str, Any] = {"sequence": {"$gt": since_sequence}}
        
        if event_types:
            query["event_type"] = {"$in": [et.value for et in event_types]}
        if since is not None:
            query["timestamp"] = {"$gte": to_utc(since)}
        
        cursor = self._events.find(query).sort("sequence", ASCENDING)
        if limit is not None:
            cursor = cursor.limit(limit)
        
        events = []
        for doc in cursor:
            doc.pop("_id", None)
            if isinstance(doc.get("timestamp"), datetime):
                # pymongo hands dates back naive, in UTC
                doc["timestamp"] = to_utc(doc["timestamp"])
            events.append(ElectionEvent.model_validate(doc))
        
        return events
    
    def count(self) -> int:
        return self._events.count_documents({})
