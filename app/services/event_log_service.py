"""
Event Log Service - resource_analytics collection.

Every download, in-site view and bookmark appends one document:
    {resource_id, action, user_id, created_at}

The log is append-only: several events per resource are expected and all
of them count. Nothing here updates or deletes events.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Iterable

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from app.db.mongodb import get_collection, COLLECTIONS
from app.schemas.schemas import AnalyticsAction

logger = logging.getLogger(__name__)

TRACKED_ACTIONS = {action.value for action in AnalyticsAction}


# ============================================================
# HELPER: Strip Mongo internals for plain dict consumers
# ============================================================

def serialize_event(doc: dict) -> dict:
    """Convert an event document to a plain JSON-serializable dict."""
    if doc is None:
        return None
    doc.pop("_id", None)
    if doc.get("resource_id") is not None:
        doc["resource_id"] = str(doc["resource_id"])
    return doc


class ResourceEventService:
    """
    Handles the resource_analytics event log.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["resource_analytics"])

    def insert(self, resource_id: str, action: str, user_id: Optional[str] = None) -> str:
        """
        Append one event.

        Args:
            resource_id: PostgreSQL resource id (foreign reference)
            action: "download", "view" or "bookmark"
            user_id: Acting user, None for anonymous visitors

        Returns:
            MongoDB ObjectId as string
        """
        if action not in TRACKED_ACTIONS:
            raise ValueError(f"Unknown analytics action '{action}'")

        doc = {
            "resource_id": str(resource_id),
            "action": action,
            "user_id": user_id,
            "created_at": datetime.now(timezone.utc)
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def record(self, resource_id: str, action: str, user_id: Optional[str] = None) -> bool:
        """
        Best-effort insert used by the tracking routes.

        A failed write is logged and reported as False; the user-facing
        download/view/bookmark still goes through.
        """
        try:
            self.insert(resource_id, action, user_id)
            return True
        except PyMongoError as e:
            logger.warning("Could not record %s event for resource %s: %s", action, resource_id, e)
            return False

    def get_events(self, resource_ids: Optional[Iterable[str]] = None) -> List[dict]:
        """Fetch events (resource_id and action only), optionally for some resources."""
        query = {}
        if resource_ids is not None:
            query["resource_id"] = {"$in": [str(rid) for rid in resource_ids]}

        cursor = self.collection.find(query, {"_id": 0, "resource_id": 1, "action": 1})
        return [serialize_event(doc) for doc in cursor]
