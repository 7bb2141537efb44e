"""
Analytics Service - Mentor dashboard usage figures

PURPOSE:
Turn three independently fetched sources into dashboard numbers:
1. resource_analytics events (MongoDB)  - raw download/view/bookmark log
2. resources.download_count (PostgreSQL) - denormalized counter, may lag
3. bookmarks rows (PostgreSQL)           - counted, not inspected

RECONCILIATION:
    effective(r) = event_counts[r.id] ?? r.download_count ?? 0

The fallback is decided per resource: a resource with no download events
falls back to its counter even when other resources do have events. That
can mix live and stale figures in one leaderboard.

If the event log cannot be reached the summary is still produced from
the counters alone, flagged with events_available = False.
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional

from pymongo.errors import PyMongoError

from app.core.config import get_settings
from app.services.event_log_service import ResourceEventService
from app.services.resource_service import ResourceService

logger = logging.getLogger(__name__)

DOWNLOAD_ACTION = "download"
VIEW_ACTION = "view"


# ============================================================
# PURE AGGREGATION
# ============================================================

def _as_count(value) -> Optional[int]:
    """Coerce a counter field to int; anything unusable is treated as missing."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def count_events_by_resource(events: Iterable[dict], action: str = DOWNLOAD_ACTION) -> Dict[str, int]:
    """
    Count events of one action per resource_id.

    Resources without a matching event are absent from the mapping
    (not present with 0) so the fallback can tell them apart.
    """
    counts: Counter = Counter()
    for event in events:
        if event.get("action") == action and event.get("resource_id") is not None:
            counts[str(event["resource_id"])] += 1
    return dict(counts)


def effective_download_count(resource: dict, event_counts: Optional[Dict[str, int]]) -> int:
    """Two-tier lookup: live event count, then denormalized counter, then 0."""
    if event_counts:
        live = event_counts.get(str(resource.get("id")))
        if live is not None:
            return live

    fallback = _as_count(resource.get("download_count"))
    return fallback if fallback is not None else 0


def rank_resources(
    resources: Iterable[dict],
    event_counts: Optional[Dict[str, int]],
    top_n: int
) -> List[dict]:
    """
    Top-N resources by effective download count, descending.

    sorted() is stable, so equal counts keep their input order.
    """
    scored = [
        {"resource": resource, "effective_count": effective_download_count(resource, event_counts)}
        for resource in resources
    ]
    scored = sorted(scored, key=lambda entry: entry["effective_count"], reverse=True)
    return scored[:max(top_n, 0)]


def summarize(
    resources: List[dict],
    events: Optional[List[dict]],
    bookmarks: List[dict],
    top_n: int = 5
) -> dict:
    """
    Build the dashboard summary.

    Args:
        resources: Resource rows (id, download_count, ...)
        events: resource_analytics rows, or None when the event log is unreachable
        bookmarks: Bookmark rows, only counted
        top_n: Leaderboard length

    Returns:
        {total_downloads, total_views, total_bookmarks, events_available, top}
    """
    if events is None:
        event_counts = None
        total_downloads = sum(effective_download_count(r, None) for r in resources)
        total_views = 0
    else:
        event_counts = count_events_by_resource(events, DOWNLOAD_ACTION)
        total_downloads = sum(1 for e in events if e.get("action") == DOWNLOAD_ACTION)
        total_views = sum(1 for e in events if e.get("action") == VIEW_ACTION)

    return {
        "total_downloads": total_downloads,
        "total_views": total_views,
        "total_bookmarks": len(bookmarks),
        "events_available": events is not None,
        "top": rank_resources(resources, event_counts, top_n),
    }


# ============================================================
# DASHBOARD SERVICE (fetch + aggregate)
# ============================================================

class AnalyticsService:
    """
    Fetches the current snapshot and runs the aggregation on it.

    Nothing is cached: every call refetches and recomputes.
    """

    def __init__(self):
        self.resource_service = ResourceService()
        self.event_service = ResourceEventService()

    def _fetch_events(self, resource_ids: Optional[List[str]] = None) -> Optional[List[dict]]:
        try:
            return self.event_service.get_events(resource_ids=resource_ids)
        except PyMongoError as e:
            logger.warning("Event log unreachable, falling back to download_count: %s", e)
            return None

    def build_summary(self, top_n: Optional[int] = None, uploaded_by: Optional[str] = None) -> dict:
        if top_n is None:
            top_n = get_settings().analytics_top_n

        resources = self.resource_service.get_resources(uploaded_by=uploaded_by)
        # Scoped to one uploader, the totals describe only that uploader's resources
        resource_ids = [str(r["id"]) for r in resources] if uploaded_by else None
        bookmarks = self.resource_service.get_all_bookmarks(resource_ids=resource_ids)
        events = self._fetch_events(resource_ids)

        summary = summarize(resources, events, bookmarks, top_n=top_n)
        logger.info(
            "Analytics summary: %d resources, %d bookmarks, events_available=%s",
            len(resources), summary["total_bookmarks"], summary["events_available"]
        )
        return summary


# ============================================================
# CONVENIENCE FUNCTIONS
# ============================================================

def get_analytics_service() -> AnalyticsService:
    """Get analytics service instance."""
    return AnalyticsService()
