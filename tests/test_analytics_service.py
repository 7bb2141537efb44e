"""Tests for download-count reconciliation and the analytics summary."""

from unittest.mock import patch

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from app.services.analytics_service import (
    AnalyticsService,
    count_events_by_resource,
    effective_download_count,
    rank_resources,
    summarize,
)


def _download(resource_id):
    return {"resource_id": resource_id, "action": "download"}


def _view(resource_id):
    return {"resource_id": resource_id, "action": "view"}


class TestEffectiveDownloadCount:
    def test_event_count_wins_over_counter(self):
        counts = count_events_by_resource([_download("x"), _download("x")])
        assert effective_download_count({"id": "x", "download_count": 10}, counts) == 2

    def test_falls_back_per_resource(self):
        counts = count_events_by_resource([_download("x")])
        assert effective_download_count({"id": "y", "download_count": 7}, counts) == 7

    def test_missing_everything_is_zero(self):
        assert effective_download_count({"id": "z"}, {}) == 0
        assert effective_download_count({"id": "z", "download_count": None}, None) == 0

    def test_unusable_counter_is_zero(self):
        assert effective_download_count({"id": "z", "download_count": "lots"}, None) == 0

    def test_views_do_not_count_as_downloads(self):
        counts = count_events_by_resource([_view("x"), _view("x")])
        assert counts == {}
        assert effective_download_count({"id": "x", "download_count": 4}, counts) == 4

    def test_ids_compared_as_strings(self):
        counts = count_events_by_resource([_download(5)])
        assert effective_download_count({"id": 5, "download_count": 0}, counts) == 1


class TestRanking:
    def test_descending_and_stable(self):
        resources = [
            {"id": "a", "download_count": 5},
            {"id": "b", "download_count": 5},
            {"id": "c", "download_count": 3},
            {"id": "d", "download_count": 1},
        ]
        top = rank_resources(resources, None, top_n=2)
        assert [entry["resource"]["id"] for entry in top] == ["a", "b"]
        assert [entry["effective_count"] for entry in top] == [5, 5]

    def test_ties_keep_input_order_when_reversed(self):
        resources = [
            {"id": "b", "download_count": 5},
            {"id": "a", "download_count": 5},
        ]
        top = rank_resources(resources, None, top_n=2)
        assert [entry["resource"]["id"] for entry in top] == ["b", "a"]

    def test_top_n_larger_than_input(self):
        assert len(rank_resources([{"id": "a"}], None, top_n=5)) == 1

    def test_non_positive_top_n_is_empty(self):
        assert rank_resources([{"id": "a"}], None, top_n=0) == []
        assert rank_resources([{"id": "a"}], None, top_n=-3) == []

    def test_mixed_live_and_fallback(self):
        resources = [
            {"id": "live", "download_count": 100},
            {"id": "stale", "download_count": 7},
        ]
        counts = count_events_by_resource([_download("live")] * 3)
        top = rank_resources(resources, counts, top_n=2)
        assert [(e["resource"]["id"], e["effective_count"]) for e in top] == [
            ("stale", 7), ("live", 3)
        ]


class TestSummarize:
    def test_totals_are_independent_counts(self):
        resources = [{"id": "x", "download_count": 10}, {"id": "y", "download_count": 7}]
        events = [_download("x"), _download("x"), _view("y"),
                  {"resource_id": "y", "action": "bookmark"}]
        bookmarks = [{"id": "b1"}, {"id": "b2"}, {"id": "b3"}]

        summary = summarize(resources, events, bookmarks, top_n=5)

        assert summary["total_downloads"] == 2
        assert summary["total_views"] == 1
        assert summary["total_bookmarks"] == 3
        assert summary["events_available"] is True
        assert [(e["resource"]["id"], e["effective_count"]) for e in summary["top"]] == [
            ("y", 7), ("x", 2)
        ]

    def test_without_event_log(self):
        resources = [{"id": "x", "download_count": 10}, {"id": "y", "download_count": None}]

        summary = summarize(resources, None, [], top_n=5)

        assert summary["events_available"] is False
        assert summary["total_downloads"] == 10
        assert summary["total_views"] == 0
        assert [e["effective_count"] for e in summary["top"]] == [10, 0]

    def test_empty_snapshot(self):
        summary = summarize([], [], [], top_n=5)
        assert summary == {
            "total_downloads": 0,
            "total_views": 0,
            "total_bookmarks": 0,
            "events_available": True,
            "top": [],
        }


@pytest.fixture
def analytics_service():
    with patch("app.services.analytics_service.ResourceService") as resource_cls, \
            patch("app.services.analytics_service.ResourceEventService") as event_cls:
        service = AnalyticsService()
        service.resource_service = resource_cls.return_value
        service.event_service = event_cls.return_value
        yield service


class TestAnalyticsService:
    def test_builds_summary_from_all_sources(self, analytics_service):
        analytics_service.resource_service.get_resources.return_value = [
            {"id": "x", "download_count": 1}
        ]
        analytics_service.resource_service.get_all_bookmarks.return_value = [{"id": "b1"}]
        analytics_service.event_service.get_events.return_value = [_download("x")] * 4

        summary = analytics_service.build_summary(top_n=3)

        assert summary["total_downloads"] == 4
        assert summary["total_bookmarks"] == 1
        assert summary["top"][0]["effective_count"] == 4
        analytics_service.event_service.get_events.assert_called_once_with(resource_ids=None)

    def test_degrades_when_event_log_is_down(self, analytics_service):
        analytics_service.resource_service.get_resources.return_value = [
            {"id": "x", "download_count": 9}
        ]
        analytics_service.resource_service.get_all_bookmarks.return_value = []
        analytics_service.event_service.get_events.side_effect = ServerSelectionTimeoutError("down")

        summary = analytics_service.build_summary(top_n=3)

        assert summary["events_available"] is False
        assert summary["total_downloads"] == 9
        assert summary["top"][0]["effective_count"] == 9

    def test_scopes_to_uploader(self, analytics_service):
        analytics_service.resource_service.get_resources.return_value = [
            {"id": "x", "download_count": 0}, {"id": "y", "download_count": 0}
        ]
        analytics_service.resource_service.get_all_bookmarks.return_value = []
        analytics_service.event_service.get_events.return_value = []

        analytics_service.build_summary(top_n=3, uploaded_by="mentor-1")

        analytics_service.resource_service.get_resources.assert_called_once_with(uploaded_by="mentor-1")
        analytics_service.resource_service.get_all_bookmarks.assert_called_once_with(resource_ids=["x", "y"])
        analytics_service.event_service.get_events.assert_called_once_with(resource_ids=["x", "y"])

    def test_default_top_n_from_settings(self, analytics_service):
        analytics_service.resource_service.get_resources.return_value = [
            {"id": str(i), "download_count": i} for i in range(10)
        ]
        analytics_service.resource_service.get_all_bookmarks.return_value = []
        analytics_service.event_service.get_events.return_value = []

        summary = analytics_service.build_summary()

        assert len(summary["top"]) == 5
