"""Tests for the resource_analytics event log service."""

from unittest.mock import MagicMock, patch

import pytest
from pymongo.errors import AutoReconnect

from app.services.event_log_service import ResourceEventService, serialize_event


@pytest.fixture
def collection():
    with patch("app.services.event_log_service.get_collection") as get_collection:
        collection = MagicMock()
        get_collection.return_value = collection
        yield collection


def test_insert_appends_event(collection):
    collection.insert_one.return_value.inserted_id = "abc123"

    event_id = ResourceEventService().insert("r1", "download", "user-1")

    assert event_id == "abc123"
    doc = collection.insert_one.call_args[0][0]
    assert doc["resource_id"] == "r1"
    assert doc["action"] == "download"
    assert doc["user_id"] == "user-1"
    assert "created_at" in doc


def test_insert_rejects_unknown_action(collection):
    with pytest.raises(ValueError):
        ResourceEventService().insert("r1", "share")
    collection.insert_one.assert_not_called()


def test_record_swallows_mongo_failures(collection):
    collection.insert_one.side_effect = AutoReconnect("gone")

    assert ResourceEventService().record("r1", "view") is False


def test_record_reports_success(collection):
    collection.insert_one.return_value.inserted_id = "abc123"

    assert ResourceEventService().record("r1", "view") is True


def test_get_events_all(collection):
    collection.find.return_value = [
        {"resource_id": "r1", "action": "download"},
        {"resource_id": "r2", "action": "view"},
    ]

    events = ResourceEventService().get_events()

    assert events == [
        {"resource_id": "r1", "action": "download"},
        {"resource_id": "r2", "action": "view"},
    ]
    query, projection = collection.find.call_args[0]
    assert query == {}
    assert projection == {"_id": 0, "resource_id": 1, "action": 1}


def test_get_events_for_some_resources(collection):
    collection.find.return_value = []

    ResourceEventService().get_events(resource_ids=["r1", 2])

    query = collection.find.call_args[0][0]
    assert query == {"resource_id": {"$in": ["r1", "2"]}}


def test_serialize_event_strips_object_id():
    assert serialize_event({"_id": "oid", "resource_id": 7, "action": "view"}) == {
        "resource_id": "7", "action": "view"
    }
    assert serialize_event(None) is None
