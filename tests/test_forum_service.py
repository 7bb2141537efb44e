"""Tests for ForumService and UserService (database calls mocked)."""

from contextlib import contextmanager
from unittest.mock import MagicMock, patch

import pytest

from app.services.forum_service import ForumService
from app.services.user_service import UserService


def _fake_session(session):
    @contextmanager
    def fake_session():
        yield session
    return fake_session


class TestForumService:
    def test_replies_grouped_under_their_posts(self):
        posts = [{"id": "p2", "title": "B"}, {"id": "p1", "title": "A"}]
        replies = [
            {"id": "x1", "post_id": "p1", "content": "first"},
            {"id": "x2", "post_id": "p1", "content": "second"},
        ]
        with patch("app.services.forum_service.execute_raw_sql", side_effect=[posts, replies]) as sql:
            result = ForumService().list_posts()

        assert [p["id"] for p in result] == ["p2", "p1"]
        assert result[0]["replies"] == []
        assert [r["id"] for r in result[1]["replies"]] == ["x1", "x2"]
        assert sql.call_args_list[1][0][1] == {"ids": ["p2", "p1"]}

    def test_no_posts_skips_reply_query(self):
        with patch("app.services.forum_service.execute_raw_sql", return_value=[]) as sql:
            assert ForumService().list_posts() == []
        assert sql.call_count == 1

    def test_reply_to_missing_post(self):
        with patch("app.services.forum_service.execute_raw_sql", return_value=[]) as sql:
            assert ForumService().add_reply("p404", "user-1", "hi") is None
        assert "FROM forum_posts fp WHERE fp.id = :post_id" in sql.call_args[0][0]

    @pytest.mark.parametrize("rowcount, deleted", [(1, True), (0, False)])
    def test_delete_post(self, rowcount, deleted):
        session = MagicMock()
        session.execute.return_value.rowcount = rowcount
        with patch("app.services.forum_service.get_db_session", _fake_session(session)):
            assert ForumService().delete_post("p1") is deleted


class TestUserService:
    def test_assign_role_to_missing_profile(self):
        session = MagicMock()
        session.execute.return_value.fetchone.return_value = None
        with patch("app.services.user_service.get_db_session", _fake_session(session)):
            assert UserService().assign_role("u404", "mentor") is None
        assert session.execute.call_count == 1

    def test_assign_role_already_held(self):
        session = MagicMock()
        session.execute.return_value.fetchone.side_effect = [(1,), None]
        with patch("app.services.user_service.get_db_session", _fake_session(session)):
            assert UserService().assign_role("u1", "mentor") is False

    def test_assign_new_role(self):
        session = MagicMock()
        session.execute.return_value.fetchone.side_effect = [(1,), ("role-row",)]
        with patch("app.services.user_service.get_db_session", _fake_session(session)):
            assert UserService().assign_role("u1", "mentor") is True
        assert session.execute.call_args[0][1] == {"user_id": "u1", "role": "mentor"}

    def test_deactivate_missing_account(self):
        session = MagicMock()
        session.execute.return_value.rowcount = 0
        with patch("app.services.user_service.get_db_session", _fake_session(session)):
            assert UserService().set_active("u404", False) is False
