"""Tests for verifying externally issued tokens."""

import asyncio
from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from fastapi import HTTPException
from jose import jwt

from app.core.auth import _user_from_token, decode_token, require_roles
from app.core.config import get_settings

USER_ID = "5b0f6a52-0c1e-4f5e-9d0b-8b7a6c5d4e3f"


def _token(sub=USER_ID, audience=None, expires_in=timedelta(hours=1), secret=None):
    settings = get_settings()
    claims = {
        "sub": sub,
        "aud": audience or settings.jwt_audience,
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(claims, secret or settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def test_decode_valid_token():
    assert decode_token(_token())["sub"] == USER_ID


@pytest.mark.parametrize("token", [
    _token(audience="someone-else"),
    _token(expires_in=timedelta(minutes=-5)),
    _token(secret="not-the-secret"),
    "garbage",
])
def test_decode_rejects_bad_tokens(token):
    assert decode_token(token) is None


def test_active_user():
    profile = {"user_id": "user-1", "email": "a@example.com", "is_active": True, "roles": ["mentor"]}
    with patch("app.core.auth.load_user", return_value=profile):
        user = _user_from_token(_token())

    assert user == {"user_id": "user-1", "email": "a@example.com", "roles": ["mentor"]}


def test_unknown_profile_is_unauthorized():
    with patch("app.core.auth.load_user", return_value=None):
        with pytest.raises(HTTPException) as exc:
            _user_from_token(_token())
    assert exc.value.status_code == 401


def test_deactivated_account_is_forbidden():
    profile = {"user_id": "user-1", "email": "a@example.com", "is_active": False, "roles": []}
    with patch("app.core.auth.load_user", return_value=profile):
        with pytest.raises(HTTPException) as exc:
            _user_from_token(_token())
    assert exc.value.status_code == 403


@pytest.mark.parametrize("sub", ["user-1", "", None, "12345"])
def test_non_uuid_subject_is_unauthorized(sub):
    with patch("app.core.auth.load_user") as load_user:
        with pytest.raises(HTTPException) as exc:
            _user_from_token(_token(sub=sub))
    assert exc.value.status_code == 401
    load_user.assert_not_called()


def test_subject_is_normalized_before_lookup():
    profile = {"user_id": USER_ID, "email": "a@example.com", "is_active": True, "roles": []}
    with patch("app.core.auth.load_user", return_value=profile) as load_user:
        _user_from_token(_token(sub=USER_ID.upper()))
    load_user.assert_called_once_with(USER_ID)


def test_require_roles_accepts_any_listed_role():
    check = require_roles("mentor", "admin")
    user = {"user_id": USER_ID, "email": "a@example.com", "roles": ["junior", "admin"]}
    assert asyncio.run(check(user=user)) == user


def test_require_roles_rejects_other_roles():
    check = require_roles("admin")
    with pytest.raises(HTTPException) as exc:
        asyncio.run(check(user={"user_id": USER_ID, "email": "a@example.com", "roles": ["mentor"]}))
    assert exc.value.status_code == 403
