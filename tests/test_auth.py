from __future__ import annotations

from datetime import timedelta

import jwt
import pytest

from app.services.auth import AuthError, AuthService


def test_signup_validation(auth):
    with pytest.raises(AuthError, match="Email, password, and confirmation are required"):
        auth.signup("sam@example.com", "secret1", None)
    with pytest.raises(AuthError, match="Passwords do not match"):
        auth.signup("sam@example.com", "secret1", "secret2")
    with pytest.raises(AuthError, match="at least 6 characters"):
        auth.signup("sam@example.com", "abc", "abc")


def test_signup_then_login(auth, users):
    token, user = auth.signup("sam@example.com", "secret1", "secret1")
    assert auth.verify_token(token)["userId"] == user["userId"]
    assert users.get("sam@example.com")["passwordHash"] != "secret1"

    login_token, login_user = auth.login("sam@example.com", "secret1")
    assert login_user["userId"] == user["userId"]
    assert auth.verify_token(login_token)["email"] == "sam@example.com"


def test_duplicate_signup(auth):
    auth.signup("sam@example.com", "secret1", "secret1")
    with pytest.raises(AuthError, match="User already exists"):
        auth.signup("sam@example.com", "secret1", "secret1")


def test_login_failures(auth):
    auth.signup("sam@example.com", "secret1", "secret1")
    with pytest.raises(AuthError) as excinfo:
        auth.login("sam@example.com", "wrong-password")
    assert excinfo.value.status_code == 401
    with pytest.raises(AuthError, match="Invalid email or password"):
        auth.login("nobody@example.com", "secret1")
    with pytest.raises(AuthError, match="Email and password are required"):
        auth.login("sam@example.com", "")


def test_tampered_and_foreign_tokens_are_rejected(auth, users):
    token = auth.create_token("u1", "sam@example.com")
    header, payload, signature = token.split(".")
    with pytest.raises(AuthError):
        auth.verify_token(f"{header}.{payload}x.{signature}")
    with pytest.raises(AuthError):
        auth.verify_token("not-a-token")

    other = AuthService(users, secret="another-secret-at-least-32-bytes-long")
    with pytest.raises(AuthError):
        other.verify_token(token)


def test_expired_token(auth):
    auth.token_ttl = timedelta(seconds=-60)
    token = auth.create_token("u1", "sam@example.com")
    with pytest.raises(AuthError, match="Invalid or expired token"):
        auth.verify_token(token)


def test_tokens_are_standard_hs256_jwts(auth):
    token = auth.create_token("u1", "sam@example.com")
    payload = jwt.decode(token, "test-secret-at-least-32-bytes-long", algorithms=["HS256"])
    assert payload["userId"] == "u1"
    assert payload["email"] == "sam@example.com"
    assert payload["exp"] > 0
