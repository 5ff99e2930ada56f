import pytest
import requests

from flowershop.repos.session_repo import SessionRepo
from flowershop.services.auth_service import (
    AccountExistsError,
    AuthService,
    InvalidCredentialsError,
    TooManyAttemptsError,
    hash_password,
    verify_password,
)
from flowershop.services.google_client import GoogleClient, GoogleTokenError
from flowershop.utils.settings import LOGIN_MAX_ATTEMPTS


class StubGoogle:
    def verify_id_token(self, id_token):
        if id_token != "good-token":
            raise GoogleTokenError("bad")
        return {"sub": "g-1", "email": "Petra@Example.com", "name": "Petra"}


@pytest.fixture
def auth(db, redis_client, notifications):
    return AuthService(
        db=db,
        sessions=SessionRepo(redis_client),
        google_client=StubGoogle(),
        notification_service=notifications,
    )


def test_password_hash_roundtrip():
    stored = hash_password("tajne-heslo")
    assert stored.startswith("pbkdf2_sha256$")
    assert verify_password("tajne-heslo", stored)
    assert not verify_password("jine-heslo", stored)
    assert not verify_password("tajne-heslo", None)
    assert not verify_password("tajne-heslo", "garbage")


def test_register_and_login(auth):
    token, user = auth.register("Jana@Example.com", "heslo123", "Jana")
    assert user.email == "jana@example.com"
    assert user.role == "customer"
    assert auth.current_user(token).id == user.id

    token2, same = auth.login("jana@example.com", "heslo123")
    assert same.id == user.id
    assert token2 != token


def test_duplicate_registration(auth):
    auth.register("jana@example.com", "heslo123")
    with pytest.raises(AccountExistsError):
        auth.register("JANA@example.com", "jine-heslo")


def test_wrong_password(auth):
    auth.register("jana@example.com", "heslo123")
    with pytest.raises(InvalidCredentialsError):
        auth.login("jana@example.com", "spatne")
    with pytest.raises(InvalidCredentialsError):
        auth.login("nikdo@example.com", "heslo123")


def test_login_throttled_after_failures(auth):
    auth.register("jana@example.com", "heslo123")
    for _ in range(LOGIN_MAX_ATTEMPTS):
        with pytest.raises(InvalidCredentialsError):
            auth.login("jana@example.com", "spatne")

    with pytest.raises(TooManyAttemptsError):
        auth.login("jana@example.com", "heslo123")


def test_successful_login_resets_failures(auth, redis_client):
    auth.register("jana@example.com", "heslo123")
    for _ in range(LOGIN_MAX_ATTEMPTS - 1):
        with pytest.raises(InvalidCredentialsError):
            auth.login("jana@example.com", "spatne")

    auth.login("jana@example.com", "heslo123")
    assert SessionRepo(redis_client).failed_attempts("jana@example.com") == 0


def test_logout_invalidates_session(auth):
    token, _ = auth.register("jana@example.com", "heslo123")
    auth.logout(token)
    assert auth.current_user(token) is None


def test_google_login_creates_user_once(auth):
    _, user = auth.login_with_google("good-token")
    _, again = auth.login_with_google("good-token")

    assert user.id == again.id
    assert user.provider == "google"
    assert user.email == "petra@example.com"
    assert user.password_hash is None

    with pytest.raises(GoogleTokenError):
        auth.login_with_google("forged")


def test_password_reset_flow(auth, notifications):
    auth.register("jana@example.com", "heslo123")
    auth.request_password_reset("jana@example.com")
    auth.request_password_reset("nikdo@example.com")

    assert len(notifications.resets) == 1
    email, token = notifications.resets[0]
    assert email == "jana@example.com"

    auth.confirm_password_reset(token, "nove-heslo")
    auth.login("jana@example.com", "nove-heslo")

    with pytest.raises(InvalidCredentialsError):
        auth.confirm_password_reset(token, "jeste-jine")


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code}")


def test_google_client_accepts_valid_token(monkeypatch):
    calls = []

    def fake_get(url, params, timeout):
        calls.append(params)
        return FakeResponse(200, {"aud": "client-1", "email": "a@b.cz", "sub": "42", "name": "A"})

    monkeypatch.setattr(requests, "get", fake_get)
    claims = GoogleClient(client_id="client-1").verify_id_token("tok")

    assert claims == {"sub": "42", "email": "a@b.cz", "name": "A"}
    assert calls == [{"id_token": "tok"}]


def test_google_client_rejects_other_audience(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, params, timeout: FakeResponse(200, {"aud": "x", "email": "a@b.cz"}))
    with pytest.raises(GoogleTokenError):
        GoogleClient(client_id="client-1").verify_id_token("tok")


def test_google_client_rejects_invalid_token(monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, params, timeout: FakeResponse(400))
    with pytest.raises(GoogleTokenError):
        GoogleClient(client_id="").verify_id_token("tok")
