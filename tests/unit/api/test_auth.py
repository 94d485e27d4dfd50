"""Unit tests for bearer token verification."""

import time

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt

from parley.api.dependencies import get_settings
from parley.api.middleware.auth import issue_token
from parley.config.models import AuthConfig
from parley.config.settings import Settings


def _bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class TestIssueToken:
    def test_claims(self, jwt_secret: str) -> None:
        config = AuthConfig(jwt_secret=jwt_secret, token_ttl_seconds=60)
        token = issue_token("user-1", "tester", config)

        claims = jwt.decode(token, jwt_secret, algorithms=["HS256"])
        assert claims["sub"] == "user-1"
        assert claims["userId"] == "user-1"
        assert claims["username"] == "tester"
        assert claims["exp"] - claims["iat"] == 60

    def test_requires_secret(self, monkeypatch) -> None:
        monkeypatch.delenv("JWT_SECRET", raising=False)
        with pytest.raises(RuntimeError):
            issue_token("user-1", None, AuthConfig())


class TestCallerIdentity:
    """Tests for the identity dependency through /chat."""

    def test_missing_token_is_401(self, client: TestClient) -> None:
        response = client.post("/chat", json={"message": "Hi"})

        assert response.status_code == 401
        assert response.json() == {
            "error": "Authentication required",
            "code": "UNAUTHENTICATED",
        }
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_non_bearer_scheme_is_401(self, client: TestClient) -> None:
        response = client.post(
            "/chat", json={"message": "Hi"}, headers={"Authorization": "Basic abc"}
        )
        assert response.status_code == 401

    def test_garbage_token_is_403(self, client: TestClient) -> None:
        response = client.post("/chat", json={"message": "Hi"}, headers=_bearer("not-a-jwt"))

        assert response.status_code == 403
        assert response.json() == {
            "error": "Invalid or expired token",
            "code": "FORBIDDEN",
        }

    def test_wrong_secret_is_403(self, client: TestClient) -> None:
        token = issue_token("user-1", None, AuthConfig(jwt_secret="other-secret"))
        response = client.post("/chat", json={"message": "Hi"}, headers=_bearer(token))
        assert response.status_code == 403

    def test_expired_token_is_403(self, client: TestClient, jwt_secret: str) -> None:
        now = int(time.time())
        token = jwt.encode(
            {"sub": "user-1", "iat": now - 120, "exp": now - 60},
            jwt_secret,
            algorithm="HS256",
        )
        response = client.post("/chat", json={"message": "Hi"}, headers=_bearer(token))
        assert response.status_code == 403

    def test_token_without_subject_is_403(self, client: TestClient, jwt_secret: str) -> None:
        token = jwt.encode({"username": "ghost"}, jwt_secret, algorithm="HS256")
        response = client.post("/chat", json={"message": "Hi"}, headers=_bearer(token))
        assert response.status_code == 403

    def test_user_id_claim_is_accepted(self, client: TestClient, jwt_secret: str) -> None:
        token = jwt.encode({"userId": "user-9"}, jwt_secret, algorithm="HS256")
        response = client.post("/chat", json={"message": "Hi"}, headers=_bearer(token))
        assert response.status_code == 200

    def test_unconfigured_secret_is_500(
        self, app: FastAPI, auth_headers: dict, monkeypatch
    ) -> None:
        monkeypatch.delenv("JWT_SECRET", raising=False)
        app.dependency_overrides[get_settings] = lambda: Settings(auth=AuthConfig())
        client = TestClient(app)

        response = client.post("/chat", json={"message": "Hi"}, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Server configuration error",
            "code": "INTERNAL_ERROR",
        }
