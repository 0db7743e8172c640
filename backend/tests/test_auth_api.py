"""Tests for the auth service HTTP surface."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from reservo.main import create_auth_app


@pytest.fixture
def client(auth_settings, mongo_db):
    app = create_auth_app(auth_settings, db=mongo_db)
    with TestClient(app) as test_client:
        yield test_client


def register(client: TestClient, email="a@x.com", password="pw123!"):
    return client.post("/api/users", json={"email": email, "password": password})


class TestUsers:
    def test_create_user(self, client):
        response = register(client)

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "a@x.com"
        assert body["id"]
        assert "password" not in body

    def test_duplicate_email(self, client):
        register(client)

        response = register(client, password="different!")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    def test_invalid_email_is_validation_error(self, client):
        response = register(client, email="not-an-email")

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unique_index_created_on_startup(self, client, mongo_db):
        indexes = mongo_db["users"].index_information()

        assert indexes["email_unique"]["unique"] is True


class TestLogin:
    def test_login_sets_cookie_and_returns_user(self, client):
        user_id = register(client).json()["id"]

        response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "pw123!"})

        assert response.status_code == 200
        assert response.json() == {"id": user_id, "email": "a@x.com"}
        assert response.cookies.get("Authentication")

    def test_wrong_password(self, client):
        register(client)

        response = client.post("/api/auth/login", json={"email": "a@x.com", "password": "nope!!"})

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Credentials are not valid."

    def test_current_user_from_cookie(self, client):
        user_id = register(client).json()["id"]
        token = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "pw123!"}
        ).cookies.get("Authentication")

        response = client.get("/api/users", headers={"Cookie": f"Authentication={token}"})

        assert response.status_code == 200
        assert response.json() == {"id": user_id, "email": "a@x.com"}

    def test_current_user_from_header(self, client):
        register(client)
        token = client.post(
            "/api/auth/login", json={"email": "a@x.com", "password": "pw123!"}
        ).cookies.get("Authentication")
        client.cookies.clear()

        response = client.get("/api/users", headers={"Authentication": token})

        assert response.status_code == 200

    def test_current_user_requires_token(self, client):
        response = client.get("/api/users")

        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"

    def test_current_user_rejects_bad_token(self, client):
        response = client.get("/api/users", headers={"Authentication": "garbage"})

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid authentication credentials"

    def test_logout_clears_cookie(self, client):
        response = client.post("/api/auth/logout")

        assert response.status_code == 204
        assert "Authentication=" in response.headers["set-cookie"]


class TestHealth:
    def test_ok(self, auth_settings):
        db = MagicMock()
        app = create_auth_app(auth_settings, db=db)
        # Skip lifespan: index creation is not under test here
        client = TestClient(app)

        response = client.get("/api/health")

        assert response.status_code == 200
        db.command.assert_called_once_with("ping")

    def test_store_down(self, auth_settings):
        db = MagicMock()
        db.command.side_effect = ServerSelectionTimeoutError("no servers")
        client = TestClient(create_auth_app(auth_settings, db=db))

        response = client.get("/api/health")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "SERVICE_UNAVAILABLE"
