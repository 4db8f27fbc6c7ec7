import os
import time

# Configure before chatline is imported: Config reads the environment once
os.environ["APP_ENV"] = "testing"
os.environ["STORE_BACKEND"] = "memory"
os.environ["REDIS_ENABLED"] = "false"
os.environ["SERVICE_AUTH_SECRET"] = "test-secret-that-is-long-enough-for-hs256"
os.environ["SERVICE_AUTH_ISSUER"] = "chatline-auth"
os.environ["SERVICE_AUTH_AUDIENCE"] = "chatline"
os.environ["USER_SEED_FILE"] = ""

import jwt
import pytest
from fastapi.testclient import TestClient

from chatline.domain.entities.user import User
from chatline.domain.value_objects.user_id import UserId
from chatline.fastapi_app import create_fastapi_app
from chatline.setup.ioc.container import MemoryStoreProvider, create_container

SERVICE_AUTH_SECRET = os.environ["SERVICE_AUTH_SECRET"]
AUD = os.environ["SERVICE_AUTH_AUDIENCE"]
ISS = os.environ["SERVICE_AUTH_ISSUER"]


def service_token(user_id="alice", name=None, expires_in=300, secret=SERVICE_AUTH_SECRET):
    now = int(time.time())
    claims = {
        "sub": user_id,
        "sid": "test-sid",
        "iat": now,
        "exp": now + expires_in,
        "iss": ISS,
        "aud": AUD,
    }
    if name:
        claims["name"] = name
    return jwt.encode(claims, secret, algorithm="HS256")


def make_users():
    return [
        User(id=UserId("alice"), display_name="Alice"),
        User(id=UserId("bob"), display_name="Bob", avatar_url="https://cdn.example/bob.png"),
        User(id=UserId("carol"), display_name="Carol"),
    ]


@pytest.fixture()
def app():
    """A fresh app with its own in-memory store and registry for each test."""
    container = create_container(MemoryStoreProvider(users=make_users()))
    return create_fastapi_app(container)


@pytest.fixture()
def client(app):
    """A test client for the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def headers_for():
    """Authorization headers for a given user id."""

    def _headers(user_id):
        return {"Authorization": f"Bearer {service_token(user_id)}"}

    return _headers


@pytest.fixture()
def auth_headers(headers_for):
    """Authentication headers for alice."""
    return headers_for("alice")


@pytest.fixture()
def ws_url():
    def _url(user_id):
        return f"/ws?token={service_token(user_id)}"

    return _url
