"""
Pytest configuration and shared fixtures
"""

import os
from unittest.mock import Mock

import pytest

# Keep local .env values out of the test run
os.environ.update({
    "ACADEMY_DEV_MODE": "false",
    "STORAGE_BACKEND": "memory",
    "SEED_SAMPLE_VIDEOS": "false",
})

from academy import create_app
from academy.persistence import MemoryStorage
from academy.session import SessionStore, RemoteIdentityStrategy, MockIdentityStrategy
from config import TestingConfig


STUDENT_PAYLOAD = {
    "id": "u-student",
    "first_name": "Ada",
    "last_name": "Lovelace",
    "email": "ada@academy.org",
    "role": "student",
}

TEACHER_PAYLOAD = {
    "id": "u-teacher",
    "first_name": "Alan",
    "last_name": "Turing",
    "email": "alan@academy.org",
    "role": "teacher",
}

ADMIN_PAYLOAD = {
    "id": "u-admin",
    "first_name": "Grace",
    "email": "grace@academy.org",
    "role": "ADMIN",
}


class DevTestingConfig(TestingConfig):
    DEV_MODE = True


# ============================================
# Application Fixtures
# ============================================

@pytest.fixture
def identity_client():
    """Mock of the external user service"""
    client = Mock()
    client.login.return_value = "token-123"
    client.fetch_me.return_value = dict(STUDENT_PAYLOAD)
    client.fetch_student.return_value = {"id": 7, "status": "approved"}
    return client


@pytest.fixture
def app(identity_client):
    app = create_app(TestingConfig)
    app.extensions["academy_identity_client"] = identity_client
    return app


@pytest.fixture
def dev_app(identity_client):
    app = create_app(DevTestingConfig)
    app.extensions["academy_identity_client"] = identity_client
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def video_store(app):
    return app.extensions["academy_videos"]


def login_as(client, identity_client, payload):
    """Log the test client in as the user described by ``payload``"""
    identity_client.fetch_me.return_value = dict(payload)
    resp = client.post("/auth/login", json={"email": payload["email"], "password": "secret"})
    assert resp.status_code == 200, resp.get_json()
    return resp


@pytest.fixture
def student_client(client, identity_client):
    login_as(client, identity_client, STUDENT_PAYLOAD)
    return client


@pytest.fixture
def teacher_client(client, identity_client):
    login_as(client, identity_client, TEACHER_PAYLOAD)
    return client


@pytest.fixture
def admin_client(client, identity_client):
    login_as(client, identity_client, ADMIN_PAYLOAD)
    return client


# ============================================
# Store Fixtures
# ============================================

@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def session_store(storage, identity_client):
    return SessionStore(storage, RemoteIdentityStrategy(), identity_client)


@pytest.fixture
def dev_session_store(storage, identity_client):
    return SessionStore(storage, MockIdentityStrategy(), identity_client)


@pytest.fixture
def log_in(client, identity_client):
    def _log_in(payload):
        return login_as(client, identity_client, payload)
    return _log_in
