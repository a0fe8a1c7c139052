import hashlib
import re

import pytest

from julisha import create_app, db
from julisha.config import TestConfig


def browser_hash(raw: str) -> str:
    """What the frontend submits: SHA-256 of the normalized value plus the public salt."""
    normalized = re.sub(r"\s", "", raw).upper()
    return hashlib.sha256((normalized + TestConfig.PUBLIC_SALT).encode("utf-8")).hexdigest()


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    return {"Authorization": f"Bearer {app.config['ADMIN_TOKEN']}"}


@pytest.fixture
def submit(client):
    """Post a signature from a given client IP."""
    def _submit(payload, ip="10.0.0.1"):
        return client.post("/votes/submit", json=payload, environ_base={"REMOTE_ADDR": ip})
    return _submit


@pytest.fixture
def request_code(client):
    """Request a phone verification code from a given client IP."""
    def _request_code(phone_number, ip="10.0.1.1"):
        return client.post(
            "/votes/verify-phone",
            json={"phoneNumber": phone_number},
            environ_base={"REMOTE_ADDR": ip},
        )
    return _request_code
