"""Pytest configuration and shared fixtures.

The environment is set before any virtuebox module is imported so that
module-level configuration picks it up.
"""

import os
import sys
from pathlib import Path

TEST_JWT_SECRET = "test-secret-for-virtuebox-0123456789abcdef"

os.environ["JWT_SECRET"] = TEST_JWT_SECRET
os.environ["JWT_EXPIRES_IN"] = "7d"
os.environ["APP_ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
# Never connected: tests build their own Database on a temporary file
os.environ["DATABASE_URL"] = "sqlite://"

_src_path = str(Path(__file__).parent.parent / "src")
if _src_path not in sys.path:
    sys.path.insert(0, _src_path)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from virtuebox.app import create_app  # noqa: E402
from virtuebox.core.database import Database  # noqa: E402
from virtuebox.schemas.partner import CreatePartnerRequest  # noqa: E402
from virtuebox.utils.partner_manager import PartnerManager  # noqa: E402
from virtuebox.utils.user_manager import UserManager  # noqa: E402

ADMIN_NAME = "Super Admin"
ADMIN_EMAIL = "admin@virtuebox.com"
ADMIN_PASSWORD = "Admin@123"
PARTNER_PASSWORD = "Partner@123"


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'virtuebox-test.db'}")
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def user_manager(db_session):
    return UserManager(db_session)


@pytest.fixture
def partner_manager(db_session, database):
    return PartnerManager(db_session, database.allocation_lock)


@pytest.fixture
def admin(user_manager):
    return user_manager.create_admin(ADMIN_NAME, ADMIN_EMAIL, ADMIN_PASSWORD)


@pytest.fixture
def make_partner(partner_manager):
    """Factory creating partners through the manager."""

    def _make(email="partner@example.com", name="Test Partner", **fields):
        req = CreatePartnerRequest(
            name=name, email=email, password=PARTNER_PASSWORD, **fields
        )
        return partner_manager.create_partner(req, created_by=ADMIN_NAME)

    return _make


@pytest.fixture
def app(database):
    return create_app(database)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def new_client(app):
    """Factory for extra clients, each with its own cookie jar."""

    def _new():
        return TestClient(app)

    return _new


def login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


@pytest.fixture
def admin_client(client, admin):
    response = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert response.status_code == 200
    return client
