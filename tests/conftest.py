"""
Shared fixtures: an app on in-memory SQLite with a small room directory,
one staff login, and a client that is already signed in.
"""
import pytest

from app import create_app
from config import TestConfig
from models import db
from utils.seed import seed_rooms, upsert_user

TEST_ROOMS = [
    ("101", "Standard view", "Double bed", 1),
    ("102", "Standard view", "Twin bed", 1),
    ("105", "River view", "Double bed", 1),
    ("110", "River view", "Twin bed", 1),
    ("20", "Cottage", "Double bed", 0),
]

USERNAME = "frontdesk"
PASSWORD = "river-side-2024"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        seed_rooms(TEST_ROOMS)
        upsert_user(USERNAME, PASSWORD)
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    resp = client.post("/auth/login", json={"username": USERNAME, "password": PASSWORD})
    assert resp.status_code == 200
    # state-changing requests must echo the CSRF cookie
    client.environ_base["HTTP_X_CSRF_TOKEN"] = client.get_cookie("csrf_token").value
    return client
