import pytest
from fastapi.testclient import TestClient

from photoshare.db import Database
from photoshare.main import create_app
from photoshare.tests.helpers import login, register


@pytest.fixture
def database(tmp_path):
    """A fresh SQLite database per test."""
    db = Database(f"sqlite:///{tmp_path / 'test.db'}")
    yield db
    db.dispose()


@pytest.fixture
def client(database):
    app = create_app(database=database)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def token(client):
    assert register(client).status_code == 200
    r = login(client)
    assert r.status_code == 200
    return r.json()["token"]


@pytest.fixture
def auth(token):
    return {"Authorization": token}
