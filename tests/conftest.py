"""Shared fixtures: a throwaway database, an app client and household factories."""

import os
import tempfile

# Settings are read at import time, so point them at a scratch directory first
_data_dir = tempfile.mkdtemp()
os.environ["FAMILYHUB_DATA_DIR"] = _data_dir
os.environ["FAMILYHUB_DB_PATH"] = os.path.join(_data_dir, "test.db")
os.environ["FAMILYHUB_BCRYPT_ROUNDS"] = "4"
os.environ["FAMILYHUB_UNDO_WINDOW_SECONDS"] = "300"

from datetime import timezone  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session  # noqa: E402

from familyhub.database import engine, reset_db  # noqa: E402
from familyhub.main import app  # noqa: E402
from familyhub.models.chore import Chore  # noqa: E402
from familyhub.models.member import FamilyMember  # noqa: E402
from familyhub.services import cooldown  # noqa: E402

API = "/api/v1"


@pytest.fixture(autouse=True)
def fresh_db():
    reset_db()
    yield


@pytest.fixture
def utc_household(monkeypatch):
    """Daily cooldowns roll over at UTC midnight."""
    monkeypatch.setattr(cooldown, "local_tz", lambda: timezone.utc)


@pytest.fixture
def session():
    with Session(engine) as s:
        yield s


@pytest.fixture
def make_member(session):
    def _make(name="Alex", is_admin=False):
        member = FamilyMember(
            name=name,
            avatar_value=name.lower(),
            color="#BAFFC9",
            is_admin=is_admin,
        )
        session.add(member)
        session.commit()
        session.refresh(member)
        return member
    return _make


@pytest.fixture
def make_chore(session):
    def _make(**fields):
        fields.setdefault("title", "Feed the cat")
        fields.setdefault("points", 10)
        chore = Chore(**fields)
        session.add(chore)
        session.commit()
        session.refresh(chore)
        return chore
    return _make


# --- HTTP ---

@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def login(client, member_id, password):
    r = client.post(f"{API}/auth/login", json={"familyMemberId": member_id, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['data']['token']}"}


@pytest.fixture
def admin(client):
    r = client.post(f"{API}/setup", json={"adminName": "Pat", "password": "secret123"})
    assert r.status_code == 201, r.text
    admin_id = client.get(f"{API}/auth/members").json()["data"][0]["id"]
    return {"id": admin_id, "headers": login(client, admin_id, "secret123")}


@pytest.fixture
def kid(client, admin):
    r = client.post(f"{API}/family-members", json={
        "name": "Sam",
        "avatarValue": "sam",
        "color": "#BAE1FF",
    }, headers=admin["headers"])
    assert r.status_code == 201, r.text
    kid_id = r.json()["data"]["id"]
    r = client.put(f"{API}/family-members/{kid_id}/password", json={"password": "kidpass"}, headers=admin["headers"])
    assert r.status_code == 200, r.text
    return {"id": kid_id, "headers": login(client, kid_id, "kidpass")}
