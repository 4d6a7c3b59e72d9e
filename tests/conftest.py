import pytest
from fastapi.testclient import TestClient

from app import create_app
from errors import FneError
from services.inclusions import InclusionStore
from services.users import UserStore
from services.watched_peers import WatchedPeerStore

API_KEY = "test-key"


def make_peer(peer_id, lat=None, lng=None, location=None):
  info = {}
  if lat is not None:
    info["latitude"] = lat
  if lng is not None:
    info["longitude"] = lng
  if location is not None:
    info["location"] = location
  return {"peerId": peer_id, "config": {"info": info}}


class FakeFne:
  def __init__(self, peers=None, fail=False):
    self.peers = peers if peers is not None else []
    self.fail = fail
    self.calls = []

  async def _answer(self, name, payload):
    self.calls.append(name)
    if self.fail:
      raise FneError("fne_unreachable")
    return payload

  async def get_peer_list(self):
    return await self._answer("peers", {"status": 200, "peers": self.peers})

  async def get_affiliation_list(self):
    return await self._answer("affs", {"status": 200, "affiliations": [{"peerId": 1, "srcId": 100, "dstId": 2}]})

  async def get_rid_acl(self):
    return await self._answer("rids", {"status": 200, "rids": [{"id": 1001}, {"id": 1002}]})

  async def get_status(self):
    return await self._answer("status", {"status": 200, "state": 1})

  async def get_stats(self):
    return await self._answer("stats", {"status": 200, "totalCalls": 7})


@pytest.fixture
def fne():
  return FakeFne(peers=[
    make_peer(1, 35.12341, -80.50001, "Tower A"),
    make_peer(2, 35.12339, -80.50002, "Tower A2"),
    make_peer(3, 36.0, -81.0, "Hilltop"),
  ])


@pytest.fixture
def inclusions(tmp_path):
  return InclusionStore(str(tmp_path / "inclusions.json"))


@pytest.fixture
def watched(tmp_path):
  return WatchedPeerStore(str(tmp_path / "watched.json"))


@pytest.fixture
def users(tmp_path):
  return UserStore(str(tmp_path / "users.json"), rounds=4)


@pytest.fixture
def rule_path(tmp_path):
  path = tmp_path / "rules.yml"
  path.write_text(
    "groupVoice:\n"
    "  - name: Statewide\n"
    "    source:\n"
    "      tgid: 1\n"
    "      slot: 1\n"
    "  - name: Local\n"
    "    source:\n"
    "      tgid: 2\n"
    "      slot: 1\n",
    encoding="utf-8",
  )
  return str(path)


@pytest.fixture
def app(fne, inclusions, watched, users, rule_path):
  return create_app(
    fne=fne,
    inclusions=inclusions,
    watched=watched,
    users=users,
    rule_path=rule_path,
    name="Test FNE",
    fne_type="FNE2",
    api_key=API_KEY,
    api_auth_disabled=False,
    admin_username="admin",
    admin_password="secret",
    session_secret="test-secret",
  )


@pytest.fixture
def client(app):
  return TestClient(app)


@pytest.fixture
def logged_in(client):
  response = client.post("/auth", data={"username": "admin", "password": "secret"}, follow_redirects=False)
  assert response.status_code == 303
  return client
