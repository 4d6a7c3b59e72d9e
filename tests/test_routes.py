import asyncio

from conftest import API_KEY, FakeFne
from errors import InclusionStoreError


def test_landing_page_is_public(client):
  body = client.get("/").json()
  assert body["name"] == "Test FNE"
  assert body["user"] is None


def test_login_and_logout(client):
  response = client.post("/auth", data={"username": "admin", "password": "secret"}, follow_redirects=False)
  assert response.status_code == 303
  assert client.get("/").json()["user"] == "admin"

  response = client.get("/logout", follow_redirects=False)
  assert response.status_code == 303
  assert client.get("/").json()["user"] is None


def test_bad_login_is_rejected(client):
  response = client.post("/auth", data={"username": "admin", "password": "nope"})
  assert response.status_code == 401
  assert response.json()["message"] == "Invalid username or password"


def test_protected_pages_redirect_anonymous_users(client):
  for path in ("/fnePeerList", "/peerMapInclusions", "/manageWatchedPeers", "/tg_rules", "/fneStatus"):
    response = client.get(path, follow_redirects=False)
    assert response.status_code == 303, path
    assert response.headers["location"] == "/"


def test_anonymous_peer_map_is_filtered(client, inclusions):
  inclusions.add("3")
  body = client.get("/fnePeerMap").json()
  assert body["name"] == "Test FNE"
  assert [g["location"] for g in body["peers"]] == ["Hilltop"]
  assert [p["peerId"] for p in body["peers"][0]["peers"]] == [3]
  assert body["PeerMapInclusions"] == [{"id": 1, "PeerMapInclusions": "3"}]


def test_logged_in_peer_map_shows_everything(logged_in):
  body = logged_in.get("/fnePeerMap").json()
  assert [(g["latitude"], g["longitude"]) for g in body["peers"]] == [
    ("35.1234", "-80.5000"),
    ("36.0000", "-81.0000"),
  ]
  assert [p["peerId"] for p in body["peers"][0]["peers"]] == [1, 2]


def test_peer_map_reports_fne_failure(app, client):
  app.state.fne = FakeFne(fail=True)
  response = client.get("/fnePeerMap")
  assert response.status_code == 502
  assert response.json()["detail"] == "peer_list_unavailable"


def test_peer_map_reports_empty_fne_answer(app, client):
  class EmptyFne(FakeFne):
    async def get_peer_list(self):
      return None

  app.state.fne = EmptyFne()
  assert client.get("/fnePeerMap").status_code == 502


def test_peer_map_fails_closed_when_inclusions_break(app, client):
  class BrokenStore:
    def list(self):
      raise InclusionStoreError("disk gone")

  app.state.inclusions = BrokenStore()
  response = client.get("/fnePeerMap")
  assert response.status_code == 500
  assert response.json()["detail"] == "inclusions_unavailable"


def test_inclusion_management(logged_in, inclusions):
  response = logged_in.post("/addInclusion", data={"PeerMapInclusions": " 42 "}, follow_redirects=False)
  assert response.status_code == 303
  rows = logged_in.get("/peerMapInclusions").json()["inclusions"]
  assert rows == [{"id": 1, "PeerMapInclusions": "42"}]

  assert logged_in.post("/deleteInclusion/1", follow_redirects=False).status_code == 303
  assert inclusions.list() == []
  assert logged_in.post("/deleteInclusion/1").status_code == 404


def test_blank_inclusion_is_rejected(logged_in):
  assert logged_in.post("/addInclusion", data={"PeerMapInclusions": "  "}).status_code == 400


def test_anonymous_users_cannot_change_inclusions(client, inclusions):
  response = client.post("/addInclusion", data={"PeerMapInclusions": "1"}, follow_redirects=False)
  assert response.status_code == 303
  assert inclusions.list() == []


def test_watched_peer_management(logged_in, watched):
  form = {"peerId": "9001", "name": "North", "email": "n@example.com", "phone": "555", "discordWebhookUrl": ""}
  assert logged_in.post("/addWatchedPeer", data=form, follow_redirects=False).status_code == 303
  assert logged_in.post("/addWatchedPeer", data=form).status_code == 409

  logged_in.post("/editWatchedPeer/9001", data={"name": "North Site"}, follow_redirects=False)
  peers = logged_in.get("/manageWatchedPeers").json()["peers"]
  assert peers == [{"peerId": "9001", "name": "North Site", "email": "", "phone": "", "discordWebhookUrl": ""}]

  assert logged_in.post("/deleteWatchedPeer/9001", follow_redirects=False).status_code == 303
  assert watched.list() == []
  assert logged_in.post("/deleteWatchedPeer/9001").status_code == 404
  assert logged_in.post("/editWatchedPeer/9001", data={"name": "x"}).status_code == 404


def test_peer_list_and_status(logged_in):
  assert len(logged_in.get("/fnePeerList").json()["peers"]) == 3
  assert logged_in.get("/fneStatus").json()["state"] == 1


def test_affiliation_list_is_public(client):
  assert client.get("/fneAffiliationList").json()["peers"][0]["srcId"] == 100


def test_affiliation_list_reports_fne_failure(app, client):
  app.state.fne = FakeFne(fail=True)
  assert client.get("/fneAffiliationList").status_code == 502


def test_talkgroup_views(client, logged_in):
  public = client.get("/pui/talkgroups").json()
  assert [g["name"] for g in public["rules"]["groupVoice"]] == ["Statewide", "Local"]
  assert "groups" not in logged_in.get("/tg_rules").json()


def test_cfne_rules_view(app, logged_in):
  app.state.fne_type = "CFNE"
  body = logged_in.get("/tg_rules").json()
  assert body["groups"] == body["rules"]


def test_unknown_fne_type(app, logged_in):
  app.state.fne_type = "OTHER"
  assert logged_in.get("/tg_rules").status_code == 400


def test_write_tg_rule_changes(logged_in):
  rules = {"groupVoice": [{"name": "Only", "source": {"tgid": 5, "slot": 2}}]}
  response = logged_in.post("/writeTgRuleChanges", json=rules)
  assert response.json() == {"ok": True, "total_talkgroups": 1}
  assert logged_in.get("/pui/talkgroups").json()["rules"] == rules


def test_missing_rules_file(app, client, tmp_path):
  app.state.rule_path = str(tmp_path / "missing.yml")
  assert client.get("/pui/talkgroups").status_code == 500


def test_api_requires_key(client):
  assert client.get("/api/stats").status_code == 401
  assert client.get("/api/stats", headers={"x-dvmfne-manager-api-key": "wrong"}).status_code == 401


def test_api_endpoints(client):
  headers = {"x-dvmfne-manager-api-key": API_KEY}
  assert client.get("/api/stats", headers=headers).json()["totalCalls"] == 7

  tg = client.get("/api/tg/list", headers=headers).json()
  assert tg["total_talkgroups"] == 2

  rid = client.get("/api/rid/list", headers=headers).json()
  assert rid["total_rids"] == 2
  assert rid["rid_list"]["rids"][0]["id"] == 1001

  peer_map = client.get("/api/peers/map", headers=headers).json()
  assert len(peer_map["peers"]) == 2


def test_api_auth_can_be_disabled(app, client):
  app.state.api_auth_disabled = True
  assert client.get("/api/stats").status_code == 200


def test_api_without_configured_key(app, client):
  app.state.api_key = ""
  assert client.get("/api/stats", headers={"x-dvmfne-manager-api-key": ""}).status_code == 503


def test_api_rid_list_reports_fne_failure(app, client):
  app.state.fne = FakeFne(fail=True)
  response = client.get("/api/rid/list", headers={"x-dvmfne-manager-api-key": API_KEY})
  assert response.status_code == 502
  assert response.json()["detail"] == "rid_list_unavailable"


def test_login_uses_the_user_store(client, users):
  users.add("operator", "radio")
  response = client.post("/auth", data={"username": "operator", "password": "radio"}, follow_redirects=False)
  assert response.status_code == 303
  assert client.get("/").json()["user"] == "operator"


def test_user_management(logged_in, users):
  response = logged_in.post("/addUser", data={"username": "operator", "password": "radio"}, follow_redirects=False)
  assert response.status_code == 303
  assert response.headers["location"] == "/users?success=User+added+successfully"

  response = logged_in.post("/addUser", data={"username": "operator", "password": "x"}, follow_redirects=False)
  assert response.headers["location"] == "/users?error=User+already+exists"

  body = logged_in.get("/users?success=done").json()
  assert [u["username"] for u in body["users"]] == ["admin", "operator"]
  assert body["success"] == "done"
  assert all("password_hash" not in u for u in body["users"])

  operator = users.get("operator")
  logged_in.post("/editUser", data={"id": operator.id, "username": "op2", "password": "new"})
  assert users.verify("op2", "new") is True

  response = logged_in.post("/deleteUser", data={"id": operator.id}, follow_redirects=False)
  assert response.status_code == 303
  assert users.get("op2") is None


def test_last_user_cannot_be_deleted(logged_in, users):
  admin = users.get("admin")
  response = logged_in.post("/deleteUser", data={"id": admin.id}, follow_redirects=False)
  assert response.headers["location"] == "/users?error=Cannot+delete+the+last+user"
  assert users.get("admin") is not None


def test_user_routes_require_login(client, users):
  for path in ("/users", "/overview"):
    assert client.get(path, follow_redirects=False).status_code == 303
  response = client.post("/addUser", data={"username": "x", "password": "y"}, follow_redirects=False)
  assert response.status_code == 303
  assert users.get("x") is None


def test_overview(logged_in, rule_path):
  config = logged_in.get("/overview").json()["config"]
  assert config["rule_path"] == rule_path
  assert config["api_auth_enabled"] is True


def test_inclusions_are_read_off_the_event_loop(app, client):
  class LoopCheckingStore:
    def list(self):
      try:
        asyncio.get_running_loop()
      except RuntimeError:
        return [{"id": 1, "PeerMapInclusions": "1"}]
      raise AssertionError("store read on the event loop")

  app.state.inclusions = LoopCheckingStore()
  body = client.get("/fnePeerMap").json()
  assert [p["peerId"] for g in body["peers"] for p in g["peers"]] == [1]
