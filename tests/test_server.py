import pytest
from fastapi.testclient import TestClient

from conftest import ScriptedRandom
from draft_server import server
from draft_server.signers import WalletIdentity


@pytest.fixture
def game(make_engine, monkeypatch):
    engine = make_engine(rng=ScriptedRandom(flips=[0.9]))
    monkeypatch.setattr(server, "engine", engine)
    monkeypatch.setattr(server, "identity", WalletIdentity())
    return engine


@pytest.fixture
def client(game):
    return TestClient(server.app)


def _full_deck(client, ids=("1", "2", "3", "4", "5")):
    assert client.post("/draft/pick-phase").status_code == 200
    for card_id in ids:
        assert client.post("/draft/pick", json={"card_id": card_id}).status_code == 200


def test_root(client):
    assert client.get("/").json() == {"game": "SecretDeck", "phase": "ban"}


def test_cards_are_sealed(client):
    body = client.get("/cards").json()
    assert body["count"] == 10
    card = body["cards"][0]
    assert card["encrypted_cost"].startswith("FHE-")
    assert "cost" not in card


def test_card_filters(client):
    body = client.get("/cards", params={"search": "mage", "card_type": "Mage"}).json()
    assert [c["id"] for c in body["cards"]] == ["2"]
    assert client.get("/cards", params={"card_type": "Paladin"}).status_code == 400
    assert "Dragon" in client.get("/cards/types").json()["types"]


def test_ban_and_errors(client):
    response = client.post("/draft/ban", json={"card_id": "3"})
    assert response.status_code == 200
    assert response.json()["card"]["is_banned"]

    again = client.post("/draft/ban", json={"card_id": "3"})
    assert again.status_code == 409
    assert again.json()["kind"] == "AlreadyResolved"

    missing = client.post("/draft/ban", json={"card_id": "99"})
    assert missing.status_code == 404

    notice = client.get("/notice").json()
    assert notice["visible"] and notice["status"] == "error"


def test_wrong_phase(client):
    response = client.post("/draft/pick", json={"card_id": "1"})
    assert response.status_code == 409
    assert response.json()["kind"] == "WrongPhase"


def test_deck_full(client):
    _full_deck(client)
    response = client.post("/draft/pick", json={"card_id": "6"})
    assert response.status_code == 409
    assert response.json()["kind"] == "DeckFull"
    assert client.get("/draft/player-deck").json()["size"] == 5


def test_battle_round_trip(client, game, scheduler):
    assert client.post("/draft/battle").json()["kind"] == "WrongPhase"
    _full_deck(client)

    response = client.post("/draft/battle")
    assert response.status_code == 202
    assert client.get("/draft/state").json()["battle_pending"] is True
    assert client.get("/draft/opponent-deck").json()["size"] == 5

    scheduler.advance(game.battle_delay)
    state = client.get("/draft/state").json()
    assert state["phase"] == "result"
    assert state["last_outcome"] == "win"
    assert client.get("/stats").json() == {"wins": 1, "losses": 0, "win_rate": 100}

    board = client.get("/leaderboard").json()["players"]
    assert board[0]["name"] == "You"

    reset = client.post("/draft/reset").json()
    assert reset["phase"] == "ban"
    assert client.get("/draft/opponent-deck").json()["size"] == 0
    assert client.get("/stats").json()["wins"] == 1


def test_incomplete_deck(client):
    client.post("/draft/pick-phase")
    response = client.post("/draft/battle")
    assert response.status_code == 409
    assert response.json()["kind"] == "DeckIncomplete"


def test_notice_dismiss(client):
    client.post("/draft/ban", json={"card_id": "1"})
    assert client.get("/notice").json()["visible"]
    assert client.post("/notice/dismiss").json()["visible"] is False


class TestRevealEndpoints:

    def test_requires_wallet(self, client):
        response = client.post("/cards/1/reveal", json={"signature": "0xsig"})
        assert response.status_code == 401
        assert response.json()["kind"] == "Unauthenticated"

    def test_missing_signature(self, client):
        client.post("/wallet/connect", json={"address": "0xabc"})
        response = client.post("/cards/1/reveal", json={})
        assert response.status_code == 403

    def test_http_reveal(self, client):
        client.post("/wallet/connect", json={"address": "0xabc"})
        message = client.get("/reveal/message").json()["message"]
        assert message.splitlines()[0] == "publickey:0xfeed"

        response = client.post("/cards/8/reveal", json={"signature": "0xsig"})
        assert response.status_code == 200
        card = response.json()["card"]
        assert (card["cost"], card["attack"], card["defense"]) == (8, 8, 8)
        assert "cost" not in client.get("/cards").json()["cards"][7]

    def test_disconnect(self, client):
        client.post("/wallet/connect", json={"address": "0xabc"})
        client.post("/wallet/disconnect")
        assert client.post("/cards/1/reveal", json={"signature": "0xsig"}).status_code == 401

    def test_websocket_reveal(self, client):
        client.post("/wallet/connect", json={"address": "0xabc"})
        with client.websocket_connect("/ws/reveal/3") as ws:
            request = ws.receive_json()
            assert request["type"] == "sign_request"
            assert request["message"].endswith("durationDays:30")
            ws.send_json({"type": "signature", "signature": "0xsig"})
            result = ws.receive_json()
        assert result["type"] == "revealed"
        assert result["card"]["attack"] == 4

    def test_websocket_decline(self, client):
        client.post("/wallet/connect", json={"address": "0xabc"})
        with client.websocket_connect("/ws/reveal/3") as ws:
            ws.receive_json()
            ws.send_json({"type": "decline"})
            result = ws.receive_json()
        assert result["type"] == "error"
        assert result["kind"] == "SignatureDeclined"

    def test_websocket_unauthenticated(self, client):
        with client.websocket_connect("/ws/reveal/3") as ws:
            result = ws.receive_json()
        assert result["kind"] == "Unauthenticated"


def test_contract_availability(client, monkeypatch):
    from draft_server.game.reveal import StaticContractReader
    monkeypatch.setattr(server, "contract", StaticContractReader(available=False))
    body = client.get("/contract/availability").json()
    assert body["available"] is False
    assert body["notice"]["message"] == "Contract not available"


def test_admin_log_endpoints(client, tmp_path, monkeypatch):
    from draft_logs import endpoints
    monkeypatch.setattr(endpoints, "LOG_DIR", tmp_path)
    (tmp_path / "results.log").write_text('{"level": "INFO", "event": "battle_resolved"}\n')

    assert [l["name"] for l in client.get("/admin/logs/available").json()["logs"]] == ["results"]
    tail = client.get("/admin/logs/tail", params={"log_type": "results"}).json()
    assert tail["count"] == 1
    assert client.get("/admin/logs/search", params={"log_type": "results", "level": "ERROR"}).json()["count"] == 0
    assert client.get("/admin/logs/raw/nope").status_code == 400
