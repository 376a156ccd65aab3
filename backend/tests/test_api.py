import json

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from rendezvous.config import Config
from rendezvous.main import create_app


@pytest.fixture()
def client():
    with TestClient(create_app(Config(stats_log_interval_seconds=0))) as test_client:
        yield test_client


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}


def test_stats_endpoints(client):
    assert client.get("/stats.json").json() == {
        "activeRooms": 0,
        "waitingPlayers": 0,
        "totalGamesPlayed": 0,
        "totalPlayersJoined": 0,
    }
    page = client.get("/stats")
    assert page.status_code == 200
    assert "Game Statistics" in page.text


def test_websocket_private_room_flow(client):
    with client.websocket_connect("/ws") as a:
        a.send_json({"type": "createPrivate", "displayName": "Alice", "roomId": "ABCD1234"})
        assert a.receive_json() == {"type": "waiting"}

        with client.websocket_connect("/ws") as b:
            b.send_json({"type": "joinPrivate", "displayName": "Bob", "roomId": "ABCD1234"})
            assert a.receive_json()["isCaller"] is True
            assert b.receive_json() == {
                "type": "matchFound",
                "roomId": "ABCD1234",
                "isCaller": False,
                "opponentName": "Alice",
            }

            offer = '{"type": "offer", "roomId": "ABCD1234", "sdp": "v=0\\r\\no=- 1 2 IN IP4 0.0.0.0"}'
            a.send_text(offer)
            assert b.receive_text() == offer

            a.send_text("garbage")
            a.send_json({"type": "ice", "roomId": "ABCD1234", "candidate": {"sdpMid": "0"}})
            assert json.loads(b.receive_text())["candidate"] == {"sdpMid": "0"}

        assert a.receive_json() == {"type": "opponentDisconnected"}

    stats = client.get("/stats.json").json()
    assert stats["activeRooms"] == 0
    assert stats["totalPlayersJoined"] == 2


def test_websocket_public_queue(client):
    with client.websocket_connect("/ws") as a:
        a.send_json({"type": "joinPublic", "displayName": "Alice"})
        assert a.receive_json() == {"type": "waiting"}
        assert client.get("/stats.json").json()["waitingPlayers"] == 1

        with client.websocket_connect("/") as b:
            b.send_json({"type": "joinPublic", "displayName": "Bob"})
            found_b = b.receive_json()
            found_a = a.receive_json()
            assert found_a["roomId"] == found_b["roomId"]
            assert found_a["isCaller"] is True and found_b["isCaller"] is False


def test_shutdown_notifies_open_sockets(client):
    broker = client.app.state.broker
    with client.websocket_connect("/ws") as a:
        a.send_json({"type": "joinPublic", "displayName": "Alice"})
        assert a.receive_json() == {"type": "waiting"}

        assert client.portal.call(broker.shutdown) == 1
        assert a.receive_json() == {"type": "serverShutdown"}
        with pytest.raises(WebSocketDisconnect) as exc_info:
            a.receive_text()
        assert exc_info.value.code == 1001


def test_https_redirect():
    app = create_app(Config(force_https=True, stats_log_interval_seconds=0))
    client = TestClient(app)
    res = client.get("/health", headers={"x-forwarded-proto": "http"}, follow_redirects=False)
    assert res.status_code == 301
    assert res.headers["location"].startswith("https://")
    assert client.get("/health", headers={"x-forwarded-proto": "https"}).status_code == 200
