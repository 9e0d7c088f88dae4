"""Tests for API endpoints."""
import pytest
from fastapi.testclient import TestClient

from hexpull.core.session import GameSession
from hexpull.main import app


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def board(client):
    """Create a seeded 5x5 board."""
    response = client.post("/api/boards", json={"columns": 5, "rows": 5, "seed": 1})
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def flower_tiles(flower_board):
    """Snapshot of a 7x7 board with a color 1 center ringed by color 0."""
    return [
        {"index": t.index, "color": t.color, "position": list(t.position)}
        for t in flower_board.on_board_tiles()
    ]


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert "name" in data
    assert "endpoints" in data


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestBoardsEndpoint:
    """Test cases for board session endpoints."""

    def test_create_board(self, board):
        assert len(board["board_id"]) == 32
        assert len(board["tiles"]) == 25
        assert len(board["patterns"]) == 25
        assert board["removed"] == []
        assert board["changed"] is False

    def test_create_uses_defaults(self, client):
        response = client.post("/api/boards", json={})
        assert response.status_code == 200
        assert len(response.json()["tiles"]) == 81

    def test_create_invalid_size(self, client):
        response = client.post("/api/boards", json={"columns": 0})
        assert response.status_code == 422

    def test_get_board(self, client, board):
        response = client.get(f"/api/boards/{board['board_id']}")
        assert response.status_code == 200
        assert response.json()["tiles"] == board["tiles"]

    def test_unknown_board(self, client):
        response = client.get("/api/boards/missing")
        assert response.status_code == 404

    def test_pull(self, client, board):
        response = client.post(
            f"/api/boards/{board['board_id']}/pull",
            json={"tile_index": 12, "direction": 1, "rotation": "straight"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["changed"] is True
        assert len(data["tiles"]) == 25
        assert [t["index"] for t in data["removed"]] == [12]
        assert data["removed"][0]["removed_index"] == 0
        assert data["result"]["removals"][0]["spawned_index"] == 25

    def test_pull_removed_tile_is_noop(self, client, board):
        url = f"/api/boards/{board['board_id']}/pull"
        client.post(url, json={"tile_index": 12})
        response = client.post(url, json={"tile_index": 12})
        assert response.status_code == 200
        assert response.json()["changed"] is False

    def test_pull_invalid_direction(self, client, board):
        response = client.post(
            f"/api/boards/{board['board_id']}/pull",
            json={"tile_index": 12, "direction": 7},
        )
        assert response.status_code == 422

    def test_pull_unknown_tile(self, client, board):
        response = client.post(f"/api/boards/{board['board_id']}/pull", json={"tile_index": 999})
        assert response.status_code == 404
        assert "999" in response.json()["detail"]

    def test_engine_key_error_is_server_error(self, board, monkeypatch):
        def broken_pull(self, *args):
            raise KeyError("missing scratch entry")

        monkeypatch.setattr(GameSession, "pull", broken_pull)
        client = TestClient(app, raise_server_exceptions=False)
        response = client.post(f"/api/boards/{board['board_id']}/pull", json={"tile_index": 12})
        assert response.status_code == 500

    def test_collect_unknown_tile(self, client, board):
        response = client.post(f"/api/boards/{board['board_id']}/collect", json={"tile_index": 999})
        assert response.status_code == 404

    def test_tap_select_is_noop(self, client, board):
        response = client.post(
            f"/api/boards/{board['board_id']}/tap",
            json={"tile_index": 3, "action": "select"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["changed"] is False
        assert data["tiles"] == board["tiles"]

    def test_tap_defaults_to_pull(self, client, board):
        response = client.post(f"/api/boards/{board['board_id']}/tap", json={"tile_index": 3})
        assert response.status_code == 200
        assert response.json()["changed"] is True

    def test_clear_without_queue(self, client, board):
        response = client.post(f"/api/boards/{board['board_id']}/clear", json={})
        assert response.status_code == 200
        assert response.json()["changed"] is False

    def test_stats(self, client, board):
        response = client.get(f"/api/boards/{board['board_id']}/stats")
        assert response.status_code == 200
        data = response.json()
        assert data["on_board"] == 25
        assert data["removed"] == 0
        assert sum(data["colors"].values()) == 25

    def test_text(self, client, board):
        response = client.get(f"/api/boards/{board['board_id']}/text")
        assert response.status_code == 200
        assert response.text.startswith("Board with 25 tiles (0 removed):")

    def test_delete(self, client, board):
        url = f"/api/boards/{board['board_id']}"
        assert client.delete(url).status_code == 200
        assert client.get(url).status_code == 404
        assert client.delete(url).status_code == 404


class TestDetectEndpoint:
    """Test cases for the stateless detect endpoint."""

    def test_detect_flower(self, client, flower_tiles, flower_board):
        response = client.post("/api/patterns/detect", json={"tiles": flower_tiles})
        assert response.status_code == 200
        data = response.json()
        records = {p["index"]: p for p in data["patterns"]}
        center = flower_board.tile_at((3, 3)).index
        ring = [flower_board.tile_at(p).index for p in [(3, 2), (4, 2), (4, 3), (3, 4), (2, 3), (2, 2)]]
        assert records[center]["core"] is True
        assert records[center]["core_group"] == 1
        assert all(records[i]["loop"] and not records[i]["core"] for i in ring)
        assert data["core_groups"] == {"1": [center]}

    def test_detect_duplicate_position(self, client):
        tiles = [
            {"index": 0, "color": 0, "position": [0, 0]},
            {"index": 1, "color": 1, "position": [0, 0]},
        ]
        response = client.post("/api/patterns/detect", json={"tiles": tiles})
        assert response.status_code == 400

    def test_detect_min_line_length(self, client):
        tiles = [{"index": y, "color": 0, "position": [0, y]} for y in range(3)]
        response = client.post("/api/patterns/detect", json={"tiles": tiles, "min_line_length": 3})
        assert response.status_code == 200
        assert response.json()["lines"] == {"0": [2, 1, 0]}


class TestOpenAPI:
    """Test cases for the published API schema."""

    def test_error_responses_documented(self, client):
        schema = client.get("/openapi.json").json()
        pull = schema["paths"]["/api/boards/{board_id}/pull"]["post"]["responses"]
        for status in ("400", "404", "500"):
            ref = pull[status]["content"]["application/json"]["schema"]["$ref"]
            assert ref.endswith("/ErrorResponse")

        detect = schema["paths"]["/api/patterns/detect"]["post"]["responses"]
        assert detect["400"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")

    def test_direction_labels_documented(self, client):
        schema = client.get("/openapi.json").json()
        direction = schema["components"]["schemas"]["PullRequest"]["properties"]["direction"]
        assert "1 = top" in direction["description"]
        assert "6 = upper left" in direction["description"]
