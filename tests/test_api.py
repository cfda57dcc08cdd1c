"""Tests for FastAPI endpoints."""
from __future__ import annotations

from fastapi.testclient import TestClient

from gametree.config import NormalFormConfig


def _edit(client: TestClient, game_id: str, **command):
    return client.post(f"/api/games/{game_id}/edit", json={"command": command})


def _new_game(client: TestClient, **body) -> dict:
    response = client.post("/api/games", json=body)
    assert response.status_code == 200
    return response.json()


class TestHealthEndpoint:
    def test_health(self, client: TestClient):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"
        assert response.json()["games_loaded"] >= 3


class TestGamesEndpoints:
    def test_list_includes_samples(self, client: TestClient):
        response = client.get("/api/games")
        assert response.status_code == 200
        ids = {g["id"] for g in response.json()}
        assert {"matching-pennies", "trust-game", "biased-coin"} <= ids

    def test_get_game(self, client: TestClient):
        response = client.get("/api/games/trust-game")
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Trust Game"
        assert data["format_name"] == "extensive"
        assert [p["name"] for p in data["players"]] == ["Chance", "Investor", "Trustee"]
        assert data["nodes"][0]["id"] == data["root"]
        assert data["nodes"][0]["kind"] == "decision"

    def test_get_nonexistent_game(self, client: TestClient):
        response = client.get("/api/games/not-a-real-game")
        assert response.status_code == 404

    def test_summary(self, client: TestClient):
        response = client.get("/api/games/matching-pennies/summary")
        assert response.status_code == 200
        assert response.json()["profile_count"] == 4

    def test_create_and_delete(self, client: TestClient):
        game = _new_game(client, title="Fresh", players=["Row", "Column"], id="fresh")
        assert game["id"] == "fresh"
        assert len(game["nodes"]) == 1
        assert game["nodes"][0]["kind"] == "terminal"
        assert client.post("/api/games", json={"id": "fresh"}).status_code == 400
        assert client.delete("/api/games/fresh").status_code == 200
        assert client.delete("/api/games/fresh").status_code == 404

    def test_create_rejects_unknown_number_type(self, client: TestClient):
        response = client.post("/api/games", json={"number_type": "complex"})
        assert response.status_code == 422

    def test_reset(self, client: TestClient):
        _new_game(client, id="scratch")
        response = client.post("/api/reset")
        assert response.status_code == 200
        assert client.get("/api/games/scratch").status_code == 404
        assert client.get("/api/games/trust-game").status_code == 200


class TestEditEndpoint:
    def test_build_a_game(self, client: TestClient):
        game = _new_game(client, players=["Row", "Column"])
        game_id, root = game["id"], game["root"]

        response = _edit(client, game_id, op="add_move", node=root, player=1, actions=["U", "D"])
        assert response.status_code == 200
        data = response.json()
        iset = data["result"]
        assert data["game"]["revision"] == 1
        assert [a["label"] for a in data["game"]["infosets"][0]["actions"]] == ["U", "D"]

        up = data["game"]["nodes"][1]["id"]
        response = _edit(client, game_id, op="new_outcome", payoffs={"1": 3, "2": "1/2"})
        assert response.status_code == 200
        outcome = response.json()["result"]
        response = _edit(client, game_id, op="set_outcome", node=up, outcome=outcome)
        assert response.status_code == 200
        nodes = {n["id"]: n for n in response.json()["game"]["nodes"]}
        assert nodes[up]["outcome"] == outcome
        outcomes = response.json()["game"]["outcomes"]
        assert outcomes[0]["payoffs"] == {"1": 3.0, "2": 0.5}

        response = _edit(client, game_id, op="rename", target="infoset", id=iset, name="first")
        assert response.status_code == 200
        assert response.json()["game"]["infosets"][0]["name"] == "first"

    def test_rational_game(self, client: TestClient):
        game = _new_game(client, number_type="rational")
        response = _edit(client, game["id"], op="new_outcome", payoffs={"1": "1/3", "2": 0.25})
        assert response.status_code == 200
        payoffs = response.json()["game"]["outcomes"][0]["payoffs"]
        assert payoffs == {"1": "1/3", "2": "1/4"}

    def test_chance_probabilities(self, client: TestClient):
        game = _new_game(client, number_type="rational")
        response = _edit(client, game["id"], op="add_move", node=game["root"], player=0, actions=3)
        iset = response.json()["result"]
        response = _edit(client, game["id"], op="set_chance_probs", infoset=iset, probs=["1/2", "1/4", "1/4"])
        assert response.status_code == 200
        actions = response.json()["game"]["infosets"][0]["actions"]
        assert [a["probability"] for a in actions] == ["1/2", "1/4", "1/4"]

    def test_structure_error_is_400(self, client: TestClient):
        game = client.get("/api/games/matching-pennies").json()
        response = _edit(client, "matching-pennies", op="add_move", node=game["root"], player=1)
        assert response.status_code == 400
        assert client.get("/api/games/matching-pennies").json()["revision"] == game["revision"]

    def test_unknown_node_is_404(self, client: TestClient):
        response = _edit(client, "matching-pennies", op="delete_tree", node=99999)
        assert response.status_code == 404
        assert "Node" in response.json()["detail"]

    def test_unknown_game_is_404(self, client: TestClient):
        response = _edit(client, "nope", op="delete_empty_infosets")
        assert response.status_code == 404

    def test_unknown_op_is_422(self, client: TestClient):
        response = _edit(client, "matching-pennies", op="explode")
        assert response.status_code == 422

    def test_mark_all_subgames(self, client: TestClient):
        response = _edit(client, "trust-game", op="mark_subgames")
        assert response.status_code == 200
        marked = response.json()["result"]
        assert all(n["subgame_root"] for n in response.json()["game"]["nodes"] if n["id"] in marked)
        assert len(marked) == 5


class TestSubgamesEndpoint:
    def test_straddling_infoset(self, client: TestClient):
        game = client.get("/api/games/matching-pennies").json()
        response = client.get("/api/games/matching-pennies/subgames")
        assert response.status_code == 200
        data = response.json()
        decision_nodes = {n["id"] for n in game["nodes"] if n["kind"] == "decision"}
        assert set(data["legal"]) & decision_nodes == {game["root"]}
        assert data["marked"] == [game["root"]]


class TestStrategicEndpoints:
    def test_strategies(self, client: TestClient):
        response = client.get("/api/games/matching-pennies/strategies")
        assert response.status_code == 200
        data = response.json()
        assert data["profile_count"] == 4
        assert [p["stride"] for p in data["players"]] == [1, 2]
        assert [s["label"] for s in data["players"][0]["strategies"]] == ["Heads", "Tails"]

    def test_profile_payoffs(self, client: TestClient):
        response = client.post(
            "/api/games/matching-pennies/payoffs", json={"strategies": {"1": 1, "2": 0}}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["index"] == 1
        assert data["payoffs"] == {"1": 0.0, "2": 1.0}
        assert data["labels"] == {"1": "Tails", "2": "Heads"}

    def test_profile_payoffs_exact(self, client: TestClient):
        response = client.post(
            "/api/games/biased-coin/payoffs", json={"strategies": {"1": 0, "2": 0}}
        )
        assert response.status_code == 200
        assert response.json()["payoffs"] == {"1": "1/3", "2": "-1/3"}

    def test_incomplete_profile(self, client: TestClient):
        response = client.post("/api/games/matching-pennies/payoffs", json={"strategies": {"1": 0}})
        assert response.status_code == 400

    def test_bad_strategy_index(self, client: TestClient):
        response = client.post(
            "/api/games/matching-pennies/payoffs", json={"strategies": {"1": 0, "2": 5}}
        )
        assert response.status_code == 400

    def test_full_support(self, client: TestClient):
        response = client.post("/api/games/matching-pennies/support", json={})
        assert response.status_code == 200
        data = response.json()
        assert [c["payoffs"] for c in data["contingencies"]] == [
            {"1": 1.0, "2": 0.0},
            {"1": 0.0, "2": 1.0},
            {"1": 0.0, "2": 1.0},
            {"1": 1.0, "2": 0.0},
        ]

    def test_restricted_support(self, client: TestClient):
        response = client.post(
            "/api/games/matching-pennies/support",
            json={"strategies": {"1": [0]}, "label": "heads only", "materialize": True},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["label"] == "heads only"
        assert data["num_strats"] == {"1": 1, "2": 2}
        assert [c["index"] for c in data["contingencies"]] == [0, 2]
        assert [c["payoffs"] for c in data["contingencies"]] == [
            {"1": 1.0, "2": 0.0},
            {"1": 0.0, "2": 1.0},
        ]

    def test_materialize_limited_by_whole_game(self, client: TestClient, monkeypatch):
        monkeypatch.setattr(NormalFormConfig, "ENUMERATION_LIMIT", 3)
        body = {"strategies": {"1": [0]}, "materialize": True}
        response = client.post("/api/games/matching-pennies/support", json=body)
        assert response.status_code == 400
        assert "4" in response.json()["detail"]
        body["materialize"] = False
        response = client.post("/api/games/matching-pennies/support", json=body)
        assert response.status_code == 200
        assert len(response.json()["contingencies"]) == 2

    def test_empty_support_rejected(self, client: TestClient):
        response = client.post(
            "/api/games/matching-pennies/support", json={"strategies": {"2": []}}
        )
        assert response.status_code == 400

    def test_strategies_follow_edits(self, client: TestClient):
        game = client.get("/api/games/matching-pennies").json()
        right = game["nodes"][4]["id"]
        response = _edit(client, "matching-pennies", op="split_infoset", node=right)
        assert response.status_code == 200
        data = client.get("/api/games/matching-pennies/strategies").json()
        assert data["profile_count"] == 8
