BASE = "/api/v0/matches"


def _create(client, **body):
    resp = client.post(BASE, json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _select(client, mid, team, type_, action, **extra):
    resp = client.put(f"{BASE}/{mid}/selection", json={"team": team, "type": type_, "action": action, **extra})
    assert resp.status_code == 200, resp.text
    return resp.json()


def _tap(client, mid, x, y):
    resp = client.post(f"{BASE}/{mid}/taps", json={"x": x, "y": y})
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_create_match_defaults(client):
    data = _create(client)
    assert data["sport"] == "volleyball"
    assert data["score"] == {"blue": 0, "red": 0}
    assert data["currentSetNumber"] == 1
    assert data["teamNames"] == {"blue": "Blue", "red": "Red"}
    assert data["gameState"] is None
    assert data["rallyState"] == "idle"


def test_create_rejects_unknown_sport(client):
    resp = client.post(BASE, json={"sport": "curling"})
    assert resp.status_code == 404
    assert resp.headers["content-type"].startswith("application/problem+json")
    assert resp.json()["code"] == "unknown_sport"


def test_create_rejects_duplicate_players(client):
    resp = client.post(BASE, json={"players": [{"id": "p1"}, {"id": "p1"}]})
    assert resp.status_code == 422


def test_unknown_match_is_problem_detail(client):
    resp = client.get(f"{BASE}/nope")
    assert resp.status_code == 404
    body = resp.json()
    assert body["code"] == "match_not_found"
    assert body["title"] == "Match not found"
    assert body["instance"] == f"{BASE}/nope"


def test_select_tap_and_undo(client):
    mid = _create(client)["id"]
    data = _select(client, mid, "blue", "scored", "attack")
    assert data["selection"]["action"] == "attack"
    assert data["highlights"][0]["x"] == 300.0
    assert data["rallyState"] == "action_selected"

    data = _tap(client, mid, 0.25, 0.5)
    assert data["applied"] is False
    assert data["outcome"] == {"status": "rejected", "zone": "left_court", "pointId": None}

    data = _tap(client, mid, 0.75, 0.5)
    assert data["applied"] is True
    assert data["outcome"]["status"] == "concluded"
    assert data["score"] == {"blue": 1, "red": 0}
    assert data["points"][0]["action"] == "attack"

    data = client.post(f"{BASE}/{mid}/undo").json()
    assert data["applied"] is True
    assert data["points"] == []
    data = client.post(f"{BASE}/{mid}/undo").json()
    assert data["applied"] is False


def test_cancel_selection(client):
    mid = _create(client)["id"]
    _select(client, mid, "blue", "scored", "attack")
    data = client.delete(f"{BASE}/{mid}/selection").json()
    assert data["selection"] is None
    assert data["applied"] is True


def test_select_rejects_wrong_category(client):
    mid = _create(client)["id"]
    resp = client.put(f"{BASE}/{mid}/selection", json={"team": "blue", "type": "fault", "action": "attack"})
    assert resp.status_code == 422
    assert resp.json()["code"] == "invalid_action"


def test_service_miss_resolves_on_selection(client):
    mid = _create(client)["id"]
    data = _select(client, mid, "red", "fault", "service_miss")
    assert data["outcome"]["status"] == "concluded"
    assert data["points"][0]["x"] == -1.0
    assert data["score"]["red"] == 1


def test_player_assignment_flow(client):
    mid = _create(client, players=[{"id": "p1", "name": "Ana", "number": "7"}])["id"]
    _select(client, mid, "blue", "scored", "attack")
    data = _tap(client, mid, 0.75, 0.5)
    assert data["outcome"]["status"] == "parked"
    assert data["pendingPlayerAssignment"] is True
    assert data["pendingPoint"]["action"] == "attack"

    resp = client.post(f"{BASE}/{mid}/assign", json={"playerId": "ghost"})
    assert resp.status_code == 422

    data = client.post(f"{BASE}/{mid}/assign", json={"playerId": "p1"}).json()
    assert data["pendingPlayerAssignment"] is False
    assert data["points"][0]["playerId"] == "p1"

    _select(client, mid, "blue", "scored", "block")
    _tap(client, mid, 0.75, 0.5)
    data = client.post(f"{BASE}/{mid}/assign", json={"playerId": None}).json()
    assert data["applied"] is True
    assert "playerId" not in data["points"][1] or data["points"][1]["playerId"] is None


def test_set_lifecycle_and_finish(client):
    mid = _create(client, metadata={"hasCourt": False})["id"]
    _select(client, mid, "red", "scored", "attack")
    data = client.post(f"{BASE}/{mid}/end-set").json()
    assert data["awaitingNewSet"] is True
    assert data["setsScore"] == {"blue": 0, "red": 1}
    assert data["completedSets"][0]["winner"] == "red"

    data = client.post(f"{BASE}/{mid}/new-set").json()
    assert data["sidesSwapped"] is True
    data = client.post(f"{BASE}/{mid}/switch-sides").json()
    assert data["sidesSwapped"] is False

    data = client.post(f"{BASE}/{mid}/finish").json()
    assert data["finished"] is True
    data = client.post(f"{BASE}/{mid}/switch-sides").json()
    assert data["applied"] is False
    assert data["sidesSwapped"] is False
    resp = client.put(f"{BASE}/{mid}/selection", json={"team": "blue", "type": "scored", "action": "attack"})
    assert resp.status_code == 200
    assert resp.json()["applied"] is False


def test_tennis_game_state(client):
    mid = _create(client, sport="tennis", metadata={"hasCourt": False})["id"]
    for _ in range(3):
        data = _select(client, mid, "blue", "scored", "winner_forehand")
    game = data["gameState"]
    assert game["gameScore"] == {"blue": "40", "red": "0"}
    assert game["servingTeam"] == "blue"
    assert data["servingSide"] == "ad"
    assert data["periodLabel"] == "Set"


def test_snapshot_round_trip(client):
    mid = _create(client, sport="basketball", metadata={"hasCourt": False})["id"]
    _select(client, mid, "blue", "scored", "three_points")
    snap = client.get(f"{BASE}/{mid}/snapshot").json()
    assert snap["sport"] == "basketball"
    assert snap["points"][0]["pointValue"] == 3
    assert snap["metadata"]["hasCourt"] is False

    resp = client.put(f"{BASE}/{mid}/snapshot", json=snap)
    assert resp.status_code == 200, resp.text
    assert resp.json()["score"] == {"blue": 3, "red": 0}

    resp = client.put(f"{BASE}/restored/snapshot", json=snap)
    assert resp.status_code == 200
    assert client.get(f"{BASE}/restored").json()["score"] == {"blue": 3, "red": 0}


def test_snapshot_with_broken_invariants_is_rejected(client):
    mid = _create(client)["id"]
    snap = client.get(f"{BASE}/{mid}/snapshot").json()
    snap["currentSetNumber"] = 4
    resp = client.put(f"{BASE}/{mid}/snapshot", json=snap)
    assert resp.status_code == 422
    assert resp.json()["code"] == "invalid_snapshot"


def test_stats_and_replay(client):
    mid = _create(client, players=[{"id": "p1"}], metadata={"hasCourt": False})["id"]
    _select(client, mid, "blue", "scored", "attack")
    client.post(f"{BASE}/{mid}/assign", json={"playerId": "p1"})
    _select(client, mid, "red", "scored", "block")

    stats = client.get(f"{BASE}/{mid}/stats").json()
    assert stats["teams"]["blue"]["points"] == 1
    assert stats["players"][0]["player"]["id"] == "p1"
    assert stats["players"][0]["efficiency"] == 100.0
    # no court: nothing to draw
    assert stats["spatial"] == []

    replay = client.get(f"{BASE}/{mid}/replay", params={"point": 0}).json()
    assert replay["pointIndex"] == 0
    assert replay["score"] == {"blue": 1, "red": 0}
    assert replay["hasNext"] is True

    overview = client.get(f"{BASE}/{mid}/replay").json()
    assert overview["overview"] is True
    assert overview["score"] == {"blue": 1, "red": 1}


def test_roster_changes(client):
    mid = _create(client)["id"]
    data = client.post(f"{BASE}/{mid}/players", json={"id": "p9", "name": "Cy"}).json()
    assert data["players"][0]["id"] == "p9"
    data = client.delete(f"{BASE}/{mid}/players/p9").json()
    assert data["players"] == []
    assert client.delete(f"{BASE}/{mid}").status_code == 204
    assert client.get(f"{BASE}/{mid}").status_code == 404


def test_replay_reports_game_score_for_tennis(client):
    mid = _create(client, sport="padel", metadata={"hasCourt": False})["id"]
    for _ in range(4):
        _select(client, mid, "red", "scored", "smash_padel")
    _select(client, mid, "blue", "scored", "smash_padel")

    replay = client.get(f"{BASE}/{mid}/replay", params={"point": 3}).json()
    assert replay["gameState"]["games"] == {"blue": 0, "red": 1}
    assert replay["gameState"]["gameScore"] == {"blue": "0", "red": "0"}

    overview = client.get(f"{BASE}/{mid}/replay").json()
    assert overview["gameState"]["gameScore"] == {"blue": "15", "red": "0"}
    assert overview["score"] == {"blue": 1, "red": 4}

    volley = _create(client, metadata={"hasCourt": False})["id"]
    assert client.get(f"{BASE}/{volley}/replay").json()["gameState"] is None
