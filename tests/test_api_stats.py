from datetime import datetime, timezone

from studio_bingo.models import CardDefinition


def post_submission(client, device, mask, team=None):
    payload = {"week_id": "week1", "display_name": device, "marked_mask": mask, "team": team}
    return client.post("/api/submit", json=payload, headers={"X-Device-Id": device})


def test_stats(client):
    post_submission(client, "d1", "1", team="Art")
    post_submission(client, "d2", "3", team="Art")

    res = client.get("/api/stats?week=week1")
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["week_id"] == "week1"
    assert data["total_submissions"] == 2
    assert data["cells"][0] == {"idx": 0, "label": None, "count": 2, "pct": 100}
    assert data["cells"][1]["pct"] == 50
    assert data["teams"] == [{"team": "Art", "tickets_total": 3, "devices": 2}]


def test_stats_for_empty_week(client):
    data = client.get("/api/stats?week=week9").get_json()["data"]
    assert data["total_submissions"] == 0
    assert {cell["pct"] for cell in data["cells"]} == {0}


def test_stats_requires_week(client):
    res = client.get("/api/stats")
    assert res.status_code == 400
    assert res.get_json()["error"]["code"] == "missing_week"


def test_stats_survive_a_corrupt_card(flask_app, client):
    post_submission(client, "d1", "1")
    db = flask_app.extensions["session_factory"]()
    db.add(CardDefinition(week_id="week1", cells_json="{not json", created_at=datetime.now(timezone.utc)))
    db.commit()
    db.close()

    res = client.get("/api/stats?week=week1")
    assert res.status_code == 200
    data = res.get_json()["data"]
    assert data["cells"][0] == {"idx": 0, "label": None, "count": 1, "pct": 100}

    # the card endpoint still reports the bad value
    res = client.get("/api/card?week=week1")
    assert res.status_code == 500
    assert res.get_json()["error"]["code"] == "corrupt_data"
