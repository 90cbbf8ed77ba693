import pytest
from fastapi.testclient import TestClient

from ranking_fixtures import NOW, make_post
from feedrank.main import app


@pytest.fixture
def client():
    return TestClient(app)


def _payload(posts, seed=None):
    body = {
        "viewer": {"user_id": "me", "following": ["friend"]},
        "posts": [p.model_dump(mode="json") for p in posts],
        "now": NOW.isoformat(),
    }
    if seed is not None:
        body["seed"] = seed
    return body


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "service": "ranking-service"}


def test_rank_orders_posts_best_first(client):
    posts = [
        make_post("old", hours_old=45, author="stranger"),
        make_post("fresh-friend", hours_old=1, author="friend", likes=3),
        make_post("mine", hours_old=5, author="me", media=True),
    ]

    resp = client.post("/rank", json=_payload(posts, seed=1))

    assert resp.status_code == 200
    ranked = resp.json()["posts"]
    assert [p["post_id"] for p in ranked] == ["fresh-friend", "mine", "old"]
    scores = [p["score"] for p in ranked]
    assert scores == sorted(scores, reverse=True)
    assert ranked[0]["breakdown"]["affinity"] == 50
    assert ranked[1]["breakdown"]["media"] == 15


def test_seed_makes_ranking_reproducible(client):
    posts = [make_post(f"p{i}", hours_old=2) for i in range(8)]

    first = client.post("/rank", json=_payload(posts, seed=42)).json()
    second = client.post("/rank", json=_payload(posts, seed=42)).json()

    assert first == second


def test_rank_accepts_partial_post_records(client):
    body = {
        "viewer": {"user_id": "me"},
        "posts": [{"post_id": "bare", "created_at": NOW.isoformat()}],
        "now": NOW.isoformat(),
        "seed": 0,
    }

    resp = client.post("/rank", json=body)

    assert resp.status_code == 200
    (ranked,) = resp.json()["posts"]
    assert ranked["post_id"] == "bare"
    assert ranked["breakdown"]["likes"] == 0
    assert ranked["breakdown"]["media"] == 0


def test_rank_empty_batch(client):
    resp = client.post("/rank", json={"viewer": {"user_id": "me"}, "posts": []})
    assert resp.status_code == 200
    assert resp.json() == {"posts": []}


def test_rank_rejects_posts_without_timestamp(client):
    resp = client.post(
        "/rank",
        json={"viewer": {"user_id": "me"}, "posts": [{"post_id": "x"}]},
    )
    assert resp.status_code == 422
