from api_helpers import create_post, create_user, follow


def _feed(client, user_id, **params):
    resp = client.get("/feed/", params={"user_id": user_id, **params})
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_feed_for_unknown_user(client):
    assert client.get("/feed/", params={"user_id": "ghost"}).status_code == 404


def test_empty_feed(client):
    alice = create_user(client, "alice_ai")

    feed = _feed(client, alice)

    assert feed["posts"] == []
    assert feed["candidates"] == 0


def test_feed_contains_every_candidate_once(client):
    alice = create_user(client, "alice_ai")
    bob = create_user(client, "bob_builder")
    carol = create_user(client, "carol_codes")
    follow(client, alice, bob)
    post_ids = {
        create_post(client, author, content=f"post {i}")["post_id"]
        for i, author in enumerate([alice, bob, carol, bob, carol])
    }

    feed = _feed(client, alice)

    assert feed["ranked_by"] == "local"
    assert feed["candidates"] == 5
    assert sorted(p["post_id"] for p in feed["posts"]) == sorted(post_ids)
    scores = [p["rank_score"] for p in feed["posts"]]
    assert scores == sorted(scores, reverse=True)
    assert all(p["time_ago"] == "Just now" for p in feed["posts"])


def test_followed_author_ranks_above_identical_stranger_post(client):
    alice = create_user(client, "alice_ai")
    friend = create_user(client, "bob_builder")
    stranger = create_user(client, "carol_codes")
    follow(client, alice, friend)
    stranger_post = create_post(client, stranger, title="same", content="same body")
    friend_post = create_post(client, friend, title="same", content="same body")

    for _ in range(5):
        posts = _feed(client, alice)["posts"]
        assert [p["post_id"] for p in posts] == [
            friend_post["post_id"],
            stranger_post["post_id"],
        ]


def test_engagement_and_media_lift_a_post(client):
    alice = create_user(client, "alice_ai")
    bob = create_user(client, "bob_builder")
    carol = create_user(client, "carol_codes")
    plain = create_post(client, carol, content="plain")
    popular = create_post(
        client,
        carol,
        content="popular",
        media={"filename": "a.png", "path": "/uploads/a.png", "type": "image"},
    )
    for liker in (alice, bob, carol):
        client.post(f"/posts/{popular['post_id']}/like", json={"user_id": liker})

    posts = _feed(client, alice)["posts"]

    assert posts[0]["post_id"] == popular["post_id"]
    assert posts[0]["likes_count"] == 3
    assert posts[0]["rank_score"] > posts[1]["rank_score"] + 20
    assert posts[1]["post_id"] == plain["post_id"]


def test_type_only_media_gets_media_bonus(client):
    alice = create_user(client, "alice_ai")
    carol = create_user(client, "carol_codes")
    plain = create_post(client, carol, content="same")
    with_media = create_post(client, carol, content="same", media={"type": "image"})

    posts = _feed(client, alice)["posts"]

    # Media is worth 15 and jitter spans at most 10
    assert posts[0]["post_id"] == with_media["post_id"]
    assert posts[0]["media"]["type"] == "image"
    assert posts[0]["rank_score"] > posts[1]["rank_score"] + 5
    assert posts[1]["post_id"] == plain["post_id"]


def test_feed_limit(client):
    alice = create_user(client, "alice_ai")
    for i in range(6):
        create_post(client, alice, content=f"post {i}")

    feed = _feed(client, alice, limit=4)

    assert len(feed["posts"]) == 4
    assert feed["candidates"] == 6
