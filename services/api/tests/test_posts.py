from api_helpers import create_post, create_user


def test_create_post_with_media(client):
    alice = create_user(client, "alice_ai")

    post = create_post(
        client,
        alice,
        title="Launch day",
        content="Shipped it",
        media={"filename": "demo.mp4", "path": "/uploads/demo.mp4", "type": "video"},
    )

    assert post["username"] == "alice_ai"
    assert post["media"]["type"] == "video"
    assert post["likes_count"] == 0
    assert post["comments_count"] == 0

    fetched = client.get(f"/posts/{post['post_id']}").json()
    assert fetched["title"] == "Launch day"
    assert fetched["media"]["path"] == "/uploads/demo.mp4"


def test_create_post_validation(client):
    alice = create_user(client, "alice_ai")

    too_long = client.post("/posts/", json={"user_id": alice, "content": "x" * 1001})
    bad_media = client.post(
        "/posts/",
        json={"user_id": alice, "media": {"filename": "a.exe", "type": "binary"}},
    )

    assert too_long.status_code == 422
    assert bad_media.status_code == 422


def test_type_only_media_is_kept(client):
    alice = create_user(client, "alice_ai")

    post = create_post(client, alice, content="clip", media={"type": "video"})

    assert post["media"] == {"filename": None, "path": None, "type": "video"}
    fetched = client.get(f"/posts/{post['post_id']}").json()
    assert fetched["media"]["type"] == "video"


def test_empty_media_descriptor_rejected(client):
    alice = create_user(client, "alice_ai")

    resp = client.post("/posts/", json={"user_id": alice, "content": "hi", "media": {}})

    assert resp.status_code == 422


def test_create_post_for_unknown_author(client):
    resp = client.post("/posts/", json={"user_id": "ghost", "content": "boo"})
    assert resp.status_code == 404


def test_unknown_post_is_404(client):
    assert client.get("/posts/missing").status_code == 404


def test_like_toggles(client):
    alice = create_user(client, "alice_ai")
    bob = create_user(client, "bob_builder")
    post_id = create_post(client, alice, content="like me")["post_id"]

    first = client.post(f"/posts/{post_id}/like", json={"user_id": bob})
    assert first.json() == {"liked": True, "likes_count": 1}

    client.post(f"/posts/{post_id}/like", json={"user_id": alice})
    assert client.get(f"/posts/{post_id}").json()["likes_count"] == 2

    undo = client.post(f"/posts/{post_id}/like", json={"user_id": bob})
    assert undo.json() == {"liked": False, "likes_count": 1}


def test_comments_newest_first(client):
    alice = create_user(client, "alice_ai")
    bob = create_user(client, "bob_builder")
    post_id = create_post(client, alice, content="discuss")["post_id"]

    first = client.post(f"/posts/{post_id}/comments", json={"user_id": bob, "content": "  one  "})
    assert first.status_code == 201
    assert first.json()["content"] == "one"
    client.post(f"/posts/{post_id}/comments", json={"user_id": alice, "content": "two"})

    comments = client.get(f"/posts/{post_id}/comments").json()

    assert [c["content"] for c in comments] == ["two", "one"]
    assert comments[1]["username"] == "bob_builder"
    assert client.get(f"/posts/{post_id}").json()["comments_count"] == 2


def test_empty_comment_rejected(client):
    alice = create_user(client, "alice_ai")
    post_id = create_post(client, alice, content="discuss")["post_id"]

    resp = client.post(f"/posts/{post_id}/comments", json={"user_id": alice, "content": "   "})

    assert resp.status_code == 400


def test_comment_too_long_rejected(client):
    alice = create_user(client, "alice_ai")
    post_id = create_post(client, alice, content="discuss")["post_id"]

    resp = client.post(f"/posts/{post_id}/comments", json={"user_id": alice, "content": "x" * 501})

    assert resp.status_code == 422


def test_comment_like_toggles(client):
    alice = create_user(client, "alice_ai")
    bob = create_user(client, "bob_builder")
    post_id = create_post(client, alice, content="discuss")["post_id"]
    comment_id = client.post(
        f"/posts/{post_id}/comments", json={"user_id": alice, "content": "hi"}
    ).json()["comment_id"]

    liked = client.post(f"/comments/{comment_id}/like", json={"user_id": bob})
    unliked = client.post(f"/comments/{comment_id}/like", json={"user_id": bob})

    assert liked.json() == {"liked": True, "likes_count": 1}
    assert unliked.json() == {"liked": False, "likes_count": 0}


def test_like_unknown_comment(client):
    bob = create_user(client, "bob_builder")
    resp = client.post("/comments/missing/like", json={"user_id": bob})
    assert resp.status_code == 404
