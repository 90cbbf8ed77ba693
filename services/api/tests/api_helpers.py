def create_user(client, username: str, **extra) -> str:
    resp = client.post("/users/", json={"username": username, **extra})
    assert resp.status_code == 201, resp.text
    return resp.json()["user_id"]


def follow(client, follower_id: str, followee_id: str) -> None:
    resp = client.post(
        "/users/follow",
        json={"follower_id": follower_id, "followee_id": followee_id},
    )
    assert resp.status_code == 204, resp.text


def create_post(client, user_id: str, **fields) -> dict:
    resp = client.post("/posts/", json={"user_id": user_id, **fields})
    assert resp.status_code == 201, resp.text
    return resp.json()
