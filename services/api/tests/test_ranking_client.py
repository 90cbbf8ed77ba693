import asyncio
from datetime import datetime, timezone

import httpx

from feedrank.schemas import RankablePost, Viewer
from socialfold.clients.ranking_client import RANKED_BY_SERVICE, RANKED_LOCALLY, RankingClient

VIEWER = Viewer(user_id="me", following=["friend"])
POSTS = [
    RankablePost(post_id="a", created_at=datetime.now(timezone.utc), author_ids=["friend"]),
    RankablePost(post_id="b", created_at=datetime.now(timezone.utc), author_ids=["other"]),
]


def _breakdown(total: float) -> dict:
    return {
        "recency": total,
        "likes": 0.0,
        "comments": 0.0,
        "affinity": 0.0,
        "jitter": 0.0,
        "content": 0.0,
        "media": 0.0,
    }


def _ranked(*pairs) -> dict:
    return {
        "posts": [
            {"post_id": post_id, "score": score, "breakdown": _breakdown(score)}
            for post_id, score in pairs
        ]
    }


def _run(client: RankingClient, transport=None, posts=POSTS):
    async def go():
        await client.start(transport=transport)
        try:
            return await client.rank(VIEWER, posts)
        finally:
            await client.stop()

    return asyncio.run(go())


def test_uses_ranking_service_response():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["body"] = request.read()
        return httpx.Response(200, json=_ranked(("b", 9.0), ("a", 1.0)))

    ranked, ranked_by = _run(RankingClient(), httpx.MockTransport(handler))

    assert ranked_by == RANKED_BY_SERVICE
    assert ranked == [("b", 9.0), ("a", 1.0)]
    assert seen["path"] == "/rank"
    assert b'"user_id":"me"' in seen["body"].replace(b" ", b"")


def test_falls_back_to_local_ranking_on_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"detail": "down"})

    ranked, ranked_by = _run(RankingClient(), httpx.MockTransport(handler))

    assert ranked_by == RANKED_LOCALLY
    # Followed author wins by 50 points; jitter spans at most 10
    assert [post_id for post_id, _ in ranked] == ["a", "b"]


def test_falls_back_when_service_returns_other_posts():
    posts = POSTS + [
        RankablePost(post_id="c", created_at=datetime.now(timezone.utc), author_ids=["other"]),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_ranked(("a", 3.0), ("a", 2.0), ("zzz", 1.0)))

    ranked, ranked_by = _run(RankingClient(), httpx.MockTransport(handler), posts)

    assert ranked_by == RANKED_LOCALLY
    assert sorted(post_id for post_id, _ in ranked) == ["a", "b", "c"]


def test_falls_back_when_service_drops_a_post():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_ranked(("a", 3.0)))

    ranked, ranked_by = _run(RankingClient(), httpx.MockTransport(handler))

    assert ranked_by == RANKED_LOCALLY
    assert sorted(post_id for post_id, _ in ranked) == ["a", "b"]


def test_falls_back_on_malformed_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"posts": ["a", "b"]})

    ranked, ranked_by = _run(RankingClient(), httpx.MockTransport(handler))

    assert ranked_by == RANKED_LOCALLY
    assert [post_id for post_id, _ in ranked] == ["a", "b"]


def test_falls_back_on_non_json_body():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    ranked, ranked_by = _run(RankingClient(), httpx.MockTransport(handler))

    assert ranked_by == RANKED_LOCALLY
    assert {post_id for post_id, _ in ranked} == {"a", "b"}


def test_local_ranking_when_service_disabled():
    ranked, ranked_by = _run(RankingClient())

    assert ranked_by == RANKED_LOCALLY
    assert {post_id for post_id, _ in ranked} == {"a", "b"}


def test_empty_batch_skips_the_service():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("ranking service must not be called")

    async def go():
        client = RankingClient()
        await client.start(transport=httpx.MockTransport(handler))
        try:
            return await client.rank(VIEWER, [])
        finally:
            await client.stop()

    assert asyncio.run(go()) == ([], RANKED_LOCALLY)
