"""
Home timeline endpoint — GET /feed?user_id=<id>

  1. Load the viewer and the set of users they follow.
  2. Load the candidate set: the most recent posts, with likes, comments
     and author attached.
  3. Rank the candidates (ranking service, or in-process fallback).
  4. Hydrate the top `limit` posts with their score and a relative
     timestamp for display.
"""
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from opentelemetry import trace
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feedrank.schemas import RankablePost, Viewer
from socialfold.clients.ranking_client import ranking_client
from socialfold.config import settings
from socialfold.database import get_db
from socialfold.models import Post, User
from socialfold.routers.posts import build_post_response, media_descriptor
from socialfold.routers.users import following_ids
from socialfold.schemas import FeedPost, FeedResponse
from socialfold.telemetry import FEED_CANDIDATES_TOTAL, FEED_LATENCY
from socialfold.timefmt import format_time

logger = logging.getLogger(__name__)
router = APIRouter()
tracer = trace.get_tracer(__name__)


def to_rankable(post: Post) -> RankablePost:
    """Snapshot of a stored post in the shape the ranker reads."""
    return RankablePost(
        post_id=post.post_id,
        created_at=post.created_at,
        title=post.title,
        body=post.content,
        likes=[like.user_id for like in post.likes],
        comments=[comment.comment_id for comment in post.comments],
        media=media_descriptor(post),
        image=post.image,
        author_ids=[post.user_id],
    )


@router.get("/", response_model=FeedResponse)
async def get_feed(
    user_id: str = Query(..., description="ID of the requesting user"),
    limit: int = Query(settings.feed_page_size, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    start_time = time.time()

    with tracer.start_as_current_span("get_feed") as span:
        span.set_attribute("user.id", user_id)

        user = await db.get(User, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")

        viewer = Viewer(user_id=user.user_id, following=await following_ids(db, user_id))

        with tracer.start_as_current_span("feed_candidates"):
            rows = await db.execute(
                select(Post)
                .order_by(Post.created_at.desc())
                .limit(settings.ranking_candidate_limit)
            )
            post_map: dict[str, Post] = {
                p.post_id: p for p in rows.unique().scalars().all()
            }

        FEED_CANDIDATES_TOTAL.inc(len(post_map))
        span.set_attribute("candidates", len(post_map))

        with tracer.start_as_current_span("feed_ranking"):
            ranked, ranked_by = await ranking_client.rank(
                viewer, [to_rankable(p) for p in post_map.values()]
            )
        span.set_attribute("feed.ranked_by", ranked_by)

        now = datetime.now(timezone.utc)
        feed_posts: list[FeedPost] = []
        for post_id, score in ranked[:limit]:
            post = post_map.get(post_id)
            if not post:
                continue
            feed_posts.append(
                FeedPost(
                    **build_post_response(post).model_dump(),
                    rank_score=score,
                    time_ago=format_time(post.created_at, now),
                )
            )

        latency_ms = (time.time() - start_time) * 1000
        FEED_LATENCY.observe(latency_ms / 1000)
        span.set_attribute("feed.latency_ms", latency_ms)
        span.set_attribute("feed.posts_returned", len(feed_posts))

        return FeedResponse(
            user_id=user_id,
            posts=feed_posts,
            candidates=len(post_map),
            ranked_by=ranked_by,
            latency_ms=round(latency_ms, 2),
        )
