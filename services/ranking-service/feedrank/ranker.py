"""
Home timeline ranker.

Every candidate gets an additive score and the batch is sorted descending:

  score = recency      max(0, 100 - 2 * hours_since_post)
        + engagement   5 * likes + 3 * comments
        + affinity     20 own post | 50 followed author | 0 otherwise
        + jitter       uniform [0, 10)
        + content      min(20, (len(title) + len(body)) / 10)
        + media        15 if the post carries media or a legacy image

Recency decays linearly to zero over 50 hours, so old posts compete on the
remaining signals only. A followed author is worth ~25 hours of recency.

The ranker is a pure function of its arguments: no caching between calls,
no mutation of the inputs. Pass a seeded ``random.Random`` as ``rng`` to make
the jitter term reproducible.
"""
import logging
import random
from datetime import datetime, timezone
from typing import AbstractSet, Iterable, Optional

from feedrank.schemas import RankablePost, ScoreBreakdown, Viewer

logger = logging.getLogger(__name__)

RECENCY_MAX = 100.0
RECENCY_DECAY_PER_HOUR = 2.0
LIKE_WEIGHT = 5.0
COMMENT_WEIGHT = 3.0
SELF_AFFINITY = 20.0
FOLLOW_AFFINITY = 50.0
JITTER_SPAN = 10.0
CONTENT_CAP = 20.0
CONTENT_CHARS_PER_POINT = 10.0
MEDIA_BONUS = 15.0


def _as_utc(ts: datetime) -> datetime:
    # Storage hands back naive datetimes that are already UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _hours_since(created_at: datetime, now: datetime) -> float:
    delta = _as_utc(now) - _as_utc(created_at)
    return max(0.0, delta.total_seconds() / 3600)


def _affinity(post: RankablePost, viewer: Viewer, following: AbstractSet[str]) -> float:
    author_id = post.author_id
    if author_id is None:
        return 0.0
    if author_id == viewer.user_id:
        return SELF_AFFINITY
    if author_id in following:
        return FOLLOW_AFFINITY
    return 0.0


def score_post(
    post: RankablePost,
    viewer: Viewer,
    now: datetime,
    rng: Optional[random.Random] = None,
    following: Optional[AbstractSet[str]] = None,
) -> ScoreBreakdown:
    """
    Compute the per-term score of a single post for ``viewer`` at ``now``.

    ``following`` is the viewer's follow set; batch callers build it once and
    pass it in.
    """
    rng = rng or random
    if following is None:
        following = set(viewer.following or ())

    hours = _hours_since(post.created_at, now)
    content_length = len(post.title or "") + len(post.body or "")

    breakdown = ScoreBreakdown(
        recency=max(0.0, RECENCY_MAX - hours * RECENCY_DECAY_PER_HOUR),
        likes=len(post.likes or ()) * LIKE_WEIGHT,
        comments=len(post.comments or ()) * COMMENT_WEIGHT,
        affinity=_affinity(post, viewer, following),
        jitter=rng.random() * JITTER_SPAN,
        content=min(CONTENT_CAP, content_length / CONTENT_CHARS_PER_POINT),
        media=MEDIA_BONUS if post.has_media else 0.0,
    )

    logger.debug(
        "Post %r score: %s total=%.2f",
        post.title,
        breakdown.model_dump(),
        breakdown.total,
    )
    return breakdown


def rank_with_scores(
    posts: Iterable[RankablePost],
    viewer: Viewer,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> list[tuple[RankablePost, ScoreBreakdown]]:
    """
    Score every post once and return (post, breakdown) pairs, best first.

    Ties are left to the jitter term; there is no secondary sort key.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    following = set(viewer.following or ())
    scored = [(post, score_post(post, viewer, now, rng, following)) for post in posts]
    scored.sort(key=lambda pair: pair[1].total, reverse=True)
    return scored


def rank(
    posts: Iterable[RankablePost],
    viewer: Viewer,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> list[RankablePost]:
    """Return the same posts ordered most-relevant-first."""
    return [post for post, _ in rank_with_scores(posts, viewer, now, rng)]
