"""
Pydantic models shared by the ranker and its HTTP surface.

RankablePost / Viewer are snapshots assembled by the caller just before a
ranking call. Every optional field may be missing; the ranker treats a
missing field as a zero contribution for the matching term.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MediaDescriptor(BaseModel):
    filename: Optional[str] = None
    path: Optional[str] = None
    type: Optional[str] = Field(None, pattern="^(image|video)$")


class RankablePost(BaseModel):
    post_id: str
    created_at: datetime
    title: Optional[str] = None
    body: Optional[str] = None
    likes: Optional[list[str]] = None
    comments: Optional[list[str]] = None
    media: Optional[MediaDescriptor] = None
    # Legacy single-image field, kept alongside media for older posts
    image: Optional[str] = None
    author_ids: Optional[list[str]] = None

    @property
    def author_id(self) -> Optional[str]:
        """Only the first author counts for scoring."""
        if self.author_ids:
            return self.author_ids[0]
        return None

    @property
    def has_media(self) -> bool:
        return bool(self.media or self.image)


class Viewer(BaseModel):
    user_id: str
    following: Optional[list[str]] = None


class ScoreBreakdown(BaseModel):
    """Per-term contributions for one post."""
    recency: float
    likes: float
    comments: float
    affinity: float
    jitter: float
    content: float
    media: float

    @property
    def engagement(self) -> float:
        return self.likes + self.comments

    @property
    def total(self) -> float:
        return (
            self.recency
            + self.likes
            + self.comments
            + self.affinity
            + self.jitter
            + self.content
            + self.media
        )


# ── HTTP transport ─────────────────────────────────────────────────────────

class RankRequest(BaseModel):
    viewer: Viewer
    posts: list[RankablePost] = []
    # Defaults to the server clock when omitted
    now: Optional[datetime] = None
    # Seeds the jitter source for reproducible orderings
    seed: Optional[int] = None


class RankedPost(BaseModel):
    post_id: str
    score: float
    breakdown: ScoreBreakdown


class RankResponse(BaseModel):
    posts: list[RankedPost]
