"""
Pydantic request / response schemas for the API layer.
Kept separate from ORM models to avoid coupling transport to storage.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from feedrank.schemas import MediaDescriptor
from socialfold.config import settings


# ──────────────────────────── Users ───────────────────────────────────────

class UserCreate(BaseModel):
    username: str = Field(
        ...,
        min_length=settings.min_username_length,
        max_length=settings.max_username_length,
        pattern=r"^[A-Za-z0-9_.]+$",
    )
    display_name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    image: Optional[str] = None


class UserUpdate(BaseModel):
    display_name: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = Field(None, max_length=500)
    image: Optional[str] = None


class UserResponse(BaseModel):
    user_id: str
    username: str
    display_name: Optional[str]
    email: Optional[str] = None
    image: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class FollowRequest(BaseModel):
    follower_id: str
    followee_id: str


# ──────────────────────────── Posts ───────────────────────────────────────

class PostCreate(BaseModel):
    user_id: str
    title: Optional[str] = Field(None, max_length=settings.max_title_length)
    content: Optional[str] = Field(None, max_length=settings.max_post_length)
    # Descriptor of an already-uploaded file; optional
    media: Optional[MediaDescriptor] = None
    # Legacy single-image URL
    image: Optional[str] = None

    @field_validator("media")
    @classmethod
    def media_must_describe_something(cls, v: Optional[MediaDescriptor]):
        if v is not None and not (v.filename or v.path or v.type):
            raise ValueError("media needs a filename, path or type")
        return v


class PostResponse(BaseModel):
    post_id: str
    user_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    title: Optional[str]
    content: Optional[str]
    image: Optional[str] = None
    media: Optional[MediaDescriptor] = None
    likes_count: int
    comments_count: int
    created_at: datetime


class ProfileResponse(BaseModel):
    user: UserResponse
    followers_count: int
    following_count: int
    posts_count: int
    posts: list[PostResponse]


class LikeRequest(BaseModel):
    user_id: str


class LikeResponse(BaseModel):
    liked: bool
    likes_count: int


# ──────────────────────────── Comments ────────────────────────────────────

class CommentCreate(BaseModel):
    user_id: str
    content: str = Field(..., max_length=settings.max_comment_length)


class CommentResponse(BaseModel):
    comment_id: str
    post_id: str
    user_id: str
    username: Optional[str] = None
    content: str
    likes_count: int
    created_at: datetime


# ──────────────────────────── Notifications ───────────────────────────────

class NotificationResponse(BaseModel):
    notification_id: str
    recipient_id: str
    sender_id: str
    sender_username: Optional[str] = None
    type: str
    post_id: Optional[str] = None
    comment_id: Optional[str] = None
    read: bool
    created_at: datetime


class UnreadCountResponse(BaseModel):
    user_id: str
    count: int


# ──────────────────────────── Feed ────────────────────────────────────────

class FeedPost(PostResponse):
    """A hydrated, ranked post returned in the feed."""
    rank_score: float
    time_ago: str


class FeedResponse(BaseModel):
    user_id: str
    posts: list[FeedPost]
    # Metadata useful for understanding the pipeline
    candidates: int
    ranked_by: str   # 'ranking-service' | 'local'
    latency_ms: float
