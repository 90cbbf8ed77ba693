"""
Post endpoints:
  POST /posts                — create a post (notifies followers)
  GET  /posts/{id}           — fetch a single post
  POST /posts/{id}/like      — like / unlike toggle
  POST /posts/{id}/comments  — add a comment
  GET  /posts/{id}/comments  — list comments, newest first
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from opentelemetry import trace
from sqlalchemy.ext.asyncio import AsyncSession

from feedrank.schemas import MediaDescriptor
from socialfold.database import get_db
from socialfold.models import Comment, Like, Post, User
from socialfold.notifier import notify, notify_followers
from socialfold.routers.comments import build_comment_response
from socialfold.schemas import (
    CommentCreate,
    CommentResponse,
    LikeRequest,
    LikeResponse,
    PostCreate,
    PostResponse,
)
from socialfold.telemetry import COMMENTS_TOTAL, POST_INGESTION_TOTAL

logger = logging.getLogger(__name__)
router = APIRouter()
tracer = trace.get_tracer(__name__)


def media_descriptor(post: Post):
    if not (post.media_path or post.media_filename or post.media_type):
        return None
    return MediaDescriptor(
        filename=post.media_filename,
        path=post.media_path,
        type=post.media_type,
    )


def build_post_response(post: Post) -> PostResponse:
    return PostResponse(
        post_id=post.post_id,
        user_id=post.user_id,
        username=post.author.username if post.author else None,
        display_name=post.author.display_name if post.author else None,
        title=post.title,
        content=post.content,
        image=post.image,
        media=media_descriptor(post),
        likes_count=len(post.likes),
        comments_count=len(post.comments),
        created_at=post.created_at,
    )


async def get_post_or_404(db: AsyncSession, post_id: str) -> Post:
    post = await db.get(Post, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


async def get_user_or_404(db: AsyncSession, user_id: str) -> User:
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(body: PostCreate, db: AsyncSession = Depends(get_db)):
    """
    1. Validate the author exists.
    2. Persist the post with its media descriptor.
    3. Queue a 'post' notification for every follower of the author.
    """
    with tracer.start_as_current_span("create_post") as span:
        user = await get_user_or_404(db, body.user_id)

        media = body.media
        post = Post(
            user_id=user.user_id,
            author=user,
            title=body.title,
            content=body.content,
            image=body.image,
            media_filename=media.filename if media else None,
            media_path=media.path if media else None,
            media_type=media.type if media else None,
            likes=[],
            comments=[],
        )
        db.add(post)
        await db.flush()     # materialise post_id

        span.set_attribute("post.id", post.post_id)
        span.set_attribute("post.user_id", post.user_id)

        notified = await notify_followers(db, user.user_id, post.post_id)
        span.set_attribute("post.notified_followers", notified)

        POST_INGESTION_TOTAL.inc()
        logger.info("Post created: %s by user %s", post.post_id, post.user_id)
        return build_post_response(post)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, db: AsyncSession = Depends(get_db)):
    post = await get_post_or_404(db, post_id)
    return build_post_response(post)


@router.post("/{post_id}/like", response_model=LikeResponse)
async def like_post(post_id: str, body: LikeRequest, db: AsyncSession = Depends(get_db)):
    """Like a post, or remove the like if the user already liked it."""
    with tracer.start_as_current_span("like_post"):
        post = await get_post_or_404(db, post_id)
        await get_user_or_404(db, body.user_id)

        existing = next((like for like in post.likes if like.user_id == body.user_id), None)
        if existing:
            post.likes.remove(existing)
            liked = False
        else:
            post.likes.append(Like(user_id=body.user_id))
            await notify(db, post.user_id, body.user_id, "like", post_id=post_id)
            liked = True

        await db.flush()
        logger.info("%s %s post %s", body.user_id, "liked" if liked else "unliked", post_id)
        return LikeResponse(liked=liked, likes_count=len(post.likes))


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: str, body: CommentCreate, db: AsyncSession = Depends(get_db)
):
    with tracer.start_as_current_span("add_comment"):
        content = body.content.strip()
        if not content:
            raise HTTPException(status_code=400, detail="Comment cannot be empty")

        post = await get_post_or_404(db, post_id)
        user = await get_user_or_404(db, body.user_id)

        comment = Comment(
            post_id=post.post_id,
            user_id=user.user_id,
            author=user,
            content=content,
            likes=[],
        )
        db.add(comment)
        await db.flush()

        await notify(
            db,
            post.user_id,
            user.user_id,
            "comment",
            post_id=post.post_id,
            comment_id=comment.comment_id,
        )

        COMMENTS_TOTAL.inc()
        logger.info("Comment %s added to post %s", comment.comment_id, post_id)
        return build_comment_response(comment)


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: str, db: AsyncSession = Depends(get_db)):
    post = await get_post_or_404(db, post_id)
    comments = sorted(post.comments, key=lambda c: c.created_at, reverse=True)
    return [build_comment_response(c) for c in comments]
