"""
User management endpoints:
  POST  /users                        — register a user
  GET   /users/{id}                   — fetch a user
  PATCH /users/{id}                   — update profile fields
  GET   /users/by-username/{username} — profile with counts and posts
  POST  /users/follow                 — follow another user
  POST  /users/unfollow               — unfollow
  GET   /users/{id}/followers         — list followers
  GET   /users/{id}/following         — list followees
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from opentelemetry import trace
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from socialfold.database import get_db
from socialfold.models import Follow, Post, User
from socialfold.notifier import notify
from socialfold.routers.posts import build_post_response, get_user_or_404
from socialfold.schemas import (
    FollowRequest,
    ProfileResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter()
tracer = trace.get_tracer(__name__)


async def following_ids(db: AsyncSession, user_id: str) -> list[str]:
    rows = await db.execute(
        select(Follow.followee_id).where(Follow.follower_id == user_id)
    )
    return [r[0] for r in rows.all()]


async def follower_ids(db: AsyncSession, user_id: str) -> list[str]:
    rows = await db.execute(
        select(Follow.follower_id).where(Follow.followee_id == user_id)
    )
    return [r[0] for r in rows.all()]


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, db: AsyncSession = Depends(get_db)):
    with tracer.start_as_current_span("create_user"):
        existing = await db.execute(
            select(User).where(User.username == body.username)
        )
        if existing.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Username '{body.username}' already taken",
            )

        user = User(
            username=body.username,
            display_name=body.display_name,
            email=body.email,
            image=body.image,
        )
        db.add(user)
        await db.flush()  # get user_id before commit

        logger.info("Created user %s (id=%s)", user.username, user.user_id)
        return user


@router.get("/by-username/{username}", response_model=ProfileResponse)
async def get_profile(username: str, db: AsyncSession = Depends(get_db)):
    # Profile links are written as /@name
    username = username.lstrip("@")
    row = await db.execute(select(User).where(User.username == username))
    user = row.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    followers = await db.scalar(
        select(func.count()).select_from(Follow).where(Follow.followee_id == user.user_id)
    )
    following = await db.scalar(
        select(func.count()).select_from(Follow).where(Follow.follower_id == user.user_id)
    )
    rows = await db.execute(
        select(Post)
        .where(Post.user_id == user.user_id)
        .order_by(Post.created_at.desc())
    )
    posts = rows.unique().scalars().all()

    return ProfileResponse(
        user=UserResponse.model_validate(user),
        followers_count=followers or 0,
        following_count=following or 0,
        posts_count=len(posts),
        posts=[build_post_response(p) for p in posts],
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, db: AsyncSession = Depends(get_db)):
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(user_id: str, body: UserUpdate, db: AsyncSession = Depends(get_db)):
    user = await db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(user, field, value)
    await db.flush()

    logger.info("Updated profile of %s", user_id)
    return user


@router.post("/follow", status_code=status.HTTP_204_NO_CONTENT)
async def follow_user(body: FollowRequest, db: AsyncSession = Depends(get_db)):
    """Create a follower → followee edge in the social graph."""
    with tracer.start_as_current_span("follow_user"):
        if body.follower_id == body.followee_id:
            raise HTTPException(status_code=400, detail="Cannot follow yourself")

        # Check both users exist
        for uid in (body.follower_id, body.followee_id):
            await get_user_or_404(db, uid)

        existing = await db.execute(
            select(Follow).where(
                Follow.follower_id == body.follower_id,
                Follow.followee_id == body.followee_id,
            )
        )
        if existing.scalar_one_or_none():
            return  # already following — idempotent

        db.add(Follow(follower_id=body.follower_id, followee_id=body.followee_id))
        await notify(db, body.followee_id, body.follower_id, "follow")
        logger.info("%s followed %s", body.follower_id, body.followee_id)


@router.post("/unfollow", status_code=status.HTTP_204_NO_CONTENT)
async def unfollow_user(body: FollowRequest, db: AsyncSession = Depends(get_db)):
    with tracer.start_as_current_span("unfollow_user"):
        await db.execute(
            delete(Follow).where(
                Follow.follower_id == body.follower_id,
                Follow.followee_id == body.followee_id,
            )
        )


@router.get("/{user_id}/followers")
async def list_followers(user_id: str, db: AsyncSession = Depends(get_db)):
    return {"user_id": user_id, "followers": await follower_ids(db, user_id)}


@router.get("/{user_id}/following")
async def list_following(user_id: str, db: AsyncSession = Depends(get_db)):
    return {"user_id": user_id, "following": await following_ids(db, user_id)}
