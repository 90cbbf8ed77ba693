"""
Comment endpoints:
  POST /comments/{id}/like — like / unlike toggle
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from opentelemetry import trace
from sqlalchemy.ext.asyncio import AsyncSession

from socialfold.database import get_db
from socialfold.models import Comment, CommentLike, User
from socialfold.schemas import CommentResponse, LikeRequest, LikeResponse

logger = logging.getLogger(__name__)
router = APIRouter()
tracer = trace.get_tracer(__name__)


def build_comment_response(comment: Comment) -> CommentResponse:
    return CommentResponse(
        comment_id=comment.comment_id,
        post_id=comment.post_id,
        user_id=comment.user_id,
        username=comment.author.username if comment.author else None,
        content=comment.content,
        likes_count=len(comment.likes),
        created_at=comment.created_at,
    )


@router.post("/{comment_id}/like", response_model=LikeResponse)
async def like_comment(
    comment_id: str, body: LikeRequest, db: AsyncSession = Depends(get_db)
):
    with tracer.start_as_current_span("like_comment"):
        comment = await db.get(Comment, comment_id)
        if not comment:
            raise HTTPException(status_code=404, detail="Comment not found")
        if not await db.get(User, body.user_id):
            raise HTTPException(status_code=404, detail=f"User {body.user_id} not found")

        existing = next((like for like in comment.likes if like.user_id == body.user_id), None)
        if existing:
            comment.likes.remove(existing)
        else:
            comment.likes.append(CommentLike(user_id=body.user_id))

        await db.flush()
        return LikeResponse(liked=existing is None, likes_count=len(comment.likes))
