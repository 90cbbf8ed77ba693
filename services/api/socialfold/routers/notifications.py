"""
Notification endpoints:
  GET  /notifications               — newest notifications for a user
  GET  /notifications/unread-count  — number of unread notifications
  POST /notifications/read-all      — mark every notification as read
  POST /notifications/{id}/read     — mark one notification as read
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from socialfold.config import settings
from socialfold.database import get_db
from socialfold.models import Notification
from socialfold.schemas import NotificationResponse, UnreadCountResponse

logger = logging.getLogger(__name__)
router = APIRouter()


def _build_notification_response(n: Notification) -> NotificationResponse:
    return NotificationResponse(
        notification_id=n.notification_id,
        recipient_id=n.recipient_id,
        sender_id=n.sender_id,
        sender_username=n.sender.username if n.sender else None,
        type=n.type,
        post_id=n.post_id,
        comment_id=n.comment_id,
        read=n.read,
        created_at=n.created_at,
    )


@router.get("/", response_model=list[NotificationResponse])
async def list_notifications(
    user_id: str = Query(..., description="Recipient user ID"),
    db: AsyncSession = Depends(get_db),
):
    rows = await db.execute(
        select(Notification)
        .where(Notification.recipient_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(settings.notifications_page_size)
    )
    return [_build_notification_response(n) for n in rows.scalars().all()]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user_id: str = Query(..., description="Recipient user ID"),
    db: AsyncSession = Depends(get_db),
):
    count = await db.scalar(
        select(func.count())
        .select_from(Notification)
        .where(Notification.recipient_id == user_id, Notification.read.is_(False))
    )
    return UnreadCountResponse(user_id=user_id, count=count or 0)


@router.post("/read-all", status_code=status.HTTP_204_NO_CONTENT)
async def mark_all_read(
    user_id: str = Query(..., description="Recipient user ID"),
    db: AsyncSession = Depends(get_db),
):
    await db.execute(
        update(Notification)
        .where(Notification.recipient_id == user_id, Notification.read.is_(False))
        .values(read=True)
    )
    logger.info("Marked all notifications read for %s", user_id)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(notification_id: str, db: AsyncSession = Depends(get_db)):
    notification = await db.get(Notification, notification_id)
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    notification.read = True
