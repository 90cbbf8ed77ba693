"""
Notification writers.

Notifications are rows in the same transaction as the action that caused
them; nothing is pushed to clients. Users are never notified about their
own actions.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from socialfold.models import Follow, Notification
from socialfold.telemetry import NOTIFICATIONS_TOTAL

logger = logging.getLogger(__name__)


async def notify(
    db: AsyncSession,
    recipient_id: str,
    sender_id: str,
    type_: str,
    post_id: Optional[str] = None,
    comment_id: Optional[str] = None,
) -> Optional[Notification]:
    if recipient_id == sender_id:
        return None

    notification = Notification(
        recipient_id=recipient_id,
        sender_id=sender_id,
        type=type_,
        post_id=post_id,
        comment_id=comment_id,
    )
    db.add(notification)
    NOTIFICATIONS_TOTAL.labels(type=type_).inc()
    return notification


async def notify_followers(db: AsyncSession, author_id: str, post_id: str) -> int:
    """Tell every follower of ``author_id`` about a new post."""
    rows = await db.execute(
        select(Follow.follower_id).where(Follow.followee_id == author_id)
    )
    follower_ids = [r[0] for r in rows.all()]

    db.add_all(
        [
            Notification(
                recipient_id=follower_id,
                sender_id=author_id,
                type="post",
                post_id=post_id,
            )
            for follower_id in follower_ids
        ]
    )
    if follower_ids:
        NOTIFICATIONS_TOTAL.labels(type="post").inc(len(follower_ids))
        logger.info(
            "Queued %d post notifications for %s", len(follower_ids), post_id
        )
    return len(follower_ids)
