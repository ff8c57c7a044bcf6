"""Audit trail and live event fan-out for workflow transitions."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from taskmarket.core.events import event_bus
from taskmarket.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


async def record_transition(
    db: AsyncSession,
    event_type: str,
    user_id: Optional[str],
    task_id: Optional[str],
    data: Dict[str, Any],
) -> ActivityLog:
    """
    Write an activity row for a committed transition and publish it on the event bus.

    Args:
        db: Database session
        event_type: Event name, e.g. "task_approved"
        user_id: Acting user
        task_id: Task the event concerns
        data: JSON-serializable payload

    Returns:
        The persisted ActivityLog row
    """
    activity = ActivityLog(
        event_type=event_type,
        user_id=user_id,
        task_id=task_id,
        data=data,
    )
    db.add(activity)
    await db.commit()

    logger.info(f"{event_type}: task={task_id} user={user_id}")

    await event_bus.publish(event_type, {
        "task_id": task_id,
        "user_id": user_id,
        **data,
    })

    return activity
