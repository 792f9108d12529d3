"""Notification routes

GET  /api/notifications?user_id=...: a user's notifications, newest first.
POST /api/notifications/{notification_id}/read: mark one as read.
"""

import structlog
from fastapi import APIRouter, Depends, Query
from starlette.responses import JSONResponse

from ..deps import get_store_group

log = structlog.get_logger()

router = APIRouter()


@router.get("/api/notifications")
async def list_notifications(
    user_id: str = Query(description="Recipient user id"),
    unread_only: bool = Query(default=False, description="Only unread notifications"),
    store_group=Depends(get_store_group),
):
    notifications = await store_group.notification_store.list_for_user(
        user_id, unread_only=unread_only
    )
    return {
        "notifications": [n.model_dump(mode="json") for n in notifications],
        "unread_count": sum(1 for n in notifications if not n.read),
    }


@router.post("/api/notifications/{notification_id}/read")
async def mark_notification_read(
    notification_id: str,
    store_group=Depends(get_store_group),
):
    updated = await store_group.notification_store.mark_read(notification_id)
    await store_group.conn.commit()

    if not updated:
        return JSONResponse(
            status_code=404,
            content={
                "error": {
                    "code": "NOTIFICATION_NOT_FOUND",
                    "message": f"Notification with id {notification_id} does not exist",
                }
            },
        )

    log.info("notification_marked_read", notification_id=notification_id)
    notification = await store_group.notification_store.get_notification(notification_id)
    return {"notification": notification.model_dump(mode="json")}
