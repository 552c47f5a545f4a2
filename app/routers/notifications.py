# app/routers/notifications.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.notification import NotificationOut, UnreadCountOut
from app.services import notification_service
from typing import Optional

router = APIRouter()


@router.get("/notifications", response_model=list[NotificationOut], summary="Permission request notifications")
def get_notifications(
    authority_id: Optional[int] = None,
    unread_only: bool = False,
    limit: int = Query(50, ge=1),
    db: Session = Depends(get_db),
):
    """Newest first. Filter by recipient authority and/or unread state."""
    return notification_service.list_notifications(db, authority_id, unread_only, limit)


@router.get("/notifications/unread-count", response_model=UnreadCountOut, summary="Unread badge count")
def get_unread_count(authority_id: int, db: Session = Depends(get_db)):
    return UnreadCountOut(authority_id=authority_id,
                          unread=notification_service.unread_count(db, authority_id))


@router.put("/notifications/{notification_id}/read", response_model=NotificationOut, summary="Mark as read")
def mark_notification_read(notification_id: int, db: Session = Depends(get_db)):
    return notification_service.mark_read(db, notification_id)
