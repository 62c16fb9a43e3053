"""In-app notification endpoints for the signed-in user."""

from typing import List, Optional

import structlog
from fastapi import APIRouter, HTTPException

from api.dependencies.auth import CurrentIdentityDep
from infrastructure.exceptions import NotificationNotFoundError
from infrastructure.notifications import (
    Notification,
    NotificationCounts,
    NotificationFilters,
    NotificationPriority,
    NotificationStats,
    NotificationStatus,
    NotificationType,
)
from infrastructure.services import NotificationServiceDep

logger = structlog.get_logger()

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[Notification])
async def list_notifications(
    identity: CurrentIdentityDep,
    service: NotificationServiceDep,
    type: Optional[NotificationType] = None,
    status: Optional[NotificationStatus] = None,
    priority: Optional[NotificationPriority] = None,
):
    """List the caller's notifications, newest first."""
    filters = NotificationFilters(type=type, status=status, priority=priority)
    return await service.get_user_notifications(identity.uid, filters)


@router.get("/stats", response_model=NotificationStats)
async def notification_stats(
    identity: CurrentIdentityDep, service: NotificationServiceDep
):
    return await service.get_notification_stats(identity.uid)


@router.get("/counts", response_model=NotificationCounts)
async def notification_counts(
    identity: CurrentIdentityDep, service: NotificationServiceDep
):
    return await service.get_notification_counts(identity.uid)


@router.post("/{notification_id}/read", response_model=Notification)
async def mark_read(
    notification_id: str,
    identity: CurrentIdentityDep,
    service: NotificationServiceDep,
):
    """Mark a notification read by the caller. Repeating it changes nothing."""
    try:
        return await service.mark_as_read(notification_id, identity.uid)
    except NotificationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.post("/{notification_id}/acknowledge", response_model=Notification)
async def acknowledge(
    notification_id: str,
    identity: CurrentIdentityDep,
    service: NotificationServiceDep,
):
    """Acknowledge a notification as the caller. Repeating it changes nothing."""
    try:
        return await service.acknowledge_notification(notification_id, identity.uid)
    except NotificationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


@router.delete("/{notification_id}", status_code=204)
async def hide_notification(
    notification_id: str,
    identity: CurrentIdentityDep,
    service: NotificationServiceDep,
):
    """Remove a notification from the caller's listings.

    The stored record is kept.
    """
    try:
        await service.delete_notification(identity.uid, notification_id)
    except NotificationNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
