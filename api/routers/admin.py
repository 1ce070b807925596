"""
Admin endpoints: room maintenance and the contact inbox.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.auth import get_admin
from core.logging import logger
from api.deps.db import get_db
from api.crud.room_crud import cleanup_expired_rooms
from api.crud.contact_crud import get_contact_messages, mark_message_as_read, update_message_status
from models.contact_message import ContactStatus
from models.user import User
from schemas.challenge_room import CleanupResult, SweepResult
from schemas.contact import ContactMessage, ContactStatusUpdate
from services.room_sweeper import process_expired_rooms

router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/rooms/cleanup", response_model=CleanupResult)
async def cleanup_rooms(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin)
):
    """Hard-delete every room older than the room lifetime"""
    logger.info(f"Admin {current_user.id} requested room cleanup")
    return cleanup_expired_rooms(db)


@router.post("/rooms/process-expired", response_model=SweepResult)
async def process_expired(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin)
):
    """Run one expiry sweep now instead of waiting for the background task"""
    logger.info(f"Admin {current_user.id} triggered expiry sweep")
    return process_expired_rooms(db)


@router.get("/contact-messages", response_model=List[ContactMessage])
async def list_contact_messages(
    status: Optional[ContactStatus] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin)
):
    """Contact form messages, newest first"""
    return get_contact_messages(db, status=status, limit=limit)


@router.post("/contact-messages/{message_id}/read", response_model=ContactMessage)
async def read_contact_message(
    message_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin)
):
    return mark_message_as_read(db, message_id)


@router.put("/contact-messages/{message_id}/status", response_model=ContactMessage)
async def set_contact_message_status(
    message_id: int,
    status_update: ContactStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_admin)
):
    logger.info(f"Admin {current_user.id} set contact message {message_id} to {status_update.status.value}")
    return update_message_status(db, message_id, status_update)
