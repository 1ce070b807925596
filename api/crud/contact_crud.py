import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from core.exceptions import ContactMessageNotFound
from core.time import utcnow
from models.contact_message import ContactMessage, ContactStatus
from models.user import User
from schemas.contact import ContactMessageCreate, ContactStatusUpdate

logger = logging.getLogger(__name__)


def submit_contact_message(
    db: Session,
    message: ContactMessageCreate,
    sender: Optional[User] = None,
    now: datetime = None
):
    """Store a contact form message; signed-in senders are linked to their account"""
    now = now or utcnow()
    wca_id = message.wca_id.strip() if message.wca_id else None
    if sender is not None and not wca_id:
        wca_id = sender.wca_id

    db_message = ContactMessage(
        name=message.name.strip(),
        email=message.email,
        subject=message.subject.strip(),
        message=message.message.strip(),
        wca_id=wca_id,
        user_id=sender.id if sender is not None else None,
        status=ContactStatus.NEW,
        is_read=False,
        created_at=now
    )
    db.add(db_message)
    db.commit()
    db.refresh(db_message)

    logger.info(f"Contact message {db_message.id} received from {db_message.email}")
    return {"message_id": db_message.id}


def get_contact_messages(db: Session, status: Optional[ContactStatus] = None, limit: Optional[int] = None):
    query = db.query(ContactMessage)
    if status:
        query = query.filter(ContactMessage.status == status)
    query = query.order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
    if limit:
        query = query.limit(limit)
    return query.all()


def get_contact_message(db: Session, message_id: int) -> ContactMessage:
    db_message = db.query(ContactMessage).filter(ContactMessage.id == message_id).first()
    if not db_message:
        raise ContactMessageNotFound()
    return db_message


def mark_message_as_read(db: Session, message_id: int):
    db_message = get_contact_message(db, message_id)
    db_message.status = ContactStatus.READ
    db_message.is_read = True
    db.commit()
    db.refresh(db_message)
    return db_message


def update_message_status(db: Session, message_id: int, status_update: ContactStatusUpdate):
    db_message = get_contact_message(db, message_id)
    db_message.status = status_update.status
    # Existing notes are kept unless new ones are given
    if status_update.admin_notes:
        db_message.admin_notes = status_update.admin_notes
    db.commit()
    db.refresh(db_message)
    return db_message
