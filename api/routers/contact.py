from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from api.deps.db import get_db
from api.crud.contact_crud import submit_contact_message
from core.auth import get_current_user_optional
from models.user import User
from schemas.contact import ContactMessageCreate, ContactMessageCreated

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("/", response_model=ContactMessageCreated, status_code=201)
async def send_message(
    message: ContactMessageCreate,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    """Contact form; anonymous senders are accepted"""
    return submit_contact_message(db, message, sender=current_user)
