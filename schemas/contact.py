import re
from pydantic import BaseModel, validator, Field
from typing import Optional
from datetime import datetime
from models.contact_message import ContactStatus

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ContactMessageCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str
    subject: str = Field(..., min_length=1, max_length=200)
    message: str
    wca_id: Optional[str] = Field(None, max_length=20)

    @validator('email')
    def validate_email(cls, v):
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email format")
        return v

    @validator('message')
    def validate_message(cls, v):
        if len(v) < 10:
            raise ValueError("Message must be at least 10 characters long")
        if len(v) > 2000:
            raise ValueError("Message must be less than 2000 characters")
        return v


class ContactMessageCreated(BaseModel):
    message_id: int


class ContactStatusUpdate(BaseModel):
    status: ContactStatus
    admin_notes: Optional[str] = Field(None, max_length=2000)


class ContactMessage(BaseModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    wca_id: Optional[str] = None
    user_id: Optional[int] = None
    status: ContactStatus
    is_read: bool
    admin_notes: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
