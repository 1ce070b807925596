from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from core.roles import UserRole


class UserBase(BaseModel):
    wca_id: str
    name: str
    country_iso2: Optional[str] = None
    avatar: Optional[str] = None


class UserUpsert(UserBase):
    """Profile data received from the WCA after login"""
    wca_user_id: int
    email: Optional[str] = None
    gender: Optional[str] = None
    access_token: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    hide_profile: Optional[bool] = None
    hide_challenge_stats: Optional[bool] = None


class UserPublic(UserBase):
    id: int
    is_deleted: bool = False

    class Config:
        from_attributes = True


class User(UserPublic):
    wca_user_id: int
    email: Optional[str] = None
    gender: Optional[str] = None
    role: UserRole
    is_active: bool
    hide_profile: bool = False
    hide_challenge_stats: bool = False
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_login_at: Optional[datetime] = None


class Token(BaseModel):
    access_token: str
    token_type: str


class TokenData(BaseModel):
    user_id: Optional[int] = None


class WcaUserInfo(BaseModel):
    id: int
    wca_id: Optional[str] = None
    name: str
    country_iso2: Optional[str] = None
    avatar: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None
