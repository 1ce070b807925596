from sqlalchemy import Column, Integer, String, DateTime, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.types import Enum as SQLEnum
from db import Base
from core.roles import UserRole


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    wca_id = Column(String, unique=True, index=True, nullable=False)  # e.g. "2019DOEJ01"
    wca_user_id = Column(Integer, index=True, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True, index=True)
    country_iso2 = Column(String(2), nullable=True)
    avatar = Column(String, nullable=True)
    gender = Column(String, nullable=True)

    # WCA OAuth token from the last login
    access_token = Column(String, nullable=True)

    role = Column(
        SQLEnum(UserRole, values_callable=lambda obj: [e.value for e in obj]),
        default=UserRole.USER,
        nullable=False
    )
    is_active = Column(Boolean, default=True, nullable=False)

    # Privacy
    hide_profile = Column(Boolean, default=False, nullable=False)
    hide_challenge_stats = Column(Boolean, default=False, nullable=False)

    # Soft delete: the row stays so room leaderboards keep their references
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True), nullable=True)

    created_rooms = relationship("ChallengeRoom", back_populates="creator")
    room_participations = relationship("RoomParticipant", back_populates="user")
    timer_sessions = relationship("TimerSession", back_populates="user")
