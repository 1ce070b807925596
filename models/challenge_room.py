from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db import Base
from core.events import get_event_name
import enum


class RoomStatus(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class RoomFormat(str, enum.Enum):
    AO5 = "ao5"
    AO12 = "ao12"


# Number of solves required by each format
FORMAT_SOLVE_COUNTS = {
    RoomFormat.AO5: 5,
    RoomFormat.AO12: 12,
}


class ChallengeRoom(Base):
    __tablename__ = "challenge_rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_code = Column(String(16), unique=True, index=True, nullable=False)  # short public code, e.g. "K3F9QZ"
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    event = Column(String, nullable=False, index=True)  # WCA event id
    format = Column(Enum(RoomFormat, values_callable=lambda obj: [e.value for e in obj]), nullable=False)

    created_by = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Fixed scramble set shared by every participant
    scrambles = Column(JSON, nullable=False)

    status = Column(Enum(RoomStatus, values_callable=lambda obj: [e.value for e in obj]), default=RoomStatus.ACTIVE, nullable=False, index=True)
    is_public = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)  # created_at + 48h, never changed

    # Denormalized counters
    participant_count = Column(Integer, default=0, nullable=False)
    completed_count = Column(Integer, default=0, nullable=False)

    creator = relationship("User", back_populates="created_rooms", lazy='select')
    participants = relationship("RoomParticipant", back_populates="room", lazy='select')
    solves = relationship("RoomSolve", back_populates="room", lazy='select')

    @property
    def solves_required(self) -> int:
        return FORMAT_SOLVE_COUNTS[self.format]

    @property
    def event_name(self) -> str:
        return get_event_name(self.event)
