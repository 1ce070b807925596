from sqlalchemy import Column, Integer, BigInteger, String, Text, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db import Base
import enum


class Penalty(str, enum.Enum):
    NONE = "none"
    PLUS_TWO = "+2"
    DNF = "DNF"


class RoomSolve(Base):
    __tablename__ = "room_solves"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("challenge_rooms.id"), nullable=False, index=True)
    participant_id = Column(Integer, ForeignKey("room_participants.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    solve_number = Column(Integer, nullable=False)  # 1-based slot in the room's scramble list
    scramble = Column(String, nullable=False)
    event = Column(String, nullable=False)

    # Milliseconds
    time = Column(BigInteger, nullable=False)
    penalty = Column(Enum(Penalty, values_callable=lambda obj: [e.value for e in obj]), default=Penalty.NONE, nullable=False)
    final_time = Column(BigInteger, nullable=False)  # DNF stored as DNF_TIME

    comment = Column(Text, nullable=True)

    solve_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    room = relationship("ChallengeRoom", back_populates="solves")
    participant = relationship("RoomParticipant", back_populates="solves")

    __table_args__ = (
        UniqueConstraint('participant_id', 'solve_number', name='unique_participant_solve_number'),
    )
