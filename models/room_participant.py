from sqlalchemy import Column, Integer, BigInteger, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db import Base
from services.wca_stats import format_time


class RoomParticipant(Base):
    __tablename__ = "room_participants"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, ForeignKey("challenge_rooms.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Progress
    solves_completed = Column(Integer, default=0, nullable=False)
    total_solves = Column(Integer, nullable=False)  # copied from the room format at join time
    dnf_count = Column(Integer, default=0, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)

    # Results, filled in once all solves are in (milliseconds; DNF average stored as DNF_TIME)
    best_single = Column(BigInteger, nullable=True)
    average = Column(BigInteger, nullable=True)
    final_rank = Column(Integer, nullable=True)

    was_deleted_when_joined = Column(Boolean, default=False, nullable=False)

    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    room = relationship("ChallengeRoom", back_populates="participants")
    user = relationship("User", back_populates="room_participations")
    solves = relationship("RoomSolve", back_populates="participant", order_by="RoomSolve.solve_number")

    __table_args__ = (
        UniqueConstraint('room_id', 'user_id', name='unique_room_participant'),
    )

    @property
    def average_display(self):
        return format_time(self.average)

    @property
    def best_single_display(self):
        return format_time(self.best_single)
