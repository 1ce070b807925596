from sqlalchemy import Column, Integer, BigInteger, String, Text, Boolean, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from db import Base
from models.room_solve import Penalty


class TimerSession(Base):
    """Personal timer session, owned exclusively by one user"""
    __tablename__ = "timer_sessions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    event = Column(String, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=False, nullable=False)
    solve_count = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="timer_sessions")
    solves = relationship("TimerSolve", back_populates="session")


class TimerSolve(Base):
    """Personal timer solve (editable, unlike room solves)"""
    __tablename__ = "timer_solves"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    session_id = Column(Integer, ForeignKey("timer_sessions.id"), nullable=True, index=True)

    event = Column(String, nullable=False)
    scramble = Column(String, nullable=False)
    time = Column(BigInteger, nullable=False)
    penalty = Column(Enum(Penalty, values_callable=lambda obj: [e.value for e in obj]), default=Penalty.NONE, nullable=False)
    final_time = Column(BigInteger, nullable=False)
    inspection_time = Column(Integer, nullable=True)  # ms of inspection used
    comment = Column(Text, nullable=True)

    solve_date = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    session = relationship("TimerSession", back_populates="solves")
