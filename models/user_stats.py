from sqlalchemy import Column, Integer, BigInteger, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from db import Base


class UserEventStats(Base):
    """Personal timer records for one user and event, recomputed after every timer change"""
    __tablename__ = "user_event_stats"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event = Column(String, nullable=False)

    # Milliseconds; DNF averages stored as DNF_TIME
    best_single = Column(BigInteger, nullable=True)
    best_ao5 = Column(BigInteger, nullable=True)
    best_ao12 = Column(BigInteger, nullable=True)
    recent_ao5 = Column(BigInteger, nullable=True)
    recent_ao12 = Column(BigInteger, nullable=True)
    total_solves = Column(Integer, default=0, nullable=False)

    first_solve_date = Column(DateTime(timezone=True), nullable=True)
    last_solve_date = Column(DateTime(timezone=True), nullable=True)
    last_calculated = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('user_id', 'event', name='unique_user_event_stats'),
    )
