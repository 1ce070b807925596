from pydantic import BaseModel, validator, Field
from typing import Optional
from datetime import datetime
from core.events import is_known_event
from models.room_solve import Penalty
from services.wca_stats import MAX_SOLVE_TIME


class TimerSessionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    event: str
    description: Optional[str] = Field(None, max_length=500)
    is_active: bool = True

    @validator('event')
    def validate_event(cls, v):
        if not is_known_event(v):
            raise ValueError(f"Unknown event: {v}")
        return v


class TimerSession(BaseModel):
    id: int
    user_id: int
    name: str
    event: str
    description: Optional[str] = None
    is_active: bool
    solve_count: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TimerSolveCreate(BaseModel):
    event: str
    scramble: str = Field(..., min_length=1)
    time: int = Field(..., ge=0, le=MAX_SOLVE_TIME, description="Raw time in milliseconds")
    penalty: Penalty = Penalty.NONE
    inspection_time: Optional[int] = Field(None, ge=0)
    session_id: Optional[int] = None
    comment: Optional[str] = Field(None, max_length=500)

    @validator('event')
    def validate_event(cls, v):
        if not is_known_event(v):
            raise ValueError(f"Unknown event: {v}")
        return v


class TimerSolveUpdate(BaseModel):
    """Only the penalty and comment of a personal solve can change"""
    penalty: Optional[Penalty] = None
    comment: Optional[str] = Field(None, max_length=500)


class TimerSolve(BaseModel):
    id: int
    user_id: int
    session_id: Optional[int] = None
    event: str
    scramble: str
    time: int
    penalty: Penalty
    final_time: int
    inspection_time: Optional[int] = None
    comment: Optional[str] = None
    solve_date: datetime

    class Config:
        from_attributes = True


class UserEventStats(BaseModel):
    user_id: int
    event: str
    best_single: Optional[int] = None
    best_ao5: Optional[int] = None
    best_ao12: Optional[int] = None
    recent_ao5: Optional[int] = None
    recent_ao12: Optional[int] = None
    total_solves: int
    first_solve_date: Optional[datetime] = None
    last_solve_date: Optional[datetime] = None
    last_calculated: Optional[datetime] = None

    class Config:
        from_attributes = True
