from pydantic import BaseModel, validator, Field
from typing import Optional, List
from datetime import datetime
from core.events import is_known_event
from core.validators import validate_scrambles_count
from models.challenge_room import RoomFormat, RoomStatus
from models.room_solve import Penalty
from schemas.auth import UserPublic
from services.wca_stats import MAX_SOLVE_TIME


# Requests
class RoomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Room name")
    event: str = Field(..., description="WCA event id, e.g. 333")
    format: RoomFormat
    scrambles: List[str]
    is_public: bool = True
    description: Optional[str] = Field(None, max_length=500)

    @validator('event')
    def validate_event(cls, v):
        if not is_known_event(v):
            raise ValueError(f"Unknown event: {v}")
        return v

    @validator('scrambles')
    def validate_scrambles(cls, v, values):
        if 'format' in values:
            validate_scrambles_count(values['format'], v)
        return v


class RoomUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field("", max_length=500)


class SolveSubmit(BaseModel):
    solve_number: int = Field(..., ge=1, description="1-based position in the scramble list")
    time: int = Field(..., ge=0, le=MAX_SOLVE_TIME, description="Raw time in milliseconds")
    penalty: Penalty = Penalty.NONE
    comment: Optional[str] = Field(None, max_length=500)


class RoomCodeCheck(BaseModel):
    room_id: str = Field(..., min_length=1)


# Responses
class Room(BaseModel):
    id: int
    room_code: str
    name: str
    description: Optional[str] = None
    event: str
    event_name: str
    format: RoomFormat
    scrambles: List[str]
    created_by: int
    status: RoomStatus
    is_public: bool
    created_at: datetime
    expires_at: datetime
    participant_count: int
    completed_count: int

    class Config:
        from_attributes = True


class RoomWithCreator(Room):
    creator: Optional[UserPublic] = None


class RoomDetailsRoom(RoomWithCreator):
    # Wall-clock check against created_at; status only flips when the sweep runs
    is_expired: bool


class Participant(BaseModel):
    id: int
    room_id: int
    user_id: int
    solves_completed: int
    total_solves: int
    dnf_count: int
    is_completed: bool
    best_single: Optional[int] = None
    average: Optional[int] = None
    final_rank: Optional[int] = None
    average_display: Optional[str] = None
    best_single_display: Optional[str] = None
    was_deleted_when_joined: bool = False
    joined_at: datetime
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ParticipantWithUser(Participant):
    user: Optional[UserPublic] = None


class Solve(BaseModel):
    id: int
    room_id: int
    participant_id: int
    user_id: int
    solve_number: int
    scramble: str
    event: str
    time: int
    penalty: Penalty
    final_time: int
    comment: Optional[str] = None
    solve_date: datetime

    class Config:
        from_attributes = True


class RoomCreated(BaseModel):
    room_id: str
    id: int


class RoomDetails(BaseModel):
    room: RoomDetailsRoom
    participants: List[ParticipantWithUser]


class JoinResult(BaseModel):
    participant: Participant
    room: Room


class UserParticipation(BaseModel):
    participant: Participant
    solves: List[Solve]
    room: Room


class RecentRoom(BaseModel):
    participation: Participant
    room: Room


class RoomParticipationSummary(Participant):
    room_name: str
    event: str
    format: RoomFormat
    room_public_id: str
    room_status: RoomStatus
    room_expires_at: datetime


class RoomCodeCheckResult(BaseModel):
    exists: bool
    room_id: str


class RanksUpdated(BaseModel):
    ranked: int


class CleanupResult(BaseModel):
    deleted_rooms: int


class SweepResult(BaseModel):
    processed_rooms: int
    deleted_rooms: int
