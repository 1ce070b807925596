from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from models.challenge_room import ChallengeRoom, RoomFormat, RoomStatus, FORMAT_SOLVE_COUNTS
from models.room_participant import RoomParticipant
from models.user import User
from core.exceptions import (
    RoomNotFound, UserNotFound, NotParticipating, RoomExpired,
    InvalidSolveNumber, UnauthorizedAction
)
from core.time import utcnow, ensure_aware


def normalize_room_code(room_code: str) -> str:
    """Room codes are shared by hand; accept any case and stray whitespace"""
    return room_code.strip().upper()


def validate_user_exists(db: Session, user_id: int) -> User:
    """Validate user exists and return it"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UserNotFound()
    return user


def validate_room_exists(db: Session, room_code: str) -> ChallengeRoom:
    """Validate room exists (by public code) and return it"""
    room = db.query(ChallengeRoom).filter(
        ChallengeRoom.room_code == normalize_room_code(room_code)
    ).first()
    if not room:
        raise RoomNotFound()
    return room


def validate_room_open(room: ChallengeRoom, now: Optional[datetime] = None):
    """Room accepts joins and solves only while active and before expires_at"""
    now = now or utcnow()
    if room.status != RoomStatus.ACTIVE or ensure_aware(room.expires_at) < now:
        raise RoomExpired()


def validate_room_creator(room: ChallengeRoom, user_id: int, action: str = "edit this room"):
    """Validate user is room creator"""
    if room.created_by != user_id:
        raise UnauthorizedAction(action)


def validate_participant_exists(db: Session, room: ChallengeRoom, user_id: int) -> RoomParticipant:
    participant = db.query(RoomParticipant).filter(
        RoomParticipant.room_id == room.id,
        RoomParticipant.user_id == user_id
    ).first()
    if not participant:
        raise NotParticipating()
    return participant


def validate_solve_number(solve_number: int, total_solves: int):
    if not (1 <= solve_number <= total_solves):
        raise InvalidSolveNumber(solve_number, total_solves)


def validate_scrambles_count(room_format: RoomFormat, scrambles: List[str]):
    """One scramble per required solve: 5 for ao5, 12 for ao12"""
    expected = FORMAT_SOLVE_COUNTS[RoomFormat(room_format)]
    if len(scrambles) != expected:
        raise ValueError(f"{RoomFormat(room_format).value} rooms need exactly {expected} scrambles (got {len(scrambles)})")

    if any(not s or not s.strip() for s in scrambles):
        raise ValueError("Scrambles must not be empty")
