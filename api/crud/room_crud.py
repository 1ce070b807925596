import logging
import secrets
import string
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from core.config import settings
from core.exceptions import RoomCodeUnavailable
from core.time import utcnow, ensure_aware
from core.validators import (
    normalize_room_code, validate_user_exists, validate_room_exists,
    validate_room_creator, validate_scrambles_count
)
from models.challenge_room import ChallengeRoom, RoomStatus
from models.room_participant import RoomParticipant
from models.room_solve import RoomSolve
from schemas.challenge_room import RoomCreate

logger = logging.getLogger(__name__)

ROOM_CODE_ALPHABET = string.ascii_uppercase + string.digits

# Extra characters used once the normal-length code space keeps colliding
ROOM_CODE_EXTRA_LENGTH = 2


def generate_room_code(length: int) -> str:
    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


def get_room_by_code(db: Session, room_code: str) -> Optional[ChallengeRoom]:
    return db.query(ChallengeRoom).filter(
        ChallengeRoom.room_code == normalize_room_code(room_code)
    ).first()


def generate_unique_room_code(db: Session, length: int = None, max_attempts: int = None) -> str:
    """
    Draw random codes until one is free.

    Each length gets ``max_attempts`` tries; after that the code is widened once
    before giving up.
    """
    length = length or settings.room_code_length
    max_attempts = max_attempts or settings.room_code_max_attempts

    for code_length in (length, length + ROOM_CODE_EXTRA_LENGTH):
        for _ in range(max_attempts):
            code = generate_room_code(code_length)
            if get_room_by_code(db, code) is None:
                return code
        logger.warning(f"No free {code_length}-character room code after {max_attempts} attempts")

    raise RoomCodeUnavailable()


def create_room(db: Session, room: RoomCreate, user_id: int, now: datetime = None):
    user = validate_user_exists(db, user_id)
    validate_scrambles_count(room.format, room.scrambles)

    now = now or utcnow()
    room_code = generate_unique_room_code(db)

    db_room = ChallengeRoom(
        room_code=room_code,
        name=room.name,
        description=room.description,
        event=room.event,
        format=room.format,
        scrambles=list(room.scrambles),
        created_by=user.id,
        status=RoomStatus.ACTIVE,
        is_public=room.is_public,
        created_at=now,
        expires_at=now + timedelta(hours=settings.room_lifetime_hours),
        participant_count=0,
        completed_count=0
    )
    db.add(db_room)
    db.commit()
    db.refresh(db_room)

    logger.info(f"Room {room_code} ({room.event} {room.format.value}) created by user {user.id}")
    return {"room_id": db_room.room_code, "id": db_room.id}


def _leaderboard_sort_key(participant: RoomParticipant):
    # Completed first; completed ordered by average (missing last); then most solves done
    if participant.is_completed:
        return (0, participant.average is None, participant.average or 0, -participant.solves_completed)
    return (1, False, 0, -participant.solves_completed)


def get_room_details(db: Session, room_code: str, now: datetime = None):
    room = db.query(ChallengeRoom).options(
        joinedload(ChallengeRoom.creator)
    ).filter(ChallengeRoom.room_code == normalize_room_code(room_code)).first()

    if not room:
        return None

    now = now or utcnow()
    # Independent of room.status: the sweep flips status up to an hour later
    room.is_expired = now - ensure_aware(room.created_at) > timedelta(hours=settings.room_lifetime_hours)

    participants = db.query(RoomParticipant).options(
        joinedload(RoomParticipant.user)
    ).filter(RoomParticipant.room_id == room.id).all()

    participants.sort(key=_leaderboard_sort_key)

    return {"room": room, "participants": participants}


def get_public_rooms(db: Session, limit: int = None):
    limit = limit or settings.public_rooms_default_limit
    return db.query(ChallengeRoom).options(
        joinedload(ChallengeRoom.creator)
    ).filter(
        ChallengeRoom.is_public == True,
        ChallengeRoom.status == RoomStatus.ACTIVE
    ).order_by(
        ChallengeRoom.created_at.desc(),
        ChallengeRoom.id.desc()
    ).limit(limit).all()


def update_room(db: Session, user_id: int, room_code: str, title: str, description: str):
    """Rename a room or change its description. Format, scrambles and expiry stay fixed."""
    user = validate_user_exists(db, user_id)
    room = validate_room_exists(db, room_code)
    validate_room_creator(room, user.id)

    room.name = title
    room.description = description
    db.commit()

    return {"success": True}


def check_room_code(db: Session, room_code: str):
    code = normalize_room_code(room_code)
    return {"exists": get_room_by_code(db, code) is not None, "room_id": code}


def delete_room_cascade(db: Session, room_id: int):
    """
    Hard-delete a room: solves, then participants, then the room.
    The caller commits.
    """
    db.query(RoomSolve).filter(RoomSolve.room_id == room_id).delete()
    db.query(RoomParticipant).filter(RoomParticipant.room_id == room_id).delete()
    db.query(ChallengeRoom).filter(ChallengeRoom.id == room_id).delete()


def cleanup_expired_rooms(db: Session, now: datetime = None):
    """Hard-delete every room created more than the room lifetime ago"""
    now = now or utcnow()
    cutoff = now - timedelta(hours=settings.room_lifetime_hours)

    expired_room_ids = [
        row[0] for row in db.query(ChallengeRoom.id).filter(ChallengeRoom.created_at < cutoff).all()
    ]

    for room_id in expired_room_ids:
        delete_room_cascade(db, room_id)

    db.commit()
    logger.info(f"Cleanup removed {len(expired_room_ids)} expired rooms")
    return {"deleted_rooms": len(expired_room_ids)}
