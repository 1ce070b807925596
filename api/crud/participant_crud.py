import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from api.crud.room_crud import get_room_by_code
from api.crud.user import get_user_by_id
from core.time import utcnow
from core.validators import validate_user_exists, validate_room_exists, validate_room_open
from models.challenge_room import ChallengeRoom
from models.room_participant import RoomParticipant
from models.room_solve import RoomSolve
from services.wca_stats import average_sort_key

logger = logging.getLogger(__name__)

RECENT_PARTICIPATIONS_SCANNED = 10
RECENT_ROOMS_RETURNED = 5


def get_participant_by_ids(db: Session, room_id: int, user_id: int):
    return db.query(RoomParticipant).filter(
        RoomParticipant.room_id == room_id,
        RoomParticipant.user_id == user_id
    ).first()


def join_room(db: Session, user_id: int, room_code: str, now: datetime = None):
    """
    Join a room.
    Joining again returns the existing participant without touching the room
    counters.
    """
    now = now or utcnow()
    user = validate_user_exists(db, user_id)
    room = validate_room_exists(db, room_code)
    validate_room_open(room, now)

    existing = get_participant_by_ids(db, room.id, user.id)
    if existing:
        return {"participant": existing, "room": room}

    participant = RoomParticipant(
        room_id=room.id,
        user_id=user.id,
        solves_completed=0,
        total_solves=room.solves_required,
        dnf_count=0,
        is_completed=False,
        was_deleted_when_joined=bool(user.is_deleted),
        joined_at=now
    )
    db.add(participant)
    db.query(ChallengeRoom).filter(ChallengeRoom.id == room.id).update({
        ChallengeRoom.participant_count: ChallengeRoom.participant_count + 1
    }, synchronize_session=False)

    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent join of the same user
        db.rollback()
        existing = get_participant_by_ids(db, room.id, user.id)
        if existing is None:
            raise
        return {"participant": existing, "room": room}

    db.refresh(participant)
    db.refresh(room)
    logger.info(f"User {user.id} joined room {room.room_code} ({room.participant_count} participants)")
    return {"participant": participant, "room": room}


def get_user_participation(db: Session, user_id: int, room_code: str):
    """Participant record plus its solves in slot order, or None"""
    user = get_user_by_id(db, user_id)
    if not user:
        return None

    room = get_room_by_code(db, room_code)
    if not room:
        return None

    participant = get_participant_by_ids(db, room.id, user.id)
    if not participant:
        return None

    solves = db.query(RoomSolve).filter(
        RoomSolve.participant_id == participant.id
    ).order_by(RoomSolve.solve_number.asc()).all()

    return {"participant": participant, "solves": solves, "room": room}


def get_user_recent_rooms(db: Session, user_id: int):
    user = get_user_by_id(db, user_id)
    if not user:
        return []

    participations = db.query(RoomParticipant).options(
        joinedload(RoomParticipant.room)
    ).filter(
        RoomParticipant.user_id == user.id
    ).order_by(
        RoomParticipant.joined_at.desc(),
        RoomParticipant.id.desc()
    ).limit(RECENT_PARTICIPATIONS_SCANNED).all()

    rooms = [
        {"participation": p, "room": p.room}
        for p in participations
        if p.room is not None
    ]
    return rooms[:RECENT_ROOMS_RETURNED]


def get_user_room_participations(db: Session, user_id: int):
    """Every participation of the user, newest first, with room summary fields"""
    participations = db.query(RoomParticipant).options(
        joinedload(RoomParticipant.room)
    ).filter(
        RoomParticipant.user_id == user_id
    ).order_by(
        RoomParticipant.joined_at.desc(),
        RoomParticipant.id.desc()
    ).all()

    enriched = []
    for participation in participations:
        room = participation.room
        if room is None:
            continue
        participation.room_name = room.name
        participation.event = room.event
        participation.format = room.format
        participation.room_public_id = room.room_code
        participation.room_status = room.status
        participation.room_expires_at = room.expires_at
        enriched.append(participation)

    return enriched


def rank_completed_participants(db: Session, room: ChallengeRoom) -> int:
    """
    Assign 1-based ranks to completed participants by average.
    Only ranks that changed are written. The caller commits.
    """
    participants = db.query(RoomParticipant).filter(
        RoomParticipant.room_id == room.id,
        RoomParticipant.is_completed == True
    ).all()

    participants.sort(key=lambda p: average_sort_key(p.average))

    for rank, participant in enumerate(participants, 1):
        if participant.final_rank != rank:
            participant.final_rank = rank

    return len(participants)


def update_participant_ranks(db: Session, room_code: str) -> int:
    room = validate_room_exists(db, room_code)
    ranked = rank_completed_participants(db, room)
    db.commit()
    logger.info(f"Ranked {ranked} participants in room {room.room_code}")
    return ranked


def update_ranks_for_room(db: Session, room_code: str) -> int:
    """Sweep variant: a missing room ranks nobody instead of failing"""
    room = get_room_by_code(db, room_code)
    if not room:
        return 0
    return rank_completed_participants(db, room)
