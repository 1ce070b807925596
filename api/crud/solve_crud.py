import logging
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import DuplicateSolve
from core.time import utcnow
from core.validators import (
    validate_user_exists, validate_room_exists, validate_room_open,
    validate_participant_exists, validate_solve_number
)
from models.challenge_room import ChallengeRoom
from models.room_participant import RoomParticipant
from models.room_solve import RoomSolve, Penalty
from schemas.challenge_room import SolveSubmit
from services.wca_stats import (
    compute_final_time, to_wca_times, best_single, wca_average, to_storage
)

logger = logging.getLogger(__name__)


def get_solve(db: Session, participant_id: int, solve_number: int):
    return db.query(RoomSolve).filter(
        RoomSolve.participant_id == participant_id,
        RoomSolve.solve_number == solve_number
    ).first()


def _finalize_results(db: Session, participant: RoomParticipant, now: datetime):
    """Best single and WCA average over the participant's full solve set"""
    all_solves = db.query(RoomSolve).filter(
        RoomSolve.participant_id == participant.id
    ).order_by(RoomSolve.solve_number.asc()).all()

    times = to_wca_times(all_solves)
    participant.best_single = best_single(times)
    participant.average = to_storage(wca_average(times))
    participant.completed_at = now


def submit_solve(db: Session, user_id: int, room_code: str, solve: SolveSubmit, now: datetime = None):
    now = now or utcnow()
    user = validate_user_exists(db, user_id)
    room = validate_room_exists(db, room_code)
    validate_room_open(room, now)
    participant = validate_participant_exists(db, room, user.id)
    validate_solve_number(solve.solve_number, participant.total_solves)

    if get_solve(db, participant.id, solve.solve_number):
        raise DuplicateSolve()

    db_solve = RoomSolve(
        room_id=room.id,
        participant_id=participant.id,
        user_id=user.id,
        solve_number=solve.solve_number,
        scramble=room.scrambles[solve.solve_number - 1],
        event=room.event,
        time=solve.time,
        penalty=solve.penalty,
        final_time=compute_final_time(solve.time, solve.penalty),
        comment=solve.comment,
        solve_date=now,
        created_at=now
    )

    was_completed = participant.is_completed

    try:
        db.add(db_solve)
        # Fails here on the unique (participant, solve_number) constraint if a
        # concurrent submission took the slot first
        db.flush()

        participant.solves_completed += 1
        if solve.penalty == Penalty.DNF:
            participant.dnf_count += 1
        participant.is_completed = was_completed or participant.solves_completed == participant.total_solves

        if participant.is_completed:
            _finalize_results(db, participant, now)

            if not was_completed:
                db.query(ChallengeRoom).filter(ChallengeRoom.id == room.id).update({
                    ChallengeRoom.completed_count: ChallengeRoom.completed_count + 1
                }, synchronize_session=False)

        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateSolve()

    db.refresh(db_solve)

    if participant.is_completed and not was_completed:
        logger.info(
            f"User {user.id} completed room {room.room_code}: "
            f"average={participant.average} best={participant.best_single}"
        )

    return db_solve
