import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.exceptions import TimerSessionNotFound, TimerSolveNotFound
from core.time import utcnow
from core.validators import validate_user_exists
from models.timer_session import TimerSession, TimerSolve
from models.user_stats import UserEventStats
from schemas.timer import TimerSessionCreate, TimerSolveCreate, TimerSolveUpdate
from services.wca_stats import (
    compute_final_time, to_wca_times, best_single, wca_average, best_rolling_average, to_storage
)

logger = logging.getLogger(__name__)

DEFAULT_SOLVES_LIMIT = 50
# Newest solves per event that records are computed from
STATS_WINDOW = 100


def get_timer_sessions(db: Session, user_id: int):
    return db.query(TimerSession).filter(
        TimerSession.user_id == user_id
    ).order_by(TimerSession.created_at.desc(), TimerSession.id.desc()).all()


def get_timer_session(db: Session, user_id: int, session_id: int) -> TimerSession:
    """The user's own session; someone else's session is reported as missing"""
    timer_session = db.query(TimerSession).filter(
        TimerSession.id == session_id,
        TimerSession.user_id == user_id
    ).first()
    if not timer_session:
        raise TimerSessionNotFound()
    return timer_session


def create_timer_session(db: Session, user_id: int, session: TimerSessionCreate, now: datetime = None):
    now = now or utcnow()
    validate_user_exists(db, user_id)

    if session.is_active:
        # At most one active session per user
        db.query(TimerSession).filter(
            TimerSession.user_id == user_id,
            TimerSession.is_active == True
        ).update({TimerSession.is_active: False}, synchronize_session=False)

    timer_session = TimerSession(
        user_id=user_id,
        name=session.name,
        event=session.event,
        description=session.description,
        is_active=session.is_active,
        solve_count=0,
        created_at=now,
        updated_at=now
    )
    db.add(timer_session)
    db.commit()
    db.refresh(timer_session)
    return timer_session


def refresh_event_stats(db: Session, user_id: int, event: str, now: datetime) -> Optional[UserEventStats]:
    """
    Recompute the user's records for one event from their newest timer solves.

    Averages follow the same WCA rules as room averages. The row is removed
    once the user has no solves left for the event. Pending changes must be
    flushed before calling.
    """
    stats = db.query(UserEventStats).filter(
        UserEventStats.user_id == user_id,
        UserEventStats.event == event
    ).first()

    solve_filter = (TimerSolve.user_id == user_id, TimerSolve.event == event)
    recent = db.query(TimerSolve).filter(*solve_filter).order_by(
        TimerSolve.solve_date.desc(), TimerSolve.id.desc()
    ).limit(STATS_WINDOW).all()

    if not recent:
        if stats:
            db.delete(stats)
        return None

    if stats is None:
        stats = UserEventStats(user_id=user_id, event=event)
        db.add(stats)

    # Newest first
    times = to_wca_times(recent)
    stats.best_single = best_single(times)
    stats.best_ao5 = to_storage(best_rolling_average(times, 5))
    stats.best_ao12 = to_storage(best_rolling_average(times, 12))
    stats.recent_ao5 = to_storage(wca_average(times[:5])) if len(times) >= 5 else None
    stats.recent_ao12 = to_storage(wca_average(times[:12])) if len(times) >= 12 else None
    stats.total_solves = db.query(TimerSolve).filter(*solve_filter).count()
    stats.first_solve_date = db.query(func.min(TimerSolve.solve_date)).filter(*solve_filter).scalar()
    stats.last_solve_date = recent[0].solve_date
    stats.last_calculated = now
    return stats


def _adjust_session_count(db: Session, session_id: Optional[int], delta: int, now: datetime):
    if session_id is None:
        return
    db.query(TimerSession).filter(TimerSession.id == session_id).update({
        TimerSession.solve_count: TimerSession.solve_count + delta,
        TimerSession.updated_at: now
    }, synchronize_session=False)


def save_timer_solve(db: Session, user_id: int, solve: TimerSolveCreate, now: datetime = None):
    now = now or utcnow()
    validate_user_exists(db, user_id)
    if solve.session_id is not None:
        get_timer_session(db, user_id, solve.session_id)

    db_solve = TimerSolve(
        user_id=user_id,
        session_id=solve.session_id,
        event=solve.event,
        scramble=solve.scramble,
        time=solve.time,
        penalty=solve.penalty,
        final_time=compute_final_time(solve.time, solve.penalty),
        inspection_time=solve.inspection_time,
        comment=solve.comment,
        solve_date=now,
        created_at=now
    )
    db.add(db_solve)
    _adjust_session_count(db, solve.session_id, 1, now)
    db.flush()

    refresh_event_stats(db, user_id, solve.event, now)
    db.commit()
    db.refresh(db_solve)
    return db_solve


def get_user_solves(db: Session, user_id: int, event: Optional[str] = None, limit: int = DEFAULT_SOLVES_LIMIT):
    """Newest first, optionally for one event only"""
    query = db.query(TimerSolve).filter(TimerSolve.user_id == user_id)
    if event:
        query = query.filter(TimerSolve.event == event)
    return query.order_by(TimerSolve.solve_date.desc(), TimerSolve.id.desc()).limit(limit).all()


def get_own_solve(db: Session, user_id: int, solve_id: int) -> TimerSolve:
    db_solve = db.query(TimerSolve).filter(
        TimerSolve.id == solve_id,
        TimerSolve.user_id == user_id
    ).first()
    if not db_solve:
        raise TimerSolveNotFound()
    return db_solve


def update_timer_solve(db: Session, user_id: int, solve_id: int, solve_update: TimerSolveUpdate, now: datetime = None):
    """Change the penalty and/or comment; final_time is recomputed from the raw time"""
    now = now or utcnow()
    db_solve = get_own_solve(db, user_id, solve_id)

    update_data = solve_update.model_dump(exclude_unset=True)
    if update_data.get("penalty") is not None:
        db_solve.penalty = update_data["penalty"]
        db_solve.final_time = compute_final_time(db_solve.time, db_solve.penalty)
    if "comment" in update_data:
        db_solve.comment = update_data["comment"]
    db.flush()

    refresh_event_stats(db, user_id, db_solve.event, now)
    db.commit()
    db.refresh(db_solve)
    return db_solve


def delete_timer_solve(db: Session, user_id: int, solve_id: int, now: datetime = None):
    now = now or utcnow()
    db_solve = get_own_solve(db, user_id, solve_id)
    event = db_solve.event

    _adjust_session_count(db, db_solve.session_id, -1, now)
    db.delete(db_solve)
    db.flush()

    refresh_event_stats(db, user_id, event, now)
    db.commit()
    logger.info(f"User {user_id} deleted timer solve {solve_id}")
    return {"success": True}


def get_user_stats(db: Session, user_id: int, event: Optional[str] = None):
    """One event's records (or None), or every event's records when no event is given"""
    query = db.query(UserEventStats).filter(UserEventStats.user_id == user_id)
    if event:
        return query.filter(UserEventStats.event == event).first()
    return query.order_by(UserEventStats.event.asc()).all()
