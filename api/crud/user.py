import logging
from datetime import datetime

from sqlalchemy.orm import Session

from core.roles import UserRole
from core.time import utcnow
from models.user import User
from models.timer_session import TimerSession, TimerSolve
from models.user_stats import UserEventStats
from schemas.auth import UserUpsert, UserUpdate

logger = logging.getLogger(__name__)

DELETED_USER_NAME = "Deleted User"


def get_user_by_wca_id(db: Session, wca_id: str):
    return db.query(User).filter(User.wca_id == wca_id).first()


def get_user_by_id(db: Session, user_id: int):
    return db.query(User).filter(User.id == user_id).first()


def get_users(db: Session, skip: int = 0, limit: int = 100):
    return db.query(User).filter(
        User.is_deleted == False,
        User.hide_profile == False
    ).order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(min(limit, 100)).all()


def upsert_user(db: Session, user_info: UserUpsert, now: datetime = None):
    """Create the user on first WCA login, refresh the profile on every later one"""
    now = now or utcnow()
    db_user = get_user_by_wca_id(db, user_info.wca_id)

    if db_user:
        db_user.name = user_info.name
        db_user.country_iso2 = user_info.country_iso2
        db_user.avatar = user_info.avatar
        db_user.access_token = user_info.access_token
        db_user.gender = user_info.gender
        db_user.last_login_at = now
        # Only overwrite email when WCA sent one
        if user_info.email:
            db_user.email = user_info.email
    else:
        db_user = User(
            wca_id=user_info.wca_id,
            wca_user_id=user_info.wca_user_id,
            name=user_info.name,
            email=user_info.email,
            country_iso2=user_info.country_iso2,
            avatar=user_info.avatar,
            gender=user_info.gender,
            access_token=user_info.access_token,
            role=UserRole.USER,
            created_at=now,
            last_login_at=now
        )
        db.add(db_user)
        logger.info(f"Created user for WCA id {user_info.wca_id}")

    db.commit()
    db.refresh(db_user)
    return db_user


def update_user(db: Session, user_id: int, user_update: UserUpdate):
    db_user = db.query(User).filter(User.id == user_id).first()
    if not db_user:
        return None

    update_data = user_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_user, field, value)

    db.commit()
    db.refresh(db_user)
    return db_user


def anonymize_user(db_user: User, now: datetime):
    """Phase one of account deletion: strip identity, keep the row"""
    db_user.name = DELETED_USER_NAME
    db_user.wca_id = f"DELETED-{db_user.id}"
    db_user.email = None
    db_user.avatar = None
    db_user.gender = None
    db_user.country_iso2 = None
    db_user.access_token = None
    db_user.is_deleted = True
    db_user.deleted_at = now
    db_user.is_active = False


def purge_owned_data(db: Session, user_id: int):
    """
    Phase two: delete data owned only by this user (personal timer sessions,
    solves and their per-event records). Room participations and room solves
    stay, pointing at the anonymized row, so leaderboards keep their shape.
    """
    deleted_solves = db.query(TimerSolve).filter(TimerSolve.user_id == user_id).delete()
    deleted_sessions = db.query(TimerSession).filter(TimerSession.user_id == user_id).delete()
    db.query(UserEventStats).filter(UserEventStats.user_id == user_id).delete()
    return deleted_solves, deleted_sessions


def delete_user_account(db: Session, user_id: int, now: datetime = None):
    db_user = get_user_by_id(db, user_id)
    if not db_user or db_user.is_deleted:
        return None

    now = now or utcnow()
    anonymize_user(db_user, now)
    deleted_solves, deleted_sessions = purge_owned_data(db, user_id)
    db.commit()

    logger.info(
        f"Deleted account {user_id}: removed {deleted_solves} timer solves and {deleted_sessions} sessions"
    )
    return {
        "success": True,
        "deleted_timer_solves": deleted_solves,
        "deleted_timer_sessions": deleted_sessions
    }
