"""
Periodic processing of challenge rooms.

Every sweep:
- flips rooms whose ``expires_at`` passed within the trailing window to
  ``expired`` and finalizes their ranks,
- hard-deletes rooms older than the retention period (solves, participants,
  then the room).

The window keeps a room from being processed twice. A room whose deadline
slipped past the window while the sweeper was down keeps ``status=active``
but is still refused by join/submit (``expires_at`` check) and is removed by
the retention pass.
"""
import asyncio
import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from api.crud.participant_crud import update_ranks_for_room
from api.crud.room_crud import delete_room_cascade
from core.config import settings
from core.time import utcnow
from db import SessionLocal
from models.challenge_room import ChallengeRoom, RoomStatus

logger = logging.getLogger(__name__)

# Pause before retrying after a failed sweep
RETRY_DELAY_SECONDS = 300


def process_expired_rooms(db: Session, now: datetime = None):
    now = now or utcnow()
    window_start = now - timedelta(minutes=settings.room_sweep_window_minutes)

    recently_expired = db.query(ChallengeRoom).filter(
        ChallengeRoom.status == RoomStatus.ACTIVE,
        ChallengeRoom.expires_at < now,
        ChallengeRoom.expires_at > window_start
    ).all()

    processed_rooms = 0
    for room in recently_expired:
        room.status = RoomStatus.EXPIRED
        ranked = update_ranks_for_room(db, room.room_code)
        logger.info(f"Room {room.room_code} expired, {ranked} participants ranked")
        processed_rooms += 1

    retention_cutoff = now - timedelta(days=settings.room_retention_days)
    old_room_ids = [
        row[0] for row in db.query(ChallengeRoom.id).filter(ChallengeRoom.created_at < retention_cutoff).all()
    ]
    for room_id in old_room_ids:
        delete_room_cascade(db, room_id)

    db.commit()

    if processed_rooms or old_room_ids:
        logger.info(f"Room sweep: {processed_rooms} expired, {len(old_room_ids)} deleted")

    return {"processed_rooms": processed_rooms, "deleted_rooms": len(old_room_ids)}


def sweep_rooms_once():
    """One sweep in its own session (used by the background task)"""
    db = SessionLocal()
    try:
        return process_expired_rooms(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def start_room_sweeper(interval_minutes: int = None) -> asyncio.Task:
    """Start the periodic room sweep on the running event loop."""
    interval_seconds = (interval_minutes or settings.room_sweep_interval_minutes) * 60

    async def sweep_rooms():
        while True:
            try:
                # Blocking DB work stays off the event loop
                result = await asyncio.to_thread(sweep_rooms_once)
                logger.debug(f"Room sweep result: {result}")
                await asyncio.sleep(interval_seconds)
            except Exception as e:
                logger.error(f"Error sweeping rooms: {e}")
                await asyncio.sleep(RETRY_DELAY_SECONDS)

    task = asyncio.create_task(sweep_rooms())
    logger.info(f"Started room sweeper ({interval_seconds // 60}-minute intervals)")
    return task
