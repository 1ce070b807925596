from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from api.deps.db import get_db
from core.auth import get_current_user_optional
from models.challenge_room import ChallengeRoom
from models.room_participant import RoomParticipant
from models.user import User

router = APIRouter(prefix="/stats", tags=["Statistics"])


def _empty_stats(user_id: int, hidden: bool = False):
    return {
        "user_id": user_id,
        "rooms_won": 0,
        "rooms_participated": 0,
        "rooms_created": 0,
        "hidden": hidden
    }


@router.get("/challenges/{user_id}")
async def get_challenge_stats(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_current_user_optional)
):
    """Rooms won, joined and created by a user"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        return _empty_stats(user_id)

    is_owner = current_user is not None and current_user.id == user.id
    if user.hide_challenge_stats and not is_owner:
        return _empty_stats(user_id, hidden=True)

    rooms_won = db.query(RoomParticipant).filter(
        RoomParticipant.user_id == user_id,
        RoomParticipant.final_rank == 1
    ).count()

    rooms_participated = db.query(RoomParticipant).filter(
        RoomParticipant.user_id == user_id
    ).count()

    rooms_created = db.query(ChallengeRoom).filter(
        ChallengeRoom.created_by == user_id
    ).count()

    return {
        "user_id": user_id,
        "rooms_won": rooms_won,
        "rooms_participated": rooms_participated,
        "rooms_created": rooms_created,
        "hidden": False
    }
