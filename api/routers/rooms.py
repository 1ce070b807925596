from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from api.deps.db import get_db
from api.crud.room_crud import (
    create_room, get_room_details, get_public_rooms, update_room, check_room_code
)
from api.crud.participant_crud import (
    join_room, get_user_participation, update_participant_ranks
)
from api.crud.solve_crud import submit_solve
from core.auth import get_current_active_user
from core.exceptions import RoomNotFound
from models.user import User
from schemas.challenge_room import (
    RoomCreate, RoomUpdate, SolveSubmit, RoomCodeCheck, RoomCreated, RoomDetails,
    RoomWithCreator, JoinResult, Solve, UserParticipation, RoomCodeCheckResult,
    RanksUpdated
)

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.post("/", response_model=RoomCreated, status_code=201)
async def create_new_room(
    room: RoomCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Create a challenge room with a fixed scramble list"""
    return create_room(db, room, current_user.id)


@router.get("/public", response_model=List[RoomWithCreator])
async def list_public_rooms(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Active public rooms, newest first"""
    return get_public_rooms(db, limit=limit)


@router.post("/validate", response_model=RoomCodeCheckResult)
async def validate_room_code(check: RoomCodeCheck, db: Session = Depends(get_db)):
    """Check whether a room code exists before joining"""
    return check_room_code(db, check.room_id)


@router.get("/{room_code}", response_model=RoomDetails)
async def get_room(room_code: str, db: Session = Depends(get_db)):
    """Room with its creator and the sorted leaderboard"""
    details = get_room_details(db, room_code)
    if details is None:
        raise RoomNotFound()
    return details


@router.put("/{room_code}")
async def edit_room(
    room_code: str,
    room_update: RoomUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return update_room(db, current_user.id, room_code, room_update.title, room_update.description)


@router.post("/{room_code}/join", response_model=JoinResult)
async def join(
    room_code: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Join a room. Repeated joins return the existing participant."""
    return join_room(db, current_user.id, room_code)


@router.post("/{room_code}/solves", response_model=Solve, status_code=201)
async def submit_room_solve(
    room_code: str,
    solve: SolveSubmit,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Record one solve against one scramble slot"""
    return submit_solve(db, current_user.id, room_code, solve)


@router.post("/{room_code}/ranks", response_model=RanksUpdated)
async def rank_room(
    room_code: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Recompute final ranks of completed participants"""
    return {"ranked": update_participant_ranks(db, room_code)}


@router.get("/{room_code}/participants/{user_id}", response_model=Optional[UserParticipation])
async def get_participation(room_code: str, user_id: int, db: Session = Depends(get_db)):
    """A user's participant record and solves, or null when they never joined"""
    return get_user_participation(db, user_id, room_code)
