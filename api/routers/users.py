from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
from api.deps.db import get_db
from api.crud.user import get_user_by_id, get_user_by_wca_id, get_users
from api.crud.participant_crud import get_user_recent_rooms, get_user_room_participations
from schemas.auth import UserPublic
from schemas.challenge_room import RecentRoom, RoomParticipationSummary

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/", response_model=List[UserPublic])
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    db: Session = Depends(get_db)
):
    """Visible users, newest first"""
    return get_users(db, skip=skip, limit=limit)


@router.get("/wca/{wca_id}", response_model=UserPublic)
async def get_user_by_wca(wca_id: str, db: Session = Depends(get_db)):
    user = get_user_by_wca_id(db, wca_id.upper())
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}", response_model=UserPublic)
async def get_user_profile(
    user_id: int,
    db: Session = Depends(get_db)
):
    """Get user profile by ID"""
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}/rooms/recent", response_model=List[RecentRoom])
async def recent_rooms(user_id: int, db: Session = Depends(get_db)):
    """Up to five rooms the user joined most recently"""
    return get_user_recent_rooms(db, user_id)


@router.get("/{user_id}/rooms", response_model=List[RoomParticipationSummary])
async def room_history(user_id: int, db: Session = Depends(get_db)):
    return get_user_room_participations(db, user_id)
