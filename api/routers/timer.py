"""
Personal timer: sessions, solves and per-event records of the signed-in user.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from api.deps.db import get_db
from api.crud.timer_crud import (
    create_timer_session, get_timer_sessions, save_timer_solve, get_user_solves,
    update_timer_solve, delete_timer_solve, get_user_stats, DEFAULT_SOLVES_LIMIT
)
from core.auth import get_current_active_user
from models.user import User
from schemas.timer import (
    TimerSessionCreate, TimerSession, TimerSolveCreate, TimerSolveUpdate, TimerSolve,
    UserEventStats
)

router = APIRouter(prefix="/timer", tags=["Timer"])


@router.post("/sessions", response_model=TimerSession, status_code=201)
async def new_session(
    session: TimerSessionCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return create_timer_session(db, current_user.id, session)


@router.get("/sessions", response_model=List[TimerSession])
async def list_sessions(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return get_timer_sessions(db, current_user.id)


@router.post("/solves", response_model=TimerSolve, status_code=201)
async def save_solve(
    solve: TimerSolveCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Record a solve; the final time is derived from the raw time and penalty"""
    return save_timer_solve(db, current_user.id, solve)


@router.get("/solves", response_model=List[TimerSolve])
async def list_solves(
    event: Optional[str] = None,
    limit: int = Query(DEFAULT_SOLVES_LIMIT, ge=1, le=100),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Newest solves first"""
    return get_user_solves(db, current_user.id, event=event, limit=limit)


@router.patch("/solves/{solve_id}", response_model=TimerSolve)
async def edit_solve(
    solve_id: int,
    solve_update: TimerSolveUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return update_timer_solve(db, current_user.id, solve_id, solve_update)


@router.delete("/solves/{solve_id}")
async def remove_solve(
    solve_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return delete_timer_solve(db, current_user.id, solve_id)


@router.get("/stats", response_model=List[UserEventStats])
async def all_stats(
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Records for every event the user has timed"""
    return get_user_stats(db, current_user.id)


@router.get("/stats/{event}", response_model=Optional[UserEventStats])
async def event_stats(
    event: str,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    return get_user_stats(db, current_user.id, event=event)
