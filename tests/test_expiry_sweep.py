"""
Periodic expiry processing and retention
"""
import asyncio
from datetime import timedelta

import pytest

from api.crud.room_crud import create_room, get_room_by_code
from api.crud.participant_crud import join_room, get_participant_by_ids
from api.crud.solve_crud import submit_solve
from core.exceptions import RoomExpired
from models.challenge_room import ChallengeRoom, RoomStatus
from models.room_participant import RoomParticipant
from models.room_solve import RoomSolve
from schemas.challenge_room import SolveSubmit
from services import room_sweeper
from services.room_sweeper import process_expired_rooms, sweep_rooms_once, start_room_sweeper
from tests.helpers import NOW, room_create


def _room(db_session, user, created_at, name="room"):
    return create_room(db_session, room_create(name=name), user.id, now=created_at)["room_id"]


def test_recently_expired_room_is_flipped_and_ranked(db_session, make_user):
    host, racer = make_user(), make_user()
    created_at = NOW - timedelta(hours=48, minutes=30)
    code = _room(db_session, host, created_at)

    join_room(db_session, racer.id, code, now=created_at)
    for n in range(1, 6):
        submit_solve(db_session, racer.id, code, SolveSubmit(solve_number=n, time=10000), now=created_at)

    result = process_expired_rooms(db_session, now=NOW)

    assert result == {"processed_rooms": 1, "deleted_rooms": 0}
    room = get_room_by_code(db_session, code)
    assert room.status == RoomStatus.EXPIRED
    assert get_participant_by_ids(db_session, room.id, racer.id).final_rank == 1


def test_active_and_long_expired_rooms_are_left_alone(db_session, make_user):
    host = make_user()
    active = _room(db_session, host, NOW - timedelta(hours=1), "active")
    # Deadline passed outside the trailing window
    missed = _room(db_session, host, NOW - timedelta(hours=50), "missed")

    result = process_expired_rooms(db_session, now=NOW)

    assert result == {"processed_rooms": 0, "deleted_rooms": 0}
    assert get_room_by_code(db_session, active).status == RoomStatus.ACTIVE
    assert get_room_by_code(db_session, missed).status == RoomStatus.ACTIVE


def test_second_sweep_does_not_reprocess(db_session, make_user):
    host = make_user()
    _room(db_session, host, NOW - timedelta(hours=48, minutes=10))

    assert process_expired_rooms(db_session, now=NOW)["processed_rooms"] == 1
    assert process_expired_rooms(db_session, now=NOW + timedelta(minutes=5))["processed_rooms"] == 0


def test_rooms_past_retention_are_deleted_with_children(db_session, make_user):
    host, racer = make_user(), make_user()
    created_at = NOW - timedelta(days=31)
    old = _room(db_session, host, created_at, "old")
    join_room(db_session, racer.id, old, now=created_at)
    submit_solve(db_session, racer.id, old, SolveSubmit(solve_number=1, time=10000), now=created_at)
    recent = _room(db_session, host, NOW - timedelta(days=3), "recent")

    result = process_expired_rooms(db_session, now=NOW)

    assert result["deleted_rooms"] == 1
    assert get_room_by_code(db_session, old) is None
    assert get_room_by_code(db_session, recent) is not None
    assert db_session.query(RoomParticipant).count() == 0
    assert db_session.query(RoomSolve).count() == 0
    assert db_session.query(ChallengeRoom).count() == 1


def test_expired_status_blocks_submissions(db_session, make_user):
    host, racer = make_user(), make_user()
    created_at = NOW - timedelta(hours=48, minutes=30)
    code = _room(db_session, host, created_at)
    join_room(db_session, racer.id, code, now=created_at)
    process_expired_rooms(db_session, now=NOW)

    with pytest.raises(RoomExpired):
        submit_solve(db_session, racer.id, code, SolveSubmit(solve_number=1, time=10000), now=created_at)


def test_sweep_once_uses_its_own_session(db_session, make_user, monkeypatch):
    monkeypatch.setattr(room_sweeper, "SessionLocal", lambda: db_session)
    monkeypatch.setattr(db_session, "close", lambda: None)

    assert sweep_rooms_once() == {"processed_rooms": 0, "deleted_rooms": 0}


def test_background_task_runs_sweep_and_can_be_cancelled(monkeypatch):
    calls = []
    monkeypatch.setattr(room_sweeper, "sweep_rooms_once", lambda: calls.append(1) or {})

    async def run():
        task = start_room_sweeper(interval_minutes=60)
        for _ in range(200):
            await asyncio.sleep(0.01)
            if calls:
                break
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(run())
    assert calls == [1]
