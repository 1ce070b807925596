"""
Personal timer sessions, solves and per-event records
"""
from datetime import timedelta

import pytest
from pydantic import ValidationError

from api.crud.timer_crud import (
    create_timer_session, get_timer_sessions, save_timer_solve, get_user_solves,
    update_timer_solve, delete_timer_solve, get_user_stats
)
from core.exceptions import TimerSessionNotFound, TimerSolveNotFound, UserNotFound
from models.room_solve import Penalty
from schemas.timer import TimerSessionCreate, TimerSolveCreate, TimerSolveUpdate
from services.wca_stats import DNF_TIME, MAX_SOLVE_TIME
from tests.helpers import NOW


def _save(db_session, user, time, penalty=Penalty.NONE, minute=0, event="333", session_id=None):
    return save_timer_solve(
        db_session, user.id,
        TimerSolveCreate(event=event, scramble="R U R'", time=time, penalty=penalty, session_id=session_id),
        now=NOW + timedelta(minutes=minute)
    )


def _save_all(db_session, user, times, event="333"):
    return [_save(db_session, user, t, minute=i, event=event) for i, t in enumerate(times)]


class TestSessions:

    def test_new_active_session_deactivates_previous(self, db_session, make_user):
        user = make_user()
        first = create_timer_session(db_session, user.id, TimerSessionCreate(name="Main", event="333"), now=NOW)
        second = create_timer_session(
            db_session, user.id, TimerSessionCreate(name="OH", event="333oh"), now=NOW + timedelta(minutes=1)
        )

        sessions = {s.id: s for s in get_timer_sessions(db_session, user.id)}
        assert sessions[first.id].is_active is False
        assert sessions[second.id].is_active is True
        assert [s.id for s in get_timer_sessions(db_session, user.id)] == [second.id, first.id]

    def test_missing_user(self, db_session):
        with pytest.raises(UserNotFound):
            create_timer_session(db_session, 999, TimerSessionCreate(name="Main", event="333"), now=NOW)

    def test_unknown_event_is_rejected(self):
        with pytest.raises(ValidationError):
            TimerSessionCreate(name="Main", event="3x3")


class TestSaveSolve:

    def test_final_time_is_derived_from_penalty(self, db_session, make_user):
        user = make_user()
        plain = _save(db_session, user, 10000)
        plus_two = _save(db_session, user, 10000, Penalty.PLUS_TWO, minute=1)
        dnf = _save(db_session, user, 10000, Penalty.DNF, minute=2)

        assert plain.final_time == 10000
        assert plus_two.final_time == 12000
        assert dnf.final_time == DNF_TIME
        assert plain.session_id is None

    def test_session_solve_count(self, db_session, make_user):
        user = make_user()
        session = create_timer_session(db_session, user.id, TimerSessionCreate(name="Main", event="333"), now=NOW)
        _save(db_session, user, 10000, session_id=session.id)
        _save(db_session, user, 11000, minute=1, session_id=session.id)

        assert get_timer_sessions(db_session, user.id)[0].solve_count == 2

    def test_someone_elses_session(self, db_session, make_user):
        owner, other = make_user(), make_user()
        session = create_timer_session(db_session, owner.id, TimerSessionCreate(name="Main", event="333"), now=NOW)

        with pytest.raises(TimerSessionNotFound):
            _save(db_session, other, 10000, session_id=session.id)
        assert get_user_solves(db_session, other.id) == []

    def test_oversized_time_is_rejected(self):
        with pytest.raises(ValidationError):
            TimerSolveCreate(event="333", scramble="R U", time=MAX_SOLVE_TIME + 1)


class TestListSolves:

    def test_newest_first_with_event_filter_and_limit(self, db_session, make_user):
        user = make_user()
        solves = _save_all(db_session, user, [10000, 11000, 12000])
        skewb = _save(db_session, user, 5000, minute=10, event="skewb")

        assert [s.id for s in get_user_solves(db_session, user.id)] == [skewb.id] + [s.id for s in reversed(solves)]
        assert [s.id for s in get_user_solves(db_session, user.id, event="333", limit=2)] == [solves[2].id, solves[1].id]

    def test_other_users_solves_are_not_listed(self, db_session, make_user):
        user, other = make_user(), make_user()
        _save(db_session, other, 10000)
        assert get_user_solves(db_session, user.id) == []


class TestEventStats:

    def test_first_solve_creates_record(self, db_session, make_user):
        user = make_user()
        _save(db_session, user, 10019)

        stats = get_user_stats(db_session, user.id, event="333")
        assert stats.best_single == 10010
        assert stats.total_solves == 1
        assert stats.best_ao5 is None
        assert stats.recent_ao5 is None

    def test_averages_over_newest_solves(self, db_session, make_user):
        user = make_user()
        _save_all(db_session, user, [10000, 12000, 11000, 9000, 13000, 8000])

        stats = get_user_stats(db_session, user.id, event="333")
        # Newest five: 8000 13000 9000 11000 12000 -> mean of 9000, 11000, 12000
        assert stats.recent_ao5 == 10670
        assert stats.best_ao5 == 10670
        assert stats.best_ao12 is None
        assert stats.best_single == 8000
        assert stats.total_solves == 6

    def test_records_are_per_event(self, db_session, make_user):
        user = make_user()
        _save(db_session, user, 10000)
        _save(db_session, user, 3000, minute=1, event="222")

        assert [s.event for s in get_user_stats(db_session, user.id)] == ["222", "333"]
        assert get_user_stats(db_session, user.id, event="444") is None


class TestEditSolve:

    def test_penalty_change_recomputes_final_time_and_records(self, db_session, make_user):
        user = make_user()
        solves = _save_all(db_session, user, [10000, 12000, 11000, 9000, 13000, 8000])

        # The 9000 becomes a DNF; both five-solve windows now hold one DNF
        updated = update_timer_solve(
            db_session, user.id, solves[3].id, TimerSolveUpdate(penalty=Penalty.DNF), now=NOW
        )
        assert updated.final_time == DNF_TIME
        assert updated.time == 9000

        stats = get_user_stats(db_session, user.id, event="333")
        assert stats.recent_ao5 == 12000
        assert stats.best_ao5 == 12000
        assert stats.best_single == 8000

    def test_comment_only_keeps_penalty(self, db_session, make_user):
        user = make_user()
        solve = _save(db_session, user, 10000, Penalty.PLUS_TWO)

        updated = update_timer_solve(db_session, user.id, solve.id, TimerSolveUpdate(comment="lucky"), now=NOW)
        assert updated.comment == "lucky"
        assert updated.penalty == Penalty.PLUS_TWO
        assert updated.final_time == 12000

    def test_someone_elses_solve(self, db_session, make_user):
        owner, other = make_user(), make_user()
        solve = _save(db_session, owner, 10000)

        with pytest.raises(TimerSolveNotFound):
            update_timer_solve(db_session, other.id, solve.id, TimerSolveUpdate(comment="x"), now=NOW)
        with pytest.raises(TimerSolveNotFound):
            delete_timer_solve(db_session, other.id, solve.id, now=NOW)


class TestDeleteSolve:

    def test_delete_updates_session_and_records(self, db_session, make_user):
        user = make_user()
        session = create_timer_session(db_session, user.id, TimerSessionCreate(name="Main", event="333"), now=NOW)
        fast = _save(db_session, user, 8000, session_id=session.id)
        _save(db_session, user, 10000, minute=1, session_id=session.id)

        assert delete_timer_solve(db_session, user.id, fast.id, now=NOW) == {"success": True}

        assert get_timer_sessions(db_session, user.id)[0].solve_count == 1
        stats = get_user_stats(db_session, user.id, event="333")
        assert stats.best_single == 10000
        assert stats.total_solves == 1

    def test_deleting_last_solve_drops_record(self, db_session, make_user):
        user = make_user()
        solve = _save(db_session, user, 10000)

        delete_timer_solve(db_session, user.id, solve.id, now=NOW)
        assert get_user_stats(db_session, user.id, event="333") is None
        assert get_user_stats(db_session, user.id) == []


class TestTimerRoutes:

    def test_requires_auth(self, client):
        assert client.get("/timer/solves").status_code in (401, 403)

    def test_save_list_edit_delete(self, client, make_user, auth_headers):
        user = make_user()
        headers = auth_headers(user)

        session = client.post("/timer/sessions", json={"name": "Main", "event": "333"}, headers=headers)
        assert session.status_code == 201
        session_id = session.json()["id"]

        ids = []
        for t in (10000, 12000, 11000, 9000, 13000):
            response = client.post(
                "/timer/solves",
                json={"event": "333", "scramble": "R U", "time": t, "session_id": session_id},
                headers=headers
            )
            assert response.status_code == 201, response.text
            ids.append(response.json()["id"])

        listed = client.get("/timer/solves", params={"event": "333", "limit": 3}, headers=headers).json()
        assert len(listed) == 3

        stats = client.get("/timer/stats/333", headers=headers).json()
        assert stats["best_ao5"] == 11000
        assert stats["total_solves"] == 5

        edited = client.patch(f"/timer/solves/{ids[0]}", json={"penalty": "+2"}, headers=headers).json()
        assert edited["final_time"] == 12000

        assert client.delete(f"/timer/solves/{ids[1]}", headers=headers).json() == {"success": True}
        assert client.get("/timer/sessions", headers=headers).json()[0]["solve_count"] == 4
        assert [s["event"] for s in client.get("/timer/stats", headers=headers).json()] == ["333"]
        assert client.get("/timer/stats/444", headers=headers).json() is None

    def test_bad_payloads_are_422(self, client, make_user, auth_headers):
        headers = auth_headers(make_user())
        for payload in (
            {"event": "3x3", "scramble": "R U", "time": 10000},
            {"event": "333", "scramble": "R U", "time": 2 ** 63},
        ):
            assert client.post("/timer/solves", json=payload, headers=headers).status_code == 422

    def test_other_users_solve_is_typed_404(self, client, make_user, auth_headers):
        owner, other = make_user(), make_user()
        solve_id = client.post(
            "/timer/solves", json={"event": "333", "scramble": "R U", "time": 10000}, headers=auth_headers(owner)
        ).json()["id"]

        response = client.delete(f"/timer/solves/{solve_id}", headers=auth_headers(other))
        assert response.status_code == 404
        assert response.json()["code"] == "timer_solve_not_found"
