"""
HTTP routes, end to end through the FastAPI app
"""
from core.roles import UserRole
from services.wca_stats import MAX_SOLVE_TIME
from tests.helpers import AO5_SCRAMBLES


def _create_payload(**kwargs):
    payload = {
        "name": "Lunch race",
        "event": "333",
        "format": "ao5",
        "scrambles": AO5_SCRAMBLES,
        "is_public": True,
    }
    payload.update(kwargs)
    return payload


def _create_room(client, headers, **kwargs):
    response = client.post("/rooms/", json=_create_payload(**kwargs), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["room_id"]


class TestRoomRoutes:

    def test_create_requires_auth(self, client):
        response = client.post("/rooms/", json=_create_payload())
        assert response.status_code in (401, 403)

    def test_create_and_fetch(self, client, make_user, auth_headers):
        host = make_user("Host")
        response = client.post("/rooms/", json=_create_payload(), headers=auth_headers(host))
        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"room_id", "id"}

        details = client.get(f"/rooms/{body['room_id'].lower()}").json()
        assert details["room"]["room_code"] == body["room_id"]
        assert details["room"]["event_name"] == "3x3x3 Cube"
        assert details["room"]["is_expired"] is False
        assert details["room"]["creator"]["name"] == "Host"
        assert details["participants"] == []

    def test_wrong_scramble_count_is_422(self, client, make_user, auth_headers):
        host = make_user()
        response = client.post(
            "/rooms/", json=_create_payload(scrambles=AO5_SCRAMBLES[:3]), headers=auth_headers(host)
        )
        assert response.status_code == 422

    def test_missing_room_is_typed_404(self, client):
        response = client.get("/rooms/NOPE00")
        assert response.status_code == 404
        assert response.json() == {"detail": "Room not found", "code": "room_not_found", "type": "room_error"}

    def test_public_listing_and_validate(self, client, make_user, auth_headers):
        host = make_user()
        public = _create_room(client, auth_headers(host))
        _create_room(client, auth_headers(host), is_public=False)

        rooms = client.get("/rooms/public").json()
        assert [r["room_code"] for r in rooms] == [public]

        check = client.post("/rooms/validate", json={"room_id": public.lower()}).json()
        assert check == {"exists": True, "room_id": public}

    def test_only_creator_can_edit(self, client, make_user, auth_headers):
        host, other = make_user(), make_user()
        code = _create_room(client, auth_headers(host))

        response = client.put(f"/rooms/{code}", json={"title": "Hijacked"}, headers=auth_headers(other))
        assert response.status_code == 403
        assert response.json()["code"] == "unauthorized"

        response = client.put(f"/rooms/{code}", json={"title": "Renamed", "description": "x"}, headers=auth_headers(host))
        assert response.json() == {"success": True}
        assert client.get(f"/rooms/{code}").json()["room"]["name"] == "Renamed"


class TestRaceFlow:

    def test_two_racers_end_to_end(self, client, make_user, auth_headers):
        host, alice, bob = make_user("Host"), make_user("Alice"), make_user("Bob")
        code = _create_room(client, auth_headers(host))

        for user in (alice, bob):
            response = client.post(f"/rooms/{code}/join", headers=auth_headers(user))
            assert response.status_code == 200
            assert response.json()["participant"]["total_solves"] == 5

        # Joining again is a no-op
        again = client.post(f"/rooms/{code}/join", headers=auth_headers(alice)).json()
        assert again["room"]["participant_count"] == 2

        times = {alice.id: [12000, 11500, 13000, 12500, 11000], bob.id: [10000, 10500, 9500, 11000, 10200]}
        for user in (alice, bob):
            for n, t in enumerate(times[user.id], 1):
                response = client.post(
                    f"/rooms/{code}/solves",
                    json={"solve_number": n, "time": t, "penalty": "none"},
                    headers=auth_headers(user)
                )
                assert response.status_code == 201, response.text
                assert response.json()["scramble"] == AO5_SCRAMBLES[n - 1]

        duplicate = client.post(
            f"/rooms/{code}/solves", json={"solve_number": 1, "time": 5000}, headers=auth_headers(bob)
        )
        assert duplicate.status_code == 409
        assert duplicate.json()["code"] == "duplicate_solve"

        ranked = client.post(f"/rooms/{code}/ranks", headers=auth_headers(host)).json()
        assert ranked == {"ranked": 2}

        details = client.get(f"/rooms/{code}").json()
        assert [p["user"]["name"] for p in details["participants"]] == ["Bob", "Alice"]
        assert [p["final_rank"] for p in details["participants"]] == [1, 2]
        assert details["participants"][1]["average"] == 12000
        assert details["participants"][1]["average_display"] == "12.00"
        assert details["room"]["completed_count"] == 2

        participation = client.get(f"/rooms/{code}/participants/{bob.id}").json()
        assert [s["solve_number"] for s in participation["solves"]] == [1, 2, 3, 4, 5]
        assert participation["participant"]["best_single"] == 9500

        assert client.get(f"/rooms/{code}/participants/{host.id}").json() is None

        recent = client.get(f"/users/{alice.id}/rooms/recent").json()
        assert [r["room"]["room_code"] for r in recent] == [code]

        history = client.get(f"/users/{alice.id}/rooms").json()
        assert history[0]["room_public_id"] == code
        assert history[0]["room_status"] == "active"

        stats = client.get(f"/stats/challenges/{bob.id}").json()
        assert stats["rooms_won"] == 1
        assert stats["rooms_participated"] == 1
        assert stats["rooms_created"] == 0

    def test_oversized_time_is_422(self, client, make_user, auth_headers):
        host, racer = make_user(), make_user()
        code = _create_room(client, auth_headers(host))
        client.post(f"/rooms/{code}/join", headers=auth_headers(racer))

        for time in (2 ** 63, MAX_SOLVE_TIME + 1):
            response = client.post(
                f"/rooms/{code}/solves",
                json={"solve_number": 1, "time": time, "penalty": "+2"},
                headers=auth_headers(racer)
            )
            assert response.status_code == 422

        participation = client.get(f"/rooms/{code}/participants/{racer.id}").json()
        assert participation["participant"]["solves_completed"] == 0

    def test_submit_without_joining(self, client, make_user, auth_headers):
        host, outsider = make_user(), make_user()
        code = _create_room(client, auth_headers(host))
        response = client.post(
            f"/rooms/{code}/solves", json={"solve_number": 1, "time": 9000}, headers=auth_headers(outsider)
        )
        assert response.status_code == 404
        assert response.json()["code"] == "not_participating"


class TestStatsPrivacy:

    def test_hidden_stats_for_other_callers(self, client, make_user, auth_headers):
        owner = make_user(hide_challenge_stats=True)
        viewer = make_user()
        _create_room(client, auth_headers(owner))

        hidden = client.get(f"/stats/challenges/{owner.id}", headers=auth_headers(viewer)).json()
        assert hidden["hidden"] is True
        assert hidden["rooms_created"] == 0

        own = client.get(f"/stats/challenges/{owner.id}", headers=auth_headers(owner)).json()
        assert own["hidden"] is False
        assert own["rooms_created"] == 1

    def test_unknown_user_gets_zeros(self, client):
        stats = client.get("/stats/challenges/999").json()
        assert stats["rooms_won"] == 0
        assert stats["rooms_participated"] == 0


class TestAuthAndUsers:

    def test_me_and_profile_update(self, client, make_user, auth_headers):
        user = make_user("Jane")
        assert client.get("/auth/me", headers=auth_headers(user)).json()["name"] == "Jane"

        response = client.put("/auth/profile", json={"hide_profile": True}, headers=auth_headers(user))
        assert response.json()["hide_profile"] is True

    def test_delete_account(self, client, make_user, auth_headers):
        user = make_user("Jane")
        headers = auth_headers(user)

        response = client.delete("/auth/account", headers=headers)
        assert response.status_code == 200
        assert response.json()["success"] is True

        # Anonymized accounts can no longer act
        assert client.get("/auth/me", headers=headers).status_code == 400
        assert client.get(f"/users/{user.id}").json()["name"] == "Deleted User"

    def test_bad_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401

    def test_user_lookups(self, client, make_user):
        user = make_user("Jane", wca_id="2019DOEJ01")
        assert client.get("/users/wca/2019doej01").json()["id"] == user.id
        assert client.get("/users/999").status_code == 404
        assert [u["id"] for u in client.get("/users/").json()] == [user.id]

    def test_events(self, client):
        events = client.get("/events").json()
        assert {"id": "333", "name": "3x3x3 Cube"} in events
        assert len(events) == 17


class TestAdminRoutes:

    def test_regular_user_is_forbidden(self, client, make_user, auth_headers):
        user = make_user()
        assert client.post("/admin/rooms/cleanup", headers=auth_headers(user)).status_code == 403

    def test_admin_can_sweep_and_cleanup(self, client, make_user, auth_headers):
        admin = make_user(role=UserRole.ADMIN)
        headers = auth_headers(admin)

        assert client.post("/admin/rooms/process-expired", headers=headers).json() == {
            "processed_rooms": 0, "deleted_rooms": 0
        }
        assert client.post("/admin/rooms/cleanup", headers=headers).json() == {"deleted_rooms": 0}
