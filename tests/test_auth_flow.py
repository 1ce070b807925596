"""
WCA OAuth login: state cookie round trip and the callback outcomes
"""
from urllib.parse import urlparse, parse_qs

import pytest

from api.routers.auth import OAUTH_STATE_COOKIE
from core.auth import decode_access_token
from core.config import settings
from models.user import User
from schemas.auth import WcaUserInfo
from services.wca_service import wca_service


@pytest.fixture
def wca_login(monkeypatch):
    """WCA OAuth configured, with the token exchange and profile calls stubbed"""
    monkeypatch.setattr(wca_service, "client_id", "client-id")
    monkeypatch.setattr(wca_service, "client_secret", "client-secret")
    profile = {"info": WcaUserInfo(id=42, wca_id="2019DOEJ01", name="Jane Doe", country_iso2="US")}

    async def exchange_code_for_token(code):
        return "wca-token" if code == "good-code" else None

    async def get_user_info(access_token):
        return profile["info"]

    monkeypatch.setattr(wca_service, "exchange_code_for_token", exchange_code_for_token)
    monkeypatch.setattr(wca_service, "get_user_info", get_user_info)
    return profile


def _login_state(client):
    response = client.get("/auth/login", follow_redirects=False)
    assert response.status_code == 307
    return parse_qs(urlparse(response.headers["location"]).query)["state"][0]


def test_login_not_configured(client):
    assert client.get("/auth/login", follow_redirects=False).status_code == 503


def test_login_sets_state_cookie(client, wca_login):
    state = _login_state(client)
    assert client.cookies.get(OAUTH_STATE_COOKIE) == state


def test_callback_logs_user_in(client, db_session, wca_login):
    state = _login_state(client)

    response = client.get("/auth/callback", params={"code": "good-code", "state": state}, follow_redirects=False)

    location = response.headers["location"]
    assert location.startswith(f"{settings.frontend_url}/auth/success?token=")
    token = parse_qs(urlparse(location).query)["token"][0]
    user = db_session.query(User).filter(User.wca_id == "2019DOEJ01").first()
    assert user is not None
    assert decode_access_token(token).user_id == user.id
    assert user.access_token == "wca-token"


@pytest.mark.parametrize("state", [None, "forged-state"])
def test_callback_without_matching_state_is_refused(client, db_session, wca_login, state):
    _login_state(client)
    params = {"code": "good-code"}
    if state:
        params["state"] = state

    response = client.get("/auth/callback", params=params, follow_redirects=False)

    assert response.headers["location"] == f"{settings.frontend_url}/auth/error?reason=invalid_state"
    assert db_session.query(User).count() == 0


def test_callback_without_login_cookie_is_refused(client, db_session, wca_login):
    response = client.get(
        "/auth/callback", params={"code": "good-code", "state": "any"}, follow_redirects=False
    )
    assert response.headers["location"].endswith("/auth/error?reason=invalid_state")
    assert db_session.query(User).count() == 0


def test_account_without_wca_id_is_refused(client, db_session, wca_login):
    wca_login["info"] = WcaUserInfo(id=43, wca_id=None, name="Newcomer")
    state = _login_state(client)

    response = client.get("/auth/callback", params={"code": "good-code", "state": state}, follow_redirects=False)

    assert response.headers["location"].endswith("/auth/error?reason=no_wca_id")
    assert db_session.query(User).count() == 0


def test_failed_token_exchange(client, db_session, wca_login):
    state = _login_state(client)

    response = client.get("/auth/callback", params={"code": "bad-code", "state": state}, follow_redirects=False)

    assert response.headers["location"] == f"{settings.frontend_url}/auth/error"
    assert db_session.query(User).count() == 0
