from typing import Optional
from fastapi import APIRouter, Cookie, Depends, HTTPException
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
import secrets
from api.deps.db import get_db
from api.crud.user import upsert_user, update_user, delete_user_account
from schemas.auth import UserUpsert, UserUpdate, User as UserSchema
from services.wca_service import wca_service
from core.auth import create_access_token, get_current_active_user
from core.config import settings
from core.logging import logger

router = APIRouter(prefix="/auth", tags=["Auth"])

# Holds the OAuth state between /login and /callback
OAUTH_STATE_COOKIE = "wca_oauth_state"
OAUTH_STATE_MAX_AGE = 600


def _error_redirect(reason: Optional[str] = None) -> RedirectResponse:
    url = f"{settings.frontend_url}/auth/error"
    if reason:
        url += f"?reason={reason}"
    response = RedirectResponse(url=url)
    response.delete_cookie(OAUTH_STATE_COOKIE)
    return response


@router.get("/login")
async def login():
    """Redirect to WCA OAuth login"""
    if not wca_service.is_configured:
        raise HTTPException(status_code=503, detail="WCA login is not configured")
    state = secrets.token_urlsafe(32)
    response = RedirectResponse(url=wca_service.get_authorization_url(state=state))
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        max_age=OAUTH_STATE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=settings.wca_redirect_uri.startswith("https://")
    )
    return response


@router.get("/callback")
async def auth_callback(
    code: str,
    state: Optional[str] = None,
    expected_state: Optional[str] = Cookie(None, alias=OAUTH_STATE_COOKIE),
    db: Session = Depends(get_db)
):
    """Handle WCA OAuth callback"""
    if not state or not expected_state or not secrets.compare_digest(state, expected_state):
        logger.warning("WCA callback with missing or mismatched state, login refused")
        return _error_redirect("invalid_state")

    try:
        access_token = await wca_service.exchange_code_for_token(code)
        if not access_token:
            raise HTTPException(status_code=400, detail="Failed to get access token")

        user_info = await wca_service.get_user_info(access_token)
        if not user_info:
            raise HTTPException(status_code=400, detail="Failed to get user info")

        # Rooms and leaderboards key users by WCA id
        if not user_info.wca_id:
            logger.warning(f"WCA account {user_info.id} has no WCA id, login refused")
            return _error_redirect("no_wca_id")

        db_user = upsert_user(db, UserUpsert(
            wca_id=user_info.wca_id,
            wca_user_id=user_info.id,
            name=user_info.name,
            email=user_info.email,
            country_iso2=user_info.country_iso2,
            avatar=user_info.avatar,
            gender=user_info.gender,
            access_token=access_token
        ))
        logger.info(f"User logged in: {db_user.wca_id}")

        jwt_token = create_access_token(data={"sub": str(db_user.id)})
        response = RedirectResponse(url=f"{settings.frontend_url}/auth/success?token={jwt_token}")
        response.delete_cookie(OAUTH_STATE_COOKIE)
        return response

    except Exception as e:
        logger.error(f"Auth callback error: {e}")
        return _error_redirect()


@router.get("/me", response_model=UserSchema)
async def get_current_user_info(current_user = Depends(get_current_active_user)):
    """Get current authenticated user info"""
    return current_user


@router.put("/profile", response_model=UserSchema)
async def update_profile(
    user_update: UserUpdate,
    current_user = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Update display name and privacy flags"""
    updated_user = update_user(db, current_user.id, user_update)
    if not updated_user:
        raise HTTPException(status_code=404, detail="User not found")
    return updated_user


@router.delete("/account")
async def delete_account(
    current_user = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Delete the current account.

    Identity fields are anonymized and personal timer data removed. Rooms the
    user created or joined stay, shown under the anonymized name.
    """
    result = delete_user_account(db, current_user.id)
    if result is None:
        raise HTTPException(status_code=404, detail="User not found")
    return result
