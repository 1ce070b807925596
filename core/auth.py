from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from core.config import settings
from core.roles import UserRole
from api.deps.db import get_db
from models.user import User
from schemas.auth import TokenData

bearer_scheme = HTTPBearer()
optional_bearer_scheme = HTTPBearer(auto_error=False)

CREDENTIALS_ERROR = "Could not validate credentials"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """JWT for a user id in ``data["sub"]``; expiry defaults to JWT_EXPIRE_MINUTES"""
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[TokenData]:
    """Token payload, or None for a bad signature, expired token or missing subject"""
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
        subject = claims.get("sub")
        if subject is None:
            return None
        return TokenData(user_id=int(subject))
    except (JWTError, ValueError):
        return None


def _user_from_token(db: Session, token: str) -> Optional[User]:
    token_data = decode_access_token(token)
    if token_data is None:
        return None
    return db.query(User).filter(User.id == token_data.user_id).first()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    user = _user_from_token(db, credentials.credentials)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=CREDENTIALS_ERROR,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    # Deleted accounts keep their row but may not act
    if not current_user.is_active or current_user.is_deleted:
        raise HTTPException(status_code=400, detail="Inactive user")
    return current_user


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer_scheme),
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Anonymous callers and bad tokens both resolve to None"""
    if credentials is None:
        return None
    return _user_from_token(db, credentials.credentials)


def require_role(required_role: UserRole):
    """Dependency factory: the caller's role must include ``required_role``"""
    def check_role(current_user: User = Depends(get_current_active_user)) -> User:
        if not UserRole.has_permission(current_user.role, required_role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {required_role.value}"
            )
        return current_user
    return check_role


get_admin = require_role(UserRole.ADMIN)
