"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from campus_notify.domain.entities import DirectoryUser
from campus_notify.infrastructure.database import get_db
from campus_notify.infrastructure.repositories import UserRepository
from campus_notify.infrastructure.security import decode_access_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _unauthorized(detail: str = "Invalid credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_user(token: str, db: Session) -> DirectoryUser:
    """Resolve the authenticated user for the provided token."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    subject = payload.get("sub")
    try:
        user_id = int(subject)
    except (TypeError, ValueError) as exc:
        raise _unauthorized() from exc

    user = UserRepository(db).get(user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user


def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> DirectoryUser:
    """Return the authenticated user from the provided token."""

    return resolve_current_user(token, db)


def get_current_active_user(
    current_user: DirectoryUser = Depends(get_current_user),
) -> DirectoryUser:
    """Ensure the authenticated user is active."""

    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )
    return current_user


def require_admin(
    current_user: DirectoryUser = Depends(get_current_active_user),
) -> DirectoryUser:
    """Ensure the authenticated user has administrator privileges."""

    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized",
        )
    return current_user
