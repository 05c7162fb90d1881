import logging

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.exceptions import Unauthenticated
from app.core.policy import Actor
from app.core.security import decode_access_token
from app.database import get_db
from app.models.user import User
from app.repos.user_repo import get_by_id

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def _user_from_credentials(db: Session, credentials: HTTPAuthorizationCredentials) -> User:
    claims = decode_access_token(credentials.credentials)
    if not claims:
        logger.info("Auth failed: invalid or expired token")
        raise Unauthenticated("Invalid or expired token")
    user_id, _role = claims
    user = get_by_id(db, user_id)
    if not user:
        logger.info("Auth failed: user from token not found")
        raise Unauthenticated("User not found")
    return user


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if not credentials:
        logger.info("Auth failed: missing bearer credentials")
        raise Unauthenticated("Not authenticated")
    return _user_from_credentials(db, credentials)


def get_current_actor(user: User = Depends(get_current_user)) -> Actor:
    """Role comes from the stored user, not the token, so it is never stale."""
    return Actor.from_user(user)


def get_optional_actor(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Actor | None:
    """Actor for public routes: None when no token is sent, 401 when a bad one is."""
    if not credentials:
        return None
    return Actor.from_user(_user_from_credentials(db, credentials))
