import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import settings
from app.core.exceptions import Duplicate, NotFound, Unauthenticated, ValidationError
from app.core.policy import Action, Actor, decide, enforce
from app.core.security import create_access_token, verify_password
from app.core.validation import parse
from app.models.enums import Role
from app.models.user import User
from app.repos import user_repo
from app.schemas.auth import UserLogin, UserRegister
from app.schemas.user import UserUpdate

logger = logging.getLogger(__name__)


def register(db: Session, data: UserRegister | Mapping[str, Any]) -> tuple[User, str]:
    """Create an account and return it with a fresh access token."""
    data = parse(UserRegister, data)
    if user_repo.get_by_email(db, data.email):
        raise Duplicate("Email already registered")
    try:
        user = user_repo.create(db, name=data.name, email=data.email, password=data.password, role=data.role)
    except IntegrityError:
        # Lost a race with another registration for the same email
        db.rollback()
        raise Duplicate("Email already registered") from None
    logger.info("User registered: %s (%s)", user.email, user.role)
    return user, create_access_token(user.id, user.role)


def login(db: Session, data: UserLogin | Mapping[str, Any]) -> tuple[User, str]:
    data = parse(UserLogin, data)
    user = user_repo.get_by_email(db, data.email)
    if not user or not verify_password(data.password, user.password_hash):
        logger.info("Login failed for %s", data.email)
        raise Unauthenticated("Invalid email or password")
    logger.info("User logged in: %s", user.email)
    return user, create_access_token(user.id, user.role)


def _load(db: Session, user_id: str) -> User:
    user = user_repo.get_by_id(db, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def get(db: Session, actor: Actor, user_id: str) -> User:
    user = _load(db, user_id)
    enforce(decide(actor, Action.READ_USER, user))
    return user


def search(db: Session, actor: Actor, role: str | None = None, text: str | None = None) -> list[User]:
    enforce(decide(actor, Action.LIST_USERS))
    if role is not None:
        try:
            role = Role(role).value
        except ValueError:
            raise ValidationError(errors=[{"field": "role", "message": "Role must be either job_seeker or recruiter"}]) from None
    return user_repo.search(db, role=role, text=text)


def update(db: Session, actor: Actor, user_id: str, patch: UserUpdate | Mapping[str, Any]) -> User:
    user = _load(db, user_id)
    enforce(decide(actor, Action.UPDATE_USER, user, recruiters_manage_users=settings.recruiters_manage_users))
    data = parse(UserUpdate, patch)
    profile = data.profile.model_dump(exclude_unset=True) if data.profile is not None else None
    user = user_repo.update(db, user, name=data.name, profile=profile)
    logger.info("User %s updated by %s", user.id, actor.id)
    return user


def delete(db: Session, actor: Actor, user_id: str) -> None:
    user = _load(db, user_id)
    enforce(decide(actor, Action.DELETE_USER, user, recruiters_manage_users=settings.recruiters_manage_users))
    user_repo.delete_user(db, user)
    logger.info("User %s deleted by %s", user_id, actor.id)
