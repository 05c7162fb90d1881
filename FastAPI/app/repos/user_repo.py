from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.core.security import hash_password, generate_id
from app.models.user import User
from app.models._types import utcnow


def get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.lower()).first()


def get_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create(db: Session, *, name: str, email: str, password: str, role: str) -> User:
    user = User(
        id=generate_id(),
        name=name,
        email=email.lower(),
        password_hash=hash_password(password),
        role=role,
        profile={},
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update(
    db: Session,
    user: User,
    *,
    name: str | None = None,
    profile: dict | None = None,
) -> User:
    if name is not None:
        user.name = name
    if profile is not None:
        # Merge so a partial profile does not wipe fields the client did not send
        user.profile = {**(user.profile or {}), **profile}
    user.updated_at = utcnow()
    db.commit()
    db.refresh(user)
    return user


def search(
    db: Session,
    role: str | None = None,
    text: str | None = None,
) -> list[User]:
    """List users with optional role filter and name/email search. Newest first."""
    q = db.query(User).order_by(User.created_at.desc())
    if role:
        q = q.filter(User.role == role)
    if text and text.strip():
        term = f"%{text.strip()}%"
        q = q.filter(or_(User.name.ilike(term), User.email.ilike(term)))
    return q.all()


def delete_user(db: Session, user: User) -> None:
    """Delete a user together with their jobs (and applications to them) and their own applications."""
    db.delete(user)
    db.commit()
