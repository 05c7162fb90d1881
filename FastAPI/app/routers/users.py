from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.policy import Actor
from app.database import get_db
from app.dependencies import get_current_actor
from app.models.enums import Role
from app.schemas.common import Envelope
from app.schemas.user import UserList, UserResponse, UserUpdate
from app.services import user_directory

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=Envelope[UserList])
def list_users(
    role: Role | None = None,
    search: str | None = None,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Browse users by role or name/email. Recruiters only."""
    users = [UserResponse.model_validate(u) for u in user_directory.search(db, actor, role=role, text=search)]
    return Envelope(data=UserList(count=len(users), users=users))


@router.get("/{user_id}", response_model=Envelope[UserResponse])
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    return Envelope(data=UserResponse.model_validate(user_directory.get(db, actor, user_id)))


@router.put("/{user_id}", response_model=Envelope[UserResponse])
def update_user(
    user_id: str,
    body: UserUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user = user_directory.update(db, actor, user_id, body)
    return Envelope(message="User updated successfully", data=UserResponse.model_validate(user))


@router.delete("/{user_id}", response_model=Envelope[dict])
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    user_directory.delete(db, actor, user_id)
    return Envelope(message="User deleted successfully", data={})
