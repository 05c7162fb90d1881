from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.auth import Token, UserLogin, UserRegister
from app.schemas.common import Envelope
from app.schemas.user import UserResponse
from app.services.user_directory import login as login_user
from app.services.user_directory import register as register_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=Envelope[Token], status_code=status.HTTP_201_CREATED)
def register(data: UserRegister, db: Session = Depends(get_db)):
    user, token = register_user(db, data)
    return Envelope(
        message="User registered successfully",
        data=Token(access_token=token, user=UserResponse.model_validate(user)),
    )


@router.post("/login", response_model=Envelope[Token])
def login(data: UserLogin, db: Session = Depends(get_db)):
    user, token = login_user(db, data)
    return Envelope(
        message="Login successful",
        data=Token(access_token=token, user=UserResponse.model_validate(user)),
    )


@router.get("/me", response_model=Envelope[UserResponse])
def get_me(user: User = Depends(get_current_user)):
    return Envelope(data=UserResponse.model_validate(user))
