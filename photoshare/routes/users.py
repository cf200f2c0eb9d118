import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.orm import Session

from photoshare.db import commit_or_raise, get_db
from photoshare.models.user import User
from photoshare.utils.config import settings
from photoshare.utils.errors import ApiError, AuthError, NotFoundError, BadRequestError
from photoshare.utils.security import hash_password, verify_password, issue_token, require_token


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


class RegisterRequest(BaseModel):
    id: int = 0
    username: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UpdateUserRequest(BaseModel):
    username: str = ""
    email: str = ""


class UserProfile(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class MessageResponse(BaseModel):
    message: str


class TokenResponse(BaseModel):
    token: str


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("user not found")
    return user


@router.post("/register", response_model=MessageResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    if not payload.id or not payload.username or not payload.email or not payload.password:
        raise BadRequestError("id, username, email and password are required")
    # Length is measured in UTF-8 bytes
    if len(payload.password.encode("utf-8")) < settings.PASSWORD_MIN_LENGTH:
        raise BadRequestError(
            f"password must be at least {settings.PASSWORD_MIN_LENGTH} bytes long")

    existing = db.query(User).filter(User.email == payload.email).first()
    if existing:
        raise BadRequestError("email already registered")

    user = User(id=payload.id,
                username=payload.username,
                email=payload.email,
                password_hash=hash_password(payload.password))
    db.add(user)
    commit_or_raise(db, "failed to save user")
    logger.info("Registered user %s", user.id)
    return {"message": "registration successful"}


@router.api_route("/login", methods=["GET", "POST"], response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == payload.email).first()
    # Same answer for unknown email and wrong password
    if not user or not verify_password(payload.password, user.password_hash):
        raise AuthError("invalid email or password")

    try:
        token = issue_token(user.username)
    except Exception:
        logger.exception("Token issuance failed for user %s", user.id)
        raise ApiError("failed to create token")
    logger.info("User %s logged in", user.id)
    return {"token": token}


@router.get("/{user_id}", response_model=UserProfile)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return _get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=MessageResponse)
def update_user(
    user_id: int,
    payload: UpdateUserRequest,
    db: Session = Depends(get_db),
    caller: str = Depends(require_token),
):
    user = _get_user_or_404(db, user_id)

    if not payload.username or not payload.email:
        raise BadRequestError("username and email are required")

    taken = db.query(User).filter(User.email == payload.email, User.id != user.id).first()
    if taken:
        raise BadRequestError("email already registered")

    user.username = payload.username
    user.email = payload.email
    commit_or_raise(db, "failed to update user")
    logger.info("User %s updated by %s", user.id, caller)
    return {"message": "user updated"}


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    caller: str = Depends(require_token),
):
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    commit_or_raise(db, "failed to delete user")
    logger.info("User %s deleted by %s", user_id, caller)
    return {"message": "user deleted"}
