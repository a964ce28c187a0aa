import logging

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select
from app.database import atomic, get_session
from app.errors import authentication_error, conflict
from app.models.user import User
from app.schemas.user_schemas import UserRegister, UserLogin, Token, UserRead
from app.utils.hash import hash_password, verify_password
from app.utils.token import create_access_token, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter()


# -------- AUTH ROUTES --------

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register_user(payload: UserRegister, session: Session = Depends(get_session)):
    email = payload.email.lower()

    existing_user = session.exec(select(User).where(User.email == email)).first()
    if existing_user:
        raise conflict("Email already registered")

    user = User(
        username=payload.username or email.split("@")[0],
        email=email,
        password=hash_password(payload.password)
    )

    with atomic(session):
        session.add(user)

    session.refresh(user)
    logger.info(f"Registered user {user.id}")

    return {
        "status": True,
        "message": "User registered successfully",
        "data": {"id": user.id, "email": user.email, "username": user.username},
    }


@router.post("/login")
def login(payload: UserLogin, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == payload.email.lower())).first()

    if not user or not verify_password(payload.password, user.password):
        raise authentication_error("Invalid email or password")

    access_token = create_access_token({"sub": user.id, "email": user.email})

    return {
        "status": True,
        "message": "Login successful",
        "data": Token(access_token=access_token),
    }


@router.get("/me")
def get_me(current_user: User = Depends(get_current_user)):
    return {"status": True, "data": UserRead.model_validate(current_user)}
