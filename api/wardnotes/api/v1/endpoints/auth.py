"""
Account endpoints: registration, login and the current user.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
import logging

from wardnotes.core.database import get_session
from wardnotes.core.security import get_current_user, issue_access_token
from wardnotes.models.user import User
from wardnotes.schemas.auth import LoginRequest, RegisterRequest, AuthResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        created_at=user.created_at.isoformat(),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    login_data: LoginRequest,
    session: Session = Depends(get_session)
):
    """Login with email and password."""
    user = session.exec(select(User).where(User.email == login_data.email.lower())).first()

    if not user or not user.verify_password(login_data.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    return AuthResponse(
        user=to_user_response(user),
        access_token=issue_access_token(user.id),
        message="Login successful"
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    register_data: RegisterRequest,
    session: Session = Depends(get_session)
):
    """Register a new user."""
    email = register_data.email.lower()

    # Check if email already exists
    existing_user = session.exec(select(User).where(User.email == email)).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already exists"
        )

    new_user = User(
        email=email,
        password=User.hash_password(register_data.password),
        full_name=register_data.full_name,
    )
    session.add(new_user)
    session.commit()
    session.refresh(new_user)
    logger.info(f"Registered user {new_user.id}")

    return AuthResponse(
        user=to_user_response(new_user),
        access_token=issue_access_token(new_user.id),
        message="Registration successful"
    )


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user."""
    return to_user_response(current_user)
