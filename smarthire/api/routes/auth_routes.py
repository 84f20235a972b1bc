"""
Authentication Routes

POST /auth/signup - Create account and log in
POST /auth/login - Login and get JWT token
POST /auth/logout - Logout (client discards token)
GET /auth/me - Get current user info
POST /auth/password-reset - Request a password reset link
"""

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy import insert, select

from smarthire.db.database import get_db_session, fetch_one
from smarthire.db.tables import users
from smarthire.core.auth import hash_password, verify_password, create_access_token, get_current_user
from smarthire.schemas.schemas import (
    SignupRequest, LoginRequest, PasswordResetRequest, TokenResponse, UserResponse,
    MessageResponse, UserStatus
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

RESET_MESSAGE = "If an account exists for this email, a password reset link has been sent."


def _token_for(user_id: int, name: str, role: str) -> TokenResponse:
    token = create_access_token(data={"sub": str(user_id), "role": role})
    return TokenResponse(access_token=token, user_id=user_id, name=name, role=role)


@router.post("/signup", response_model=TokenResponse, status_code=201)
async def signup(request: SignupRequest):
    """
    Register a new user account.

    The new user is logged in right away (token in the response).
    """
    email = request.email.lower()
    with get_db_session() as db:
        exists = db.execute(select(users.c.user_id).where(users.c.email == email)).first()
        if exists:
            raise HTTPException(status_code=400, detail="An account with this email already exists.")

        result = db.execute(insert(users).values(
            name=request.name.strip(),
            email=email,
            password_hash=hash_password(request.password),
            role=request.role.value,
            status=UserStatus.active.value,
            created_at=datetime.utcnow(),
        ))
        user_id = result.inserted_primary_key[0]

    logger.info("New %s account %s (user %s)", request.role.value, email, user_id)
    return _token_for(user_id, request.name.strip(), request.role.value)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = fetch_one(select(users).where(users.c.email == request.email.lower()))

    if not user or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password.")

    return _token_for(user["user_id"], user["name"], user["role"])


@router.post("/logout", response_model=MessageResponse)
async def logout(user: dict = Depends(get_current_user)):
    """Tokens are stateless; the client drops its copy."""
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    row = fetch_one(select(users).where(users.c.user_id == user["user_id"]))
    return UserResponse(**row)


@router.post("/password-reset", response_model=MessageResponse)
async def send_password_reset_link(request: PasswordResetRequest):
    """Same answer whether or not the account exists."""
    exists = fetch_one(select(users.c.user_id).where(users.c.email == request.email.lower()))
    if exists:
        logger.info("Password reset requested for user %s", exists["user_id"])
    else:
        logger.info("Password reset requested for unknown email")
    return MessageResponse(message=RESET_MESSAGE)
