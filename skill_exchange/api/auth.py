import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skill_exchange.crud import profile as profile_crud
from skill_exchange.database import get_db
from skill_exchange.schemas.auth import LoginRequest, RegisterRequest, Token
from skill_exchange.utils.security import authenticate_user, create_access_token, get_password_hash

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(user) -> dict:
    access_token = create_access_token(data={"sub": user.email, "role": user.role})
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user_id": user.id,
        "role": user.role,
    }


# ===== REGISTER ENDPOINT =====

@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_data: RegisterRequest, db: Session = Depends(get_db)):
    """Create an auth identity. The public profile is completed with /profiles/setup."""
    normalized_email = user_data.email.strip().lower()

    if profile_crud.get_user_by_email(db, normalized_email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        user = profile_crud.create_user(
            db,
            email=normalized_email,
            password_hash=get_password_hash(user_data.password),
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Registration failed for %s", normalized_email)
        raise HTTPException(status_code=500, detail="Internal server error")

    logger.info("Registered user %s", user.id)
    return {"message": "Registration successful", "user_id": user.id}


# ===== LOGIN ENDPOINTS =====

@router.post("/login", response_model=Token)
def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    """Verify credentials and return access token"""
    user = authenticate_user(db, credentials.email, credentials.password)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _issue_token(user)


@router.post("/token", response_model=Token)
def login_for_docs(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """OAuth2 password flow used by the interactive docs' Authorize button."""
    user = authenticate_user(db, form_data.username, form_data.password)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _issue_token(user)
