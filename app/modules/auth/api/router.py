"""Authentication router for email/password accounts"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.security import create_access_token
from app.db.session import get_db
from app.deps import get_current_user
from app.modules.auth.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from app.modules.auth.services.auth import EmailAlreadyRegistered, authenticate_user, register_user
from app.modules.user_management.models.user import User

router = APIRouter()

def _auth_response(user: User) -> Dict[str, Any]:
    return {
        "user": user,
        "access_token": create_access_token(user.id, email=user.email),
        "token_type": "bearer",
    }

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    *,
    db: Session = Depends(get_db),
    register_in: RegisterRequest,
) -> Any:
    """Create an account and return an access token for it"""
    try:
        user = register_user(db, register_in)
    except EmailAlreadyRegistered:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered",
        )
    return _auth_response(user)

@router.post("/login", response_model=AuthResponse)
def login(
    *,
    db: Session = Depends(get_db),
    login_in: LoginRequest,
) -> Any:
    """Exchange email and password for an access token"""
    user = authenticate_user(db, login_in.email, login_in.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _auth_response(user)

@router.get("/validate-token", response_model=Dict[str, Any])
def validate_token(
    current_user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    """Validate the current user's token and return user information"""
    return {
        "valid": True,
        "user_id": current_user.id,
        "name": current_user.name,
        "email": current_user.email,
        "is_active": current_user.is_active,
    }
