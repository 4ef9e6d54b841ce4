from typing import Any
import logging

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Response
from sqlalchemy.orm import Session

from app.core.storage import r2_storage
from app.db.session import get_db
from app.deps import get_current_user
from app.modules.user_management.models.user import User
from app.modules.user_management.schemas.user import User as UserSchema, PublicUser, UserUpdate
from app.modules.user_management.services.user import (
    get_user, update_user, set_profile_photo, remove_profile_photo
)

router = APIRouter()
logger = logging.getLogger("app")

def _validate_user(db: Session, user_id: str) -> User:
    """Validate user exists and return user object or raise HTTPException"""
    user = get_user(db, user_id=user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user

def _photo_response(user: User) -> Response:
    content = r2_storage.get(user.profile_photo_key) if user.profile_photo_key else None
    if content is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile photo not found",
        )
    return Response(
        content=content,
        media_type=user.profile_photo_mime_type,
        headers={"Cache-Control": "public, max-age=86400"},
    )

@router.get("/profile", response_model=UserSchema)
def read_profile(
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get current user"""
    return current_user

@router.patch("/profile", response_model=UserSchema)
def update_profile(
    *,
    db: Session = Depends(get_db),
    user_in: UserUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Update current user"""
    return update_user(db, current_user, user_in)

@router.post("/profile/photo", response_model=UserSchema)
async def upload_profile_photo(
    *,
    db: Session = Depends(get_db),
    photo: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Upload or replace the current user's profile photo"""
    key, mime_type = await r2_storage.upload_image(photo, "profile_photos")
    logger.info(f"User {current_user.id} uploaded a profile photo")
    return set_profile_photo(db, current_user, key, mime_type)

@router.get("/profile/photo")
def read_profile_photo(
    current_user: User = Depends(get_current_user),
) -> Response:
    """Get the current user's profile photo"""
    return _photo_response(current_user)

@router.delete("/profile/photo", response_model=UserSchema)
def delete_profile_photo(
    *,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Remove the current user's profile photo"""
    if not current_user.profile_photo_key:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile photo not found",
        )
    return remove_profile_photo(db, current_user)

@router.get("/{user_id}/photo")
def read_user_photo(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Response:
    """Get another user's profile photo"""
    return _photo_response(_validate_user(db, user_id))

@router.get("/{user_id}", response_model=PublicUser)
def read_user_by_id(
    *,
    db: Session = Depends(get_db),
    user_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get a specific user by id"""
    return _validate_user(db, user_id)
