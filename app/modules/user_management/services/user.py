from typing import Optional
import uuid
import logging

from sqlalchemy.orm import Session

from app.core.security import get_password_hash
from app.core.storage import r2_storage
from app.modules.user_management.models.user import User
from app.modules.user_management.schemas.user import UserUpdate

logger = logging.getLogger("app")

def get_user(db: Session, user_id: str) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email"""
    return db.query(User).filter(User.email == email.lower()).first()

def create_user(db: Session, name: str, email: str, password: str) -> User:
    """Create a user with a hashed password"""
    user = User(
        id=str(uuid.uuid4()),
        name=name,
        email=email.lower(),
        hashed_password=get_password_hash(password),
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"Created user {user.id}")
    return user

def update_user(db: Session, user: User, user_in: UserUpdate) -> User:
    """Update user"""
    update_data = user_in.model_dump(exclude_unset=True, exclude_none=True)

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)
    return user

def set_profile_photo(db: Session, user: User, key: str, mime_type: str) -> User:
    """Point the user at a newly stored photo and drop the previous blob"""
    previous_key = user.profile_photo_key
    user.profile_photo_key = key
    user.profile_photo_mime_type = mime_type
    db.commit()
    db.refresh(user)

    if previous_key and previous_key != key:
        r2_storage.delete(previous_key)
    return user

def remove_profile_photo(db: Session, user: User) -> User:
    previous_key = user.profile_photo_key
    user.profile_photo_key = None
    user.profile_photo_mime_type = None
    db.commit()
    db.refresh(user)

    r2_storage.delete(previous_key)
    return user
