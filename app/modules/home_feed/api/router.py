from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_optional_user
from app.modules.user_management.models.user import User
from app.modules.home_feed.schemas.feed import FeedResponse
from app.modules.home_feed.services.feed import get_feed

router = APIRouter()

@router.get("", response_model=FeedResponse)
def read_feed(
    *,
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: Optional[User] = Depends(get_optional_user),
) -> Any:
    """Get the public feed; a signed-in caller also sees their own reaction per post"""
    return get_feed(db, page, limit, user_id=current_user.id if current_user else None)
