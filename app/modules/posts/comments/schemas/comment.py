from typing import Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field

from app.core.pagination import Page
from app.modules.user_management.schemas.user import UserSummary

class CommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)
    post_id: str
    parent_id: Optional[str] = None

class CommentUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=1000)

class Comment(BaseModel):
    """Comment model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    content: str
    likes_count: int = 0
    dislikes_count: int = 0
    replies_count: int = 0
    author_id: str
    author: Optional[UserSummary] = None
    post_id: str
    parent_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class CommentPage(Page[Comment]):
    pass
