from typing import Optional, List
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.pagination import Page
from app.modules.posts.models.post import PostType
from app.modules.user_management.schemas.user import UserSummary

MAX_TAGS = 10
MAX_TAG_LENGTH = 50

def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    """Strip blanks and duplicates while keeping the given order"""
    if tags is None:
        return None
    cleaned: List[str] = []
    for tag in tags:
        tag = tag.strip()
        if len(tag) > MAX_TAG_LENGTH:
            raise ValueError(f"Tags can be at most {MAX_TAG_LENGTH} characters")
        if tag and tag not in cleaned:
            cleaned.append(tag)
    if len(cleaned) > MAX_TAGS:
        raise ValueError(f"A post can have at most {MAX_TAGS} tags")
    return cleaned

class PostCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=2000)
    current_chapters: int = Field(0, ge=0)
    type: PostType
    tags: List[str] = []

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v)

class PostUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    current_chapters: Optional[int] = Field(None, ge=0)
    type: Optional[PostType] = None
    tags: Optional[List[str]] = None

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)

class Post(BaseModel):
    """Post model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    description: str
    current_chapters: int
    type: PostType
    tags: List[str] = []
    has_image: bool = False
    image_mime_type: Optional[str] = None
    likes_count: int = 0
    dislikes_count: int = 0
    comments_count: int = 0
    author_id: str
    author: Optional[UserSummary] = None
    created_at: datetime
    updated_at: datetime

class PostSortField(str, Enum):
    created_at = "created_at"
    likes_count = "likes_count"
    comments_count = "comments_count"

class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"

class PostPage(Page[Post]):
    pass
