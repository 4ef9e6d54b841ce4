from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel

from app.modules.posts.models.post import PostType
from app.modules.posts.reactions.models.reaction import ReactionType
from app.modules.user_management.schemas.user import UserSummary

class FeedReaction(BaseModel):
    type: ReactionType
    created_at: datetime
    user: UserSummary

class FeedComment(BaseModel):
    id: str
    content: str
    created_at: datetime
    user: UserSummary

class FeedItem(BaseModel):
    """A post with its author, reactions and top-level comments"""
    id: str
    description: str
    type: PostType
    tags: List[str] = []
    current_chapters: int
    created_at: datetime
    has_image: bool
    image_url: Optional[str] = None
    author: UserSummary
    likes_count: int
    dislikes_count: int
    comments_count: int
    reactions: List[FeedReaction] = []
    comments: List[FeedComment] = []
    user_reaction: Optional[ReactionType] = None

class FeedPagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool

class FeedResponse(BaseModel):
    """Feed response model returned to client"""
    items: List[FeedItem]
    pagination: FeedPagination
