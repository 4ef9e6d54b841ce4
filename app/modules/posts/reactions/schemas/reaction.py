from typing import Literal, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from app.modules.posts.reactions.models.reaction import ReactionTarget, ReactionType

class ReactionCreate(BaseModel):
    """Submission body; which id must be present depends on target"""
    type: ReactionType
    target: ReactionTarget
    post_id: Optional[str] = None
    comment_id: Optional[str] = None

class Reaction(BaseModel):
    """Reaction model returned to client"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: ReactionType
    target: ReactionTarget
    user_id: str
    post_id: Optional[str] = None
    comment_id: Optional[str] = None
    created_at: datetime

class ReactionSubmitResult(BaseModel):
    """Outcome of a submission: created, flipped in place, or toggled off"""
    action: Literal["created", "updated", "removed"]
    reaction: Reaction

class ReactionCounts(BaseModel):
    likes: int
    dislikes: int

class ReactionCountsWithUser(ReactionCounts):
    user_reaction: Optional[ReactionType] = None

class ReactionRemoved(BaseModel):
    message: str
    reaction: Reaction
