import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.session import Base

class ReactionType(str, enum.Enum):
    like = "like"
    dislike = "dislike"

class ReactionTarget(str, enum.Enum):
    post = "post"
    comment = "comment"

class Reaction(Base):
    __tablename__ = "reactions"
    # NULLs never collide in a unique constraint, so each pair only binds its own target kind
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_reactions_user_post"),
        UniqueConstraint("user_id", "comment_id", name="uq_reactions_user_comment"),
        CheckConstraint(
            "(target = 'post' AND post_id IS NOT NULL AND comment_id IS NULL) OR "
            "(target = 'comment' AND comment_id IS NOT NULL AND post_id IS NULL)",
            name="ck_reactions_single_target",
        ),
    )

    id = Column(String, primary_key=True, index=True)
    type = Column(Enum(ReactionType, name="reaction_type", native_enum=False), nullable=False)
    target = Column(Enum(ReactionTarget, name="reaction_target", native_enum=False), nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=True, index=True)
    comment_id = Column(String, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime, default=func.now())

    user = relationship("User")
