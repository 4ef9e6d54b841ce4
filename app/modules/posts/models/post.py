import enum

from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.db.session import Base

class PostType(str, enum.Enum):
    anime = "anime"
    manga = "manga"
    manhwa = "manhwa"

class Post(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True, index=True)
    description = Column(Text, nullable=False)
    image_key = Column(String, nullable=True)
    image_mime_type = Column(String, nullable=True)
    current_chapters = Column(Integer, nullable=False, default=0)
    type = Column(Enum(PostType, name="post_type"), nullable=False, default=PostType.manga)
    likes_count = Column(Integer, nullable=False, default=0)
    dislikes_count = Column(Integer, nullable=False, default=0)
    comments_count = Column(Integer, nullable=False, default=0)
    author_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=func.now())
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    author = relationship("User", lazy="joined")
    tag_links = relationship(
        "PostTag",
        cascade="all, delete-orphan",
        order_by="PostTag.position",
        lazy="selectin",
    )

    @property
    def tags(self):
        return [link.name for link in self.tag_links]

    @property
    def has_image(self) -> bool:
        return self.image_key is not None

class PostTag(Base):
    __tablename__ = "post_tags"
    __table_args__ = (UniqueConstraint("post_id", "name", name="uq_post_tags_post_name"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(50), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
