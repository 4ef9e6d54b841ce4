from typing import List, Optional
import uuid
import logging

from sqlalchemy.orm import Session

from app.core.pagination import paginate
from app.modules.posts.comments.models.comment import Comment
from app.modules.posts.comments.schemas.comment import CommentCreate, CommentUpdate
from app.modules.posts.reactions.models.reaction import Reaction
from app.modules.posts.services.post import increment_comments, decrement_comments

logger = logging.getLogger("app")

class CommentParentMismatch(Exception):
    """Raised when a reply names a parent that belongs to another post"""

def get_comment(db: Session, comment_id: str) -> Optional[Comment]:
    """Get comment by ID"""
    return db.query(Comment).filter(Comment.id == comment_id).first()

def get_comments_by_post(db: Session, post_id: str, page: int = 1, limit: int = 10) -> dict:
    """Get top-level comments by post ID, newest first"""
    query = (
        db.query(Comment)
        .filter(Comment.post_id == post_id, Comment.parent_id.is_(None))
        .order_by(Comment.created_at.desc(), Comment.id)
    )
    return paginate(query, page, limit)

def get_comment_replies(db: Session, comment_id: str, page: int = 1, limit: int = 10) -> dict:
    """Get replies to a comment, oldest first"""
    query = (
        db.query(Comment)
        .filter(Comment.parent_id == comment_id)
        .order_by(Comment.created_at.asc(), Comment.id)
    )
    return paginate(query, page, limit)

def create_comment(db: Session, comment_in: CommentCreate, author_id: str, parent: Optional[Comment] = None) -> Comment:
    """Create a new comment and bump the post and parent counters"""
    if parent is not None and parent.post_id != comment_in.post_id:
        raise CommentParentMismatch(parent.id)

    comment = Comment(
        id=str(uuid.uuid4()),
        author_id=author_id,
        content=comment_in.content,
        post_id=comment_in.post_id,
        parent_id=parent.id if parent is not None else None,
    )
    db.add(comment)
    increment_comments(db, comment_in.post_id)
    if parent is not None:
        _bump(db, parent.id, Comment.replies_count, 1)

    db.commit()
    db.refresh(comment)
    logger.info(f"Created comment {comment.id} on post {comment.post_id}")
    return comment

def update_comment(db: Session, comment: Comment, comment_in: CommentUpdate) -> Comment:
    """Update comment"""
    comment.content = comment_in.content
    db.commit()
    db.refresh(comment)
    return comment

def _subtree_ids(db: Session, comment_id: str) -> List[str]:
    """Ids of a comment and every reply beneath it"""
    ids = [comment_id]
    frontier = [comment_id]
    while frontier:
        children = [
            row.id for row in db.query(Comment.id).filter(Comment.parent_id.in_(frontier)).all()
        ]
        ids.extend(children)
        frontier = children
    return ids

def delete_comment(db: Session, comment: Comment) -> int:
    """
    Delete a comment, its replies and every reaction on them.
    Returns the number of comments removed.
    """
    ids = _subtree_ids(db, comment.id)
    post_id = comment.post_id
    parent_id = comment.parent_id

    db.query(Reaction).filter(Reaction.comment_id.in_(ids)).delete(synchronize_session=False)
    # Deepest replies were discovered last
    for comment_id in reversed(ids):
        db.query(Comment).filter(Comment.id == comment_id).delete(synchronize_session=False)

    decrement_comments(db, post_id, len(ids))
    if parent_id:
        _bump(db, parent_id, Comment.replies_count, -1)

    db.commit()
    logger.info(f"Deleted comment {ids[0]} and {len(ids) - 1} replies from post {post_id}")
    return len(ids)

def _bump(db: Session, comment_id: str, column, delta: int) -> None:
    db.query(Comment).filter(Comment.id == comment_id).update(
        {column: column + delta}, synchronize_session=False
    )

# Counter helpers; the caller owns the transaction

def increment_likes(db: Session, comment_id: str) -> None:
    _bump(db, comment_id, Comment.likes_count, 1)

def decrement_likes(db: Session, comment_id: str) -> None:
    _bump(db, comment_id, Comment.likes_count, -1)

def increment_dislikes(db: Session, comment_id: str) -> None:
    _bump(db, comment_id, Comment.dislikes_count, 1)

def decrement_dislikes(db: Session, comment_id: str) -> None:
    _bump(db, comment_id, Comment.dislikes_count, -1)
