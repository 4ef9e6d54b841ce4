from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status, Path, Query
from sqlalchemy.orm import Session
import logging

from app.db.session import get_db
from app.deps import get_current_user
from app.modules.user_management.models.user import User
from app.modules.posts.services.post import get_post
from app.modules.posts.comments.models.comment import Comment
from app.modules.posts.comments.schemas.comment import (
    Comment as CommentSchema, CommentCreate, CommentUpdate, CommentPage
)
from app.modules.posts.comments.services.comment import (
    CommentParentMismatch, get_comment, get_comments_by_post, get_comment_replies,
    create_comment, update_comment, delete_comment
)

router = APIRouter()
logger = logging.getLogger("app")

def _validate_post(db: Session, post_id: str) -> None:
    """Validate post exists or raise HTTPException"""
    post = get_post(db, post_id=post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )

def _validate_comment(db: Session, comment_id: str, detail: str = "Comment not found") -> Comment:
    """Validate comment exists and return it or raise HTTPException"""
    comment = get_comment(db, comment_id=comment_id)
    if not comment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail
        )
    return comment

def _validate_ownership(comment: Comment, user_id: str) -> None:
    """Validate user is the author of the comment or raise HTTPException"""
    if comment.author_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only modify your own comments"
        )

@router.post("", response_model=CommentSchema, status_code=status.HTTP_201_CREATED)
def create_new_comment(
    *,
    db: Session = Depends(get_db),
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Create a comment on a post, or a reply when parent_id is given"""
    _validate_post(db, comment_in.post_id)

    parent = None
    if comment_in.parent_id:
        parent = _validate_comment(db, comment_in.parent_id, detail="Parent comment not found")

    try:
        return create_comment(db, comment_in, current_user.id, parent=parent)
    except CommentParentMismatch:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Parent comment does not belong to the specified post"
        )

@router.get("/post/{post_id}", response_model=CommentPage)
def read_comments_by_post_id(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post to get comments for"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> Any:
    """Get top-level comments of a post, newest first"""
    _validate_post(db, post_id)
    return get_comments_by_post(db, post_id=post_id, page=page, limit=limit)

@router.get("/{comment_id}/replies", response_model=CommentPage)
def read_comment_replies_by_id(
    *,
    db: Session = Depends(get_db),
    comment_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> Any:
    """Get replies to a comment, oldest first"""
    _validate_comment(db, comment_id)
    return get_comment_replies(db, comment_id=comment_id, page=page, limit=limit)

@router.get("/{comment_id}", response_model=CommentSchema)
def read_comment_by_id(
    *,
    db: Session = Depends(get_db),
    comment_id: str,
) -> Any:
    """Get comment by ID"""
    return _validate_comment(db, comment_id)

@router.patch("/{comment_id}", response_model=CommentSchema)
def update_comment_by_id(
    *,
    db: Session = Depends(get_db),
    comment_id: str,
    comment_in: CommentUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Update a comment"""
    comment = _validate_comment(db, comment_id)
    _validate_ownership(comment, current_user.id)
    return update_comment(db, comment, comment_in)

@router.delete("/{comment_id}")
def delete_comment_by_id(
    *,
    db: Session = Depends(get_db),
    comment_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Delete a comment together with its replies"""
    comment = _validate_comment(db, comment_id)
    _validate_ownership(comment, current_user.id)

    removed = delete_comment(db, comment)
    return {"message": "Comment deleted successfully", "deleted_count": removed}
