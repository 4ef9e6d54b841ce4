from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status, Path, Response
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.deps import get_current_user
from app.modules.user_management.models.user import User
from app.modules.posts.reactions.models.reaction import ReactionTarget
from app.modules.posts.reactions.schemas.reaction import (
    ReactionCreate, ReactionSubmitResult, ReactionCounts, ReactionCountsWithUser, ReactionRemoved
)
from app.modules.posts.reactions.services.reaction import (
    InvalidReactionRequest, ReactionError, ReactionNotFound, TargetNotFound, TargetRef,
    submit_reaction, remove_reaction, get_reaction_counts, get_counts_with_user_reaction
)

router = APIRouter()

def _raise_http(error: ReactionError) -> None:
    """Translate engine errors into HTTP responses"""
    if isinstance(error, InvalidReactionRequest):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, (TargetNotFound, ReactionNotFound)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    raise error

@router.post("", response_model=ReactionSubmitResult)
def submit_post_or_comment_reaction(
    *,
    db: Session = Depends(get_db),
    reaction_in: ReactionCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Like or dislike a post or comment; repeating the same reaction removes it"""
    try:
        result = submit_reaction(db, reaction_in, current_user.id)
    except ReactionError as e:
        _raise_http(e)
    if result.action == "created":
        response.status_code = status.HTTP_201_CREATED
    return result

@router.get("/post/{post_id}", response_model=ReactionCounts)
def read_post_reaction_counts(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
) -> Any:
    """Get like and dislike counts for a post"""
    try:
        return get_reaction_counts(db, TargetRef(ReactionTarget.post, post_id))
    except ReactionError as e:
        _raise_http(e)

@router.get("/comment/{comment_id}", response_model=ReactionCounts)
def read_comment_reaction_counts(
    *,
    db: Session = Depends(get_db),
    comment_id: str = Path(..., description="The ID of the comment"),
) -> Any:
    """Get like and dislike counts for a comment"""
    try:
        return get_reaction_counts(db, TargetRef(ReactionTarget.comment, comment_id))
    except ReactionError as e:
        _raise_http(e)

@router.get("/user/post/{post_id}", response_model=ReactionCountsWithUser, response_model_exclude_none=True)
def read_post_reactions_for_user(
    *,
    db: Session = Depends(get_db),
    post_id: str = Path(..., description="The ID of the post"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get counts for a post together with the current user's reaction"""
    try:
        return get_counts_with_user_reaction(db, TargetRef(ReactionTarget.post, post_id), current_user.id)
    except ReactionError as e:
        _raise_http(e)

@router.get("/user/comment/{comment_id}", response_model=ReactionCountsWithUser, response_model_exclude_none=True)
def read_comment_reactions_for_user(
    *,
    db: Session = Depends(get_db),
    comment_id: str = Path(..., description="The ID of the comment"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """Get counts for a comment together with the current user's reaction"""
    try:
        return get_counts_with_user_reaction(db, TargetRef(ReactionTarget.comment, comment_id), current_user.id)
    except ReactionError as e:
        _raise_http(e)

@router.delete("/{reaction_id}", response_model=ReactionRemoved)
def delete_own_reaction(
    *,
    db: Session = Depends(get_db),
    reaction_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """Delete one of the current user's reactions"""
    try:
        reaction = remove_reaction(db, reaction_id, current_user.id)
    except ReactionError as e:
        _raise_http(e)
    return {"message": "Reaction removed successfully", "reaction": reaction}
