"""
Like/dislike engine shared by posts and comments.

A user holds at most one reaction per target. Submitting the same type again
toggles it off, submitting the other type flips it in place. Every change to a
reaction row moves the target's denormalized likes/dislikes counters in the
same transaction, so the counters always match the live rows.
"""
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple, Union
import uuid
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from app.core.config import settings
from app.modules.posts.comments.models.comment import Comment
from app.modules.posts.comments.services import comment as comment_service
from app.modules.posts.models.post import Post
from app.modules.posts.reactions.models.reaction import Reaction, ReactionTarget, ReactionType
from app.modules.posts.reactions.schemas.reaction import (
    Reaction as ReactionSchema,
    ReactionCounts,
    ReactionCountsWithUser,
    ReactionCreate,
    ReactionSubmitResult,
)
from app.modules.posts.services import post as post_service

logger = logging.getLogger("app")

class ReactionError(Exception):
    """Base class for reaction engine failures"""

class InvalidReactionRequest(ReactionError):
    """The target kind and the supplied ids disagree"""

class TargetNotFound(ReactionError):
    """The referenced post or comment does not exist"""

class ReactionNotFound(ReactionError):
    """No reaction with that id belongs to the caller"""

@dataclass(frozen=True)
class TargetRef:
    kind: ReactionTarget
    id: str

    @property
    def post_id(self) -> Optional[str]:
        return self.id if self.kind == ReactionTarget.post else None

    @property
    def comment_id(self) -> Optional[str]:
        return self.id if self.kind == ReactionTarget.comment else None

    def __str__(self) -> str:
        return f"{self.kind.value} {self.id}"

def resolve_target(reaction_in: ReactionCreate) -> TargetRef:
    """Collapse the (target, post_id, comment_id) triple into one reference"""
    if reaction_in.target == ReactionTarget.post:
        if not reaction_in.post_id:
            raise InvalidReactionRequest("post_id is required when target is post")
        if reaction_in.comment_id:
            raise InvalidReactionRequest("comment_id must not be set when target is post")
        return TargetRef(ReactionTarget.post, reaction_in.post_id)

    if not reaction_in.comment_id:
        raise InvalidReactionRequest("comment_id is required when target is comment")
    if reaction_in.post_id:
        raise InvalidReactionRequest("post_id must not be set when target is comment")
    return TargetRef(ReactionTarget.comment, reaction_in.comment_id)

CounterFn = Callable[[Session, str], None]

# (increment, decrement) per target kind and reaction type
_COUNTERS: Dict[Tuple[ReactionTarget, ReactionType], Tuple[CounterFn, CounterFn]] = {
    (ReactionTarget.post, ReactionType.like): (post_service.increment_likes, post_service.decrement_likes),
    (ReactionTarget.post, ReactionType.dislike): (post_service.increment_dislikes, post_service.decrement_dislikes),
    (ReactionTarget.comment, ReactionType.like): (comment_service.increment_likes, comment_service.decrement_likes),
    (ReactionTarget.comment, ReactionType.dislike): (comment_service.increment_dislikes, comment_service.decrement_dislikes),
}

def _increment(db: Session, target: TargetRef, reaction_type: ReactionType) -> None:
    _COUNTERS[(target.kind, reaction_type)][0](db, target.id)

def _decrement(db: Session, target: TargetRef, reaction_type: ReactionType) -> None:
    _COUNTERS[(target.kind, reaction_type)][1](db, target.id)

def get_target(db: Session, target: TargetRef) -> Union[Post, Comment]:
    """Load the post or comment a reference points at"""
    if target.kind == ReactionTarget.post:
        entity = post_service.get_post(db, post_id=target.id)
    else:
        entity = comment_service.get_comment(db, comment_id=target.id)
    if entity is None:
        raise TargetNotFound(f"{target.kind.value.capitalize()} not found")
    return entity

def get_user_reaction(db: Session, user_id: str, target: TargetRef, lock: bool = False) -> Optional[Reaction]:
    """The caller's reaction on a target, if any"""
    query = db.query(Reaction).filter(
        Reaction.user_id == user_id,
        Reaction.target == target.kind,
    )
    if target.kind == ReactionTarget.post:
        query = query.filter(Reaction.post_id == target.id)
    else:
        query = query.filter(Reaction.comment_id == target.id)
    if lock:
        query = query.with_for_update()
    return query.first()

def _insert_reaction(db: Session, user_id: str, target: TargetRef, reaction_type: ReactionType) -> Reaction:
    reaction = Reaction(
        id=str(uuid.uuid4()),
        type=reaction_type,
        target=target.kind,
        user_id=user_id,
        post_id=target.post_id,
        comment_id=target.comment_id,
    )
    db.add(reaction)
    # Surface a uniqueness conflict before any counter moves
    db.flush()
    return reaction

_UNIQUE_CONSTRAINTS = ("uq_reactions_user_post", "uq_reactions_user_comment")

def _is_duplicate_reaction(error: BaseException) -> bool:
    """True when the insert clashed with the one-reaction-per-target constraints"""
    if not isinstance(error, IntegrityError):
        return False
    message = str(error.orig)
    if any(name in message for name in _UNIQUE_CONSTRAINTS):
        return True
    # SQLite names the columns instead of the constraint
    return "UNIQUE constraint failed: reactions.user_id" in message

@retry(
    retry=retry_if_exception(_is_duplicate_reaction),
    stop=stop_after_attempt(settings.REACTION_CONFLICT_RETRIES),
    wait=wait_exponential(multiplier=0.05, max=1),
    before_sleep=before_sleep_log(logger, logging.WARNING),
    reraise=True,
)
def submit_reaction(db: Session, reaction_in: ReactionCreate, user_id: str) -> ReactionSubmitResult:
    """
    Create, flip or toggle off the caller's reaction on a post or comment.

    Resubmitting the current type removes the reaction and reports the deleted
    row with action "removed". A concurrent first reaction by the same user
    trips the uniqueness constraint and the whole submission is retried.
    """
    target = resolve_target(reaction_in)
    get_target(db, target)

    try:
        existing = get_user_reaction(db, user_id, target, lock=True)

        if existing is None:
            reaction = _insert_reaction(db, user_id, target, reaction_in.type)
            _increment(db, target, reaction_in.type)
            db.commit()
            db.refresh(reaction)
            logger.info(f"User {user_id} reacted {reaction_in.type.value} on {target}")
            return ReactionSubmitResult(action="created", reaction=ReactionSchema.model_validate(reaction))

        if existing.type == reaction_in.type:
            snapshot = ReactionSchema.model_validate(existing)
            _decrement(db, target, existing.type)
            db.delete(existing)
            db.commit()
            logger.info(f"User {user_id} toggled off {reaction_in.type.value} on {target}")
            return ReactionSubmitResult(action="removed", reaction=snapshot)

        previous_type = existing.type
        _decrement(db, target, previous_type)
        existing.type = reaction_in.type
        _increment(db, target, reaction_in.type)
        db.commit()
        db.refresh(existing)
        logger.info(
            f"User {user_id} flipped {previous_type.value} to {reaction_in.type.value} on {target}"
        )
        return ReactionSubmitResult(action="updated", reaction=ReactionSchema.model_validate(existing))
    except Exception:
        db.rollback()
        raise

def remove_reaction(db: Session, reaction_id: str, user_id: str) -> ReactionSchema:
    """Delete one of the caller's reactions by id; someone else's is reported as missing"""
    reaction = (
        db.query(Reaction)
        .filter(Reaction.id == reaction_id, Reaction.user_id == user_id)
        .with_for_update()
        .first()
    )
    if reaction is None:
        raise ReactionNotFound("Reaction not found")

    target = TargetRef(reaction.target, reaction.post_id or reaction.comment_id)
    snapshot = ReactionSchema.model_validate(reaction)
    try:
        _decrement(db, target, reaction.type)
        db.delete(reaction)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"User {user_id} removed reaction {reaction_id} on {target}")
    return snapshot

def get_reaction_counts(db: Session, target: TargetRef) -> ReactionCounts:
    """Likes and dislikes, read from the target's counters"""
    entity = get_target(db, target)
    return ReactionCounts(likes=entity.likes_count, dislikes=entity.dislikes_count)

def get_counts_with_user_reaction(db: Session, target: TargetRef, user_id: str) -> ReactionCountsWithUser:
    counts = get_reaction_counts(db, target)
    reaction = get_user_reaction(db, user_id, target)
    return ReactionCountsWithUser(
        likes=counts.likes,
        dislikes=counts.dislikes,
        user_reaction=reaction.type if reaction else None,
    )
