from collections import defaultdict
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.core.config import settings
from app.core.pagination import paginate
from app.modules.posts.models.post import Post as PostModel
from app.modules.posts.comments.models.comment import Comment
from app.modules.posts.reactions.models.reaction import Reaction, ReactionType
from app.modules.home_feed.schemas.feed import (
    FeedComment, FeedItem, FeedPagination, FeedReaction, FeedResponse
)
from app.modules.user_management.schemas.user import UserSummary

def get_feed(db: Session, page: int = 1, limit: int = 10, user_id: Optional[str] = None) -> FeedResponse:
    """Newest posts with everything a timeline needs, loaded in a fixed number of queries"""
    query = db.query(PostModel).order_by(PostModel.created_at.desc(), PostModel.id)
    result = paginate(query, page, limit)
    posts: List[PostModel] = result.pop("data")
    post_ids = [post.id for post in posts]

    reactions_by_post = _get_reactions(db, post_ids)
    comments_by_post = _get_top_level_comments(db, post_ids)
    own_reactions = _get_own_reactions(db, post_ids, user_id) if user_id else {}

    items = [
        _create_feed_item(
            post,
            reactions_by_post.get(post.id, []),
            comments_by_post.get(post.id, []),
            own_reactions.get(post.id),
        )
        for post in posts
    ]
    return FeedResponse(items=items, pagination=FeedPagination(**result))

def _get_reactions(db: Session, post_ids: List[str]) -> Dict[str, List[FeedReaction]]:
    grouped: Dict[str, List[FeedReaction]] = defaultdict(list)
    if not post_ids:
        return grouped
    reactions = (
        db.query(Reaction)
        .options(selectinload(Reaction.user))
        .filter(Reaction.post_id.in_(post_ids))
        .order_by(Reaction.created_at.desc(), Reaction.id)
        .all()
    )
    for reaction in reactions:
        grouped[reaction.post_id].append(
            FeedReaction(
                type=reaction.type,
                created_at=reaction.created_at,
                user=UserSummary.model_validate(reaction.user),
            )
        )
    return grouped

def _get_top_level_comments(db: Session, post_ids: List[str]) -> Dict[str, List[FeedComment]]:
    grouped: Dict[str, List[FeedComment]] = defaultdict(list)
    if not post_ids:
        return grouped
    comments = (
        db.query(Comment)
        .filter(Comment.post_id.in_(post_ids), Comment.parent_id.is_(None))
        .order_by(Comment.created_at.desc(), Comment.id)
        .all()
    )
    for comment in comments:
        grouped[comment.post_id].append(
            FeedComment(
                id=comment.id,
                content=comment.content,
                created_at=comment.created_at,
                user=UserSummary.model_validate(comment.author),
            )
        )
    return grouped

def _get_own_reactions(db: Session, post_ids: List[str], user_id: str) -> Dict[str, ReactionType]:
    if not post_ids:
        return {}
    rows = (
        db.query(Reaction.post_id, Reaction.type)
        .filter(Reaction.post_id.in_(post_ids), Reaction.user_id == user_id)
        .all()
    )
    return {post_id: reaction_type for post_id, reaction_type in rows}

def _image_url(post: PostModel) -> Optional[str]:
    if not post.has_image:
        return None
    return f"{settings.BASE_URL}{settings.API_V1_STR}/posts/{post.id}/image"

def _create_feed_item(
    post: PostModel,
    reactions: List[FeedReaction],
    comments: List[FeedComment],
    user_reaction: Optional[ReactionType],
) -> FeedItem:
    """Transform a post and its loaded children into a feed item"""
    return FeedItem(
        id=post.id,
        description=post.description,
        type=post.type,
        tags=post.tags,
        current_chapters=post.current_chapters,
        created_at=post.created_at,
        has_image=post.has_image,
        image_url=_image_url(post),
        author=UserSummary.model_validate(post.author),
        likes_count=post.likes_count,
        dislikes_count=post.dislikes_count,
        comments_count=post.comments_count,
        reactions=reactions,
        comments=comments,
        user_reaction=user_reaction,
    )
