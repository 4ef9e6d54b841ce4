from typing import List, Optional
import uuid
import logging

from sqlalchemy.orm import Session
from sqlalchemy import or_, select

from app.core.pagination import paginate
from app.core.storage import r2_storage
from app.modules.posts.models.post import Post, PostTag, PostType
from app.modules.posts.schemas.post import PostCreate, PostUpdate, PostSortField, SortOrder
from app.modules.posts.comments.models.comment import Comment
from app.modules.posts.reactions.models.reaction import Reaction

logger = logging.getLogger("app")

def get_post(db: Session, post_id: str) -> Optional[Post]:
    """Get post by ID"""
    return db.query(Post).filter(Post.id == post_id).first()

def get_posts(
    db: Session,
    *,
    page: int = 1,
    limit: int = 10,
    type: Optional[PostType] = None,
    tags: Optional[List[str]] = None,
    search: Optional[str] = None,
    author_id: Optional[str] = None,
    sort_by: PostSortField = PostSortField.created_at,
    sort_order: SortOrder = SortOrder.desc,
) -> dict:
    """Filtered, sorted, paginated list of posts"""
    query = db.query(Post)

    if type:
        query = query.filter(Post.type == type)
    if tags:
        query = query.filter(Post.tag_links.any(PostTag.name.in_(tags)))
    if search:
        pattern = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        query = query.filter(Post.description.ilike(f"%{pattern}%", escape="\\"))
    if author_id:
        query = query.filter(Post.author_id == author_id)

    sort_column = getattr(Post, sort_by.value)
    primary = sort_column.asc() if sort_order == SortOrder.asc else sort_column.desc()
    query = query.order_by(primary, Post.id)

    return paginate(query, page, limit)

def _tag_links(tags: List[str]) -> List[PostTag]:
    return [PostTag(name=name, position=position) for position, name in enumerate(tags)]

def create_post(
    db: Session,
    post_in: PostCreate,
    author_id: str,
    image_key: Optional[str] = None,
    image_mime_type: Optional[str] = None,
) -> Post:
    """Create new post"""
    post = Post(
        id=str(uuid.uuid4()),
        author_id=author_id,
        description=post_in.description,
        current_chapters=post_in.current_chapters,
        type=post_in.type,
        image_key=image_key,
        image_mime_type=image_mime_type,
        tag_links=_tag_links(post_in.tags),
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    logger.info(f"Created post {post.id} for author {author_id}")
    return post

def update_post(db: Session, post: Post, post_in: PostUpdate) -> Post:
    """Update post"""
    update_data = post_in.model_dump(exclude_unset=True, exclude_none=True)

    tags = update_data.pop("tags", None)
    if tags is not None:
        # Flush the orphan deletes before the replacement rows hit the unique constraint
        post.tag_links = []
        db.flush()
        post.tag_links = _tag_links(tags)

    for field, value in update_data.items():
        setattr(post, field, value)

    db.commit()
    db.refresh(post)
    return post

def replace_post_image(db: Session, post: Post, key: str, mime_type: str) -> Post:
    previous_key = post.image_key
    post.image_key = key
    post.image_mime_type = mime_type
    db.commit()
    db.refresh(post)

    if previous_key and previous_key != key:
        r2_storage.delete(previous_key)
    return post

def remove_post_image(db: Session, post: Post) -> Post:
    previous_key = post.image_key
    post.image_key = None
    post.image_mime_type = None
    db.commit()
    db.refresh(post)

    r2_storage.delete(previous_key)
    return post

def delete_post(db: Session, post: Post) -> None:
    """
    Delete post and everything hanging off it: reactions on the post and on
    its comments, the comments themselves, tags and the stored image.
    """
    logger.info(f"Deleting post with ID: {post.id}")
    comment_ids = select(Comment.id).where(Comment.post_id == post.id)

    db.query(Reaction).filter(
        or_(Reaction.post_id == post.id, Reaction.comment_id.in_(comment_ids))
    ).delete(synchronize_session=False)
    # Replies first so the self-referencing key never dangles
    db.query(Comment).filter(
        Comment.post_id == post.id, Comment.parent_id.isnot(None)
    ).delete(synchronize_session=False)
    db.query(Comment).filter(Comment.post_id == post.id).delete(synchronize_session=False)

    image_key = post.image_key
    db.delete(post)
    db.commit()

    r2_storage.delete(image_key)

def _bump(db: Session, post_id: str, column, delta: int) -> None:
    # Single UPDATE statement so concurrent deltas never overwrite each other
    db.query(Post).filter(Post.id == post_id).update(
        {column: column + delta}, synchronize_session=False
    )

# Counter helpers; the caller owns the transaction

def increment_likes(db: Session, post_id: str) -> None:
    _bump(db, post_id, Post.likes_count, 1)

def decrement_likes(db: Session, post_id: str) -> None:
    _bump(db, post_id, Post.likes_count, -1)

def increment_dislikes(db: Session, post_id: str) -> None:
    _bump(db, post_id, Post.dislikes_count, 1)

def decrement_dislikes(db: Session, post_id: str) -> None:
    _bump(db, post_id, Post.dislikes_count, -1)

def increment_comments(db: Session, post_id: str, amount: int = 1) -> None:
    _bump(db, post_id, Post.comments_count, amount)

def decrement_comments(db: Session, post_id: str, amount: int = 1) -> None:
    _bump(db, post_id, Post.comments_count, -amount)
