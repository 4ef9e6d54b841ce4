from typing import Any, List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File, Form, Query, Response
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.storage import r2_storage
from app.db.session import get_db
from app.deps import get_current_user
from app.modules.user_management.models.user import User
from app.modules.posts.models.post import Post, PostType
from app.modules.posts.schemas.post import (
    Post as PostSchema, PostCreate, PostUpdate, PostPage, PostSortField, SortOrder
)
from app.modules.posts.services.post import (
    get_post, get_posts, create_post, update_post, delete_post, replace_post_image, remove_post_image
)

logger = logging.getLogger("app")

router = APIRouter()

def _validate_post(db: Session, post_id: str) -> Post:
    """Validate post exists and return it or raise HTTPException"""
    post = get_post(db, post_id=post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found",
        )
    return post

def _validate_ownership(post: Post, user_id: str) -> None:
    """Validate user is the author of the post or raise HTTPException"""
    if post.author_id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only modify your own posts",
        )

@router.post("", response_model=PostSchema, status_code=status.HTTP_201_CREATED)
async def create_new_post(
    *,
    db: Session = Depends(get_db),
    description: str = Form(...),
    type: PostType = Form(...),
    current_chapters: int = Form(0),
    tags: List[str] = Form([]),
    image: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Create new post with an optional image.
    """
    try:
        post_in = PostCreate(
            description=description,
            type=type,
            current_chapters=current_chapters,
            tags=tags,
        )
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    image_key, image_mime_type = None, None
    if image is not None and image.filename:
        image_key, image_mime_type = await r2_storage.upload_image(image, "post_images")

    return create_post(db, post_in, current_user.id, image_key, image_mime_type)

@router.get("", response_model=PostPage)
def read_posts(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    type: Optional[PostType] = None,
    tags: Optional[List[str]] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    author_id: Optional[str] = None,
    sort_by: PostSortField = PostSortField.created_at,
    sort_order: SortOrder = SortOrder.desc,
) -> Any:
    """
    Retrieve posts with filtering, sorting and pagination.
    """
    return get_posts(
        db,
        page=page,
        limit=limit,
        type=type,
        tags=tags,
        search=search,
        author_id=author_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )

@router.get("/my-posts", response_model=PostPage)
def read_my_posts(
    db: Session = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Retrieve the current user's posts, newest first.
    """
    return get_posts(db, page=page, limit=limit, author_id=current_user.id)

@router.get("/{post_id}", response_model=PostSchema)
def read_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
) -> Any:
    """
    Get post by ID.
    """
    return _validate_post(db, post_id)

@router.get("/{post_id}/image")
def read_post_image(
    *,
    db: Session = Depends(get_db),
    post_id: str,
) -> Response:
    """
    Get the raw image attached to a post.
    """
    post = _validate_post(db, post_id)
    content = r2_storage.get(post.image_key) if post.image_key else None
    if content is None:
        if post.image_key:
            logger.warning(f"Image {post.image_key} for post {post_id} is missing from storage")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post has no image",
        )
    return Response(
        content=content,
        media_type=post.image_mime_type,
        headers={"Cache-Control": "public, max-age=31536000"},
    )

@router.patch("/{post_id}", response_model=PostSchema)
def update_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    post_in: PostUpdate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Update a post.
    """
    post = _validate_post(db, post_id)
    _validate_ownership(post, current_user.id)
    return update_post(db, post, post_in)

@router.patch("/{post_id}/image", response_model=PostSchema)
async def update_post_image(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    image: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Replace the image attached to a post.
    """
    post = _validate_post(db, post_id)
    _validate_ownership(post, current_user.id)

    image_key, image_mime_type = await r2_storage.upload_image(image, "post_images")
    return replace_post_image(db, post, image_key, image_mime_type)

@router.delete("/{post_id}/image", response_model=PostSchema)
def delete_post_image(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Remove the image attached to a post.
    """
    post = _validate_post(db, post_id)
    _validate_ownership(post, current_user.id)
    return remove_post_image(db, post)

@router.delete("/{post_id}")
def delete_post_by_id(
    *,
    db: Session = Depends(get_db),
    post_id: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Delete a post and all associated data.
    This is a cascading delete operation that will remove:
    1. All reactions on this post and on its comments
    2. All comments on this post
    3. The post itself and its image
    """
    post = _validate_post(db, post_id)
    _validate_ownership(post, current_user.id)

    delete_post(db, post)
    return {"message": "Post deleted successfully"}
