import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from app import dependencies as deps
from app.db.stable_map import StoreCapacityExceeded
from app.schemas.post import Post, PostCreate, PostUpdate
from app.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()

HTTP_INSUFFICIENT_STORAGE = 507


@router.post("/posts", response_model=Post)
def create_post(
    payload: PostCreate,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Create a post with a fresh id."""
    try:
        return service.create_post(payload)
    except StoreCapacityExceeded as e:
        logger.error(f"Post storage exhausted: {e}")
        raise HTTPException(
            status_code=HTTP_INSUFFICIENT_STORAGE, detail="Post storage is full"
        )
    except Exception as e:
        logger.error(f"Unexpected error creating post: {e}")
        raise HTTPException(status_code=500, detail="Failed to create post")


@router.get("/posts", response_model=List[Post])
def list_posts(service: PostsService = Depends(deps.get_posts_service)):
    """Get all posts, ordered by id."""
    try:
        return service.list_posts()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{post_id}", response_model=Post)
def get_post(
    post_id: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by id."""
    try:
        post = service.get_post(post_id)
        if not post:
            raise HTTPException(
                status_code=404, detail=f"Post with id={post_id} not found"
            )
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.put("/posts/{post_id}", response_model=Post)
def update_post(
    post_id: str,
    payload: Optional[PostUpdate] = None,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Update a post; a missing body only refreshes updatedAt."""
    try:
        post = service.update_post(post_id, payload or PostUpdate())
        if not post:
            raise HTTPException(
                status_code=400,
                detail=f"Couldn't update post with id={post_id}. Post not found",
            )
        return post
    except HTTPException:
        raise
    except StoreCapacityExceeded as e:
        logger.error(f"Post storage exhausted: {e}")
        raise HTTPException(
            status_code=HTTP_INSUFFICIENT_STORAGE, detail="Post storage is full"
        )
    except Exception as e:
        logger.error(f"Unexpected error updating post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to update post")


@router.delete("/posts/{post_id}", response_model=Post)
def delete_post(
    post_id: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    try:
        post = service.delete_post(post_id)
        if not post:
            raise HTTPException(
                status_code=400,
                detail=f"Couldn't delete post with id={post_id}. Post not found",
            )
        return post
    except HTTPException:
        raise
    except StoreCapacityExceeded as e:
        logger.error(f"Post storage exhausted: {e}")
        raise HTTPException(
            status_code=HTTP_INSUFFICIENT_STORAGE, detail="Post storage is full"
        )
    except Exception as e:
        logger.error(f"Unexpected error deleting post {post_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete post")
