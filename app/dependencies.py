from fastapi import Depends

from app.db.base import get_db
from app.db.stable_map import StableOrderedMap
from app.schemas.post import Post
from app.services.posts_service import PostsService
from app.settings import settings


def get_posts_store(db=Depends(get_db)):
    return StableOrderedMap(
        db,
        Post,
        memory_id=settings.POSTS_MEMORY_ID,
        max_entries=settings.STORE_MAX_ENTRIES,
    )


def get_posts_service(store=Depends(get_posts_store)):
    return PostsService(store=store)
