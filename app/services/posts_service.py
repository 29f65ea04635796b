import logging
from datetime import datetime
from typing import Callable, List, Optional

from app.db.stable_map import STORE_LOCK, StableOrderedMap
from app.schemas.post import Post, PostCreate, PostUpdate
from app.utils import new_post_id, utc_now

logger = logging.getLogger(__name__)


class PostsService:
    """
    Each operation holds the process-wide store lock from its first read to
    its last write, so concurrent requests never interleave.
    """

    def __init__(
        self,
        store: StableOrderedMap,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_post_id,
    ):
        self.store = store
        self.clock = clock
        self.id_factory = id_factory

    def create_post(self, payload: PostCreate) -> Post:
        with STORE_LOCK:
            post_id = self.id_factory()
            while self.store.contains_key(post_id):
                logger.warning(f"Generated id {post_id} already taken, retrying")
                post_id = self.id_factory()

            post = Post(id=post_id, createdAt=self.clock(), **payload.model_dump())
            self.store.insert(post.id, post)
        logger.info(f"Created post {post.id}")
        return post

    def list_posts(self) -> List[Post]:
        with STORE_LOCK:
            return self.store.values()

    def get_post(self, post_id: str) -> Optional[Post]:
        with STORE_LOCK:
            return self.store.get(post_id)

    def update_post(self, post_id: str, payload: PostUpdate) -> Optional[Post]:
        with STORE_LOCK:
            post = self.store.get(post_id)
            if not post:
                logger.debug(f"Update skipped, post {post_id} not found")
                return None

            changes = payload.model_dump(exclude_unset=True, exclude_none=True)
            updated = post.model_copy(
                update={**changes, "updatedAt": _next_updated_at(post, self.clock())}
            )
            self.store.insert(post.id, updated)
        logger.info(f"Updated post {post.id}")
        return updated

    def delete_post(self, post_id: str) -> Optional[Post]:
        with STORE_LOCK:
            removed = self.store.remove(post_id)
        if removed:
            logger.info(f"Deleted post {post_id}")
        return removed


def _next_updated_at(post: Post, now: datetime) -> datetime:
    """Refresh timestamp that never moves behind the previous one."""
    previous = post.updatedAt or post.createdAt
    return max(now, previous)
