"""Post creation service."""

import itertools
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import PostCreationError
from ..utils import KeyValueStore, get_logger


logger = get_logger(__name__)


class PostService(ABC):
    """Creates posts from generated content.

    Implementations either raise :class:`PostCreationError` or return a falsy
    id when the post could not be created.
    """

    @abstractmethod
    def create_post(
        self,
        post_type: str,
        post_status: str,
        title: str,
        content: str,
        author: int,
        **extra: Any,
    ) -> int:
        """Create a post and return its id."""
        pass


@dataclass
class Post:
    """A stored post."""

    post_id: int
    post_type: str
    post_status: str
    title: str
    content: str
    author: int
    created_at: int
    meta: Dict[str, Any] = field(default_factory=dict)


class InMemoryPostService(PostService):
    """Post store kept in process memory.

    Every created post is tracked as generated so that a whole run of
    placeholder content can be removed again with :meth:`delete_generated`.
    """

    def __init__(self, start_id: int = 1):
        self.posts: Dict[int, Post] = {}
        self._generated: List[int] = []
        self._ids = itertools.count(start_id)
        self._lock = threading.Lock()

    def create_post(
        self,
        post_type: str,
        post_status: str,
        title: str,
        content: str,
        author: int,
        **extra: Any,
    ) -> int:
        if not title and not content:
            raise PostCreationError("Failed to create post from generated content")

        with self._lock:
            post_id = next(self._ids)
            self.posts[post_id] = Post(
                post_id=post_id,
                post_type=post_type,
                post_status=post_status,
                title=title,
                content=content,
                author=author,
                created_at=int(time.time()),
                meta=dict(extra),
            )
            self._generated.append(post_id)

        logger.debug(f"Created {post_type} {post_id} for author {author}")
        return post_id

    def get_post(self, post_id: int) -> Optional[Post]:
        return self.posts.get(post_id)

    def generated_ids(self) -> List[int]:
        with self._lock:
            return list(self._generated)

    def delete_generated(self) -> int:
        """Delete every generated post.

        Returns:
            Number of posts deleted
        """
        with self._lock:
            deleted = 0
            for post_id in self._generated:
                if self.posts.pop(post_id, None) is not None:
                    deleted += 1
            self._generated = []

        logger.info(f"Deleted {deleted} generated posts")
        return deleted


class StorePostService(PostService):
    """Posts persisted in a :class:`~contentforge.utils.KeyValueStore`.

    Used by the command line tool, where every invocation is a new process.
    Posts are stored under ``<prefix>post_<id>``.
    """

    def __init__(self, store: KeyValueStore, prefix: str = "cforge_"):
        self.store = store
        self.prefix = prefix
        self._lock = threading.Lock()

    def _key(self, post_id: int) -> str:
        return f"{self.prefix}post_{post_id}"

    def create_post(
        self,
        post_type: str,
        post_status: str,
        title: str,
        content: str,
        author: int,
        **extra: Any,
    ) -> int:
        if not title and not content:
            raise PostCreationError("Failed to create post from generated content")

        with self._lock:
            post_id = int(self.store.get(f"{self.prefix}post_last_id") or 0) + 1
            post = Post(
                post_id=post_id,
                post_type=post_type,
                post_status=post_status,
                title=title,
                content=content,
                author=author,
                created_at=int(time.time()),
                meta=dict(extra),
            )
            self.store.set(self._key(post_id), asdict(post))
            self.store.set(f"{self.prefix}post_last_id", post_id)

        logger.debug(f"Stored {post_type} {post_id} for author {author}")
        return post_id

    def get_post(self, post_id: int) -> Optional[Post]:
        data = self.store.get(self._key(post_id))
        return Post(**data) if data else None
