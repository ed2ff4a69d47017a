import json
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set

from pydantic import ValidationError as ModelValidationError

from errors import NotAuthorized, PostNotFound, StaleRevision, StorageWriteFailure, ValidationError
from schemas.auth import User
from schemas.communities import Community
from schemas.posts import Comment, CommentCreate, Post, PostCreate
from seed_data import default_communities, initial_posts
from storage import KeyValueStore

logger = logging.getLogger(__name__)

POSTS_KEY = "posts"
COMMUNITIES_KEY = "communities"
COMMENTS_KEY = "comments"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id(prefix: str, taken: Set[str]) -> str:
    """Timestamp based id, bumped until it is unused."""
    stamp = int(time.time() * 1000)
    while f"{prefix}_{stamp}" in taken:
        stamp += 1
    return f"{prefix}_{stamp}"


class ContentService:
    """Owns posts, communities and comments and keeps them in durable storage.

    Mutations build the new collection, write it, and only then replace the
    in-memory copy, so a failed write never leaves memory ahead of storage.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock
        self.posts: List[Post] = []
        self.communities: List[Community] = []
        self.comments: List[Comment] = []
        self._revisions: Dict[str, int] = {}
        self._lock = threading.RLock()
        self.reload()

    # Loading

    def reload(self):
        with self._lock:
            self.posts = self._load_collection(POSTS_KEY, Post, lambda: initial_posts(self.clock()))
            self.communities = self._load_collection(COMMUNITIES_KEY, Community, lambda: default_communities(self.clock()))
            self.comments = self._without_orphans(self._load_collection(COMMENTS_KEY, Comment, list))

    def _without_orphans(self, comments: List[Comment]) -> List[Comment]:
        post_ids = {post.id for post in self.posts}
        return [c for c in comments if c.post_id in post_ids]

    def _load_collection(self, key, model, seed):
        entry = self.store.get_entry(key)
        if entry is not None:
            try:
                items = [model.model_validate(item) for item in json.loads(entry.value)]
                self._revisions[key] = entry.revision
                return items
            except (json.JSONDecodeError, TypeError, ModelValidationError) as exc:
                logger.warning("Stored %s are malformed, reseeding: %s", key, exc)
            self._revisions[key] = entry.revision
        else:
            self._revisions[key] = 0
        items = seed()
        self._write(key, items)
        return items

    def _write(self, key: str, items: list):
        payload = [item.to_record() for item in items]
        try:
            self._revisions[key] = self.store.set_item(key, payload, expected_revision=self._revisions.get(key, 0))
        except StaleRevision as exc:
            logger.warning("Conflicting write on %s, reloading from storage: %s", key, exc)
            self._refresh(key)
            raise
        except StorageWriteFailure as exc:
            logger.error("Failed to persist %s: %s", key, exc)
            raise

    def _refresh(self, key: str):
        if key == POSTS_KEY:
            self.posts = self._load_collection(POSTS_KEY, Post, lambda: initial_posts(self.clock()))
        elif key == COMMUNITIES_KEY:
            self.communities = self._load_collection(COMMUNITIES_KEY, Community, lambda: default_communities(self.clock()))
        elif key == COMMENTS_KEY:
            self.comments = self._without_orphans(self._load_collection(COMMENTS_KEY, Comment, list))

    def _require_actor(self, actor: Optional[User]) -> User:
        if actor is None:
            raise NotAuthorized("You must be logged in to do that")
        return actor

    # Posts

    def get_post(self, post_id: str) -> Optional[Post]:
        return next((post for post in self.posts if post.id == post_id), None)

    def create_post(self, actor: User, data: PostCreate) -> Post:
        actor = self._require_actor(actor)
        with self._lock:
            post = Post(
                id=new_id("post", {p.id for p in self.posts}),
                title=data.title,
                content=data.content,
                tags=list(data.tags),
                timestamp=self.clock(),
                upvotes=0,
                user_id=actor.id,
                user_name=None if data.is_anonymous else actor.name,
                is_anonymous=data.is_anonymous,
                is_flagged=False,
            )
            posts = [post] + self.posts
            self._write(POSTS_KEY, posts)
            self.posts = posts
        logger.info("Post %s created by %s", post.id, actor.email)
        return post

    def _replace_post(self, post_id: str, change: Callable[[Post], Post]) -> Optional[Post]:
        with self._lock:
            current = self.get_post(post_id)
            if current is None:
                return None
            updated = change(current)
            posts = [updated if p.id == post_id else p for p in self.posts]
            self._write(POSTS_KEY, posts)
            self.posts = posts
            return updated

    def upvote_post(self, actor: User, post_id: str) -> Optional[Post]:
        self._require_actor(actor)

        def toggle(post: Post) -> Post:
            if post.user_upvoted:
                return post.model_copy(update={"upvotes": post.upvotes - 1, "user_upvoted": False})
            return post.model_copy(update={"upvotes": post.upvotes + 1, "user_upvoted": True})

        return self._replace_post(post_id, toggle)

    def flag_post(self, actor: User, post_id: str) -> Optional[Post]:
        self._require_actor(actor)
        with self._lock:
            post = self.get_post(post_id)
            if post is None or post.is_flagged:
                return post
            flagged = self._replace_post(post_id, lambda p: p.model_copy(update={"is_flagged": True}))
        logger.info("Post %s flagged by %s", post_id, actor.email)
        return flagged

    def delete_post(self, actor: User, post_id: str) -> bool:
        actor = self._require_actor(actor)
        if not actor.is_admin:
            raise NotAuthorized("Only admins can delete posts")
        with self._lock:
            if self.get_post(post_id) is None:
                return False
            posts = [p for p in self.posts if p.id != post_id]
            self._write(POSTS_KEY, posts)
            self.posts = posts
            comments = [c for c in self.comments if c.post_id != post_id]
            if len(comments) != len(self.comments):
                # The post is already gone; comments left in storage are dropped at the next load.
                try:
                    self._write(COMMENTS_KEY, comments)
                except StorageWriteFailure:
                    logger.warning("Comments of deleted post %s are left in storage", post_id)
                self.comments = self._without_orphans(self.comments)
        logger.info("Post %s deleted by %s", post_id, actor.email)
        return True

    # Communities

    def get_default_communities(self) -> List[Community]:
        return default_communities(self.clock())

    def list_communities(self, search: Optional[str] = None) -> List[Community]:
        if not search:
            return list(self.communities)
        query = search.lower()
        return [c for c in self.communities if query in c.name.lower() or query in c.description.lower()]

    def create_community(self, name: str, description: str, creator: User) -> Optional[Community]:
        creator = self._require_actor(creator)
        name = (name or "").strip()
        description = (description or "").strip()
        if not name:
            raise ValidationError("Please enter a community name")
        if not description:
            raise ValidationError("Please enter a community description")
        with self._lock:
            if any(c.name.lower() == name.lower() for c in self.communities):
                logger.info("Community name %r is already taken", name)
                return None
            community = Community(
                id=new_id("community", {c.id for c in self.communities}),
                name=name,
                description=description,
                created_by=creator.id,
                created_at=self.clock(),
                member_count=1,  # the creator
            )
            communities = self.communities + [community]
            self._write(COMMUNITIES_KEY, communities)
            self.communities = communities
        logger.info("Community %s created by %s", name, creator.email)
        return community

    # Comments

    def list_comments(self, post_id: str) -> List[Comment]:
        return sorted((c for c in self.comments if c.post_id == post_id), key=lambda c: c.timestamp)

    def add_comment(self, actor: User, post_id: str, data: CommentCreate) -> Comment:
        actor = self._require_actor(actor)
        with self._lock:
            post = self.get_post(post_id)
            if post is None:
                raise PostNotFound()
            if post.is_flagged:
                raise ValidationError("Comments are closed on flagged posts")
            comment = Comment(
                id=new_id("comment", {c.id for c in self.comments}),
                post_id=post_id,
                content=data.content,
                user_id=actor.id,
                user_name=None if data.is_anonymous else actor.name,
                is_anonymous=data.is_anonymous,
                timestamp=self.clock(),
            )
            comments = self.comments + [comment]
            self._write(COMMENTS_KEY, comments)
            self.comments = comments
        return comment
