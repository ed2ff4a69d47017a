"""Derived views over the post collection.

Everything here is a pure function of its arguments: no storage access and
no mutation of the posts passed in.
"""
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from schemas.auth import User
from schemas.posts import Post
from schemas.shared import SortDirection, SortMode


def is_visible(post: Post, viewer: Optional[User]) -> bool:
    """Flagged posts are only shown to admins."""
    return not post.is_flagged or bool(viewer and viewer.is_admin)


def matches_search(post: Post, query: Optional[str]) -> bool:
    if not query:
        return True
    query = query.lower()
    return (
        query in post.title.lower()
        or query in post.content.lower()
        or (post.user_name is not None and query in post.user_name.lower())
    )


def matches_tags(post: Post, tags: Optional[Iterable[str]]) -> bool:
    selected = {tag.lower() for tag in tags or []}
    if not selected:
        return True
    return any(tag.lower() in selected for tag in post.tags)


def posted_at(post: Post) -> datetime:
    """Post time as an aware datetime; naive stored times are taken as UTC."""
    if post.timestamp.tzinfo is None:
        return post.timestamp.replace(tzinfo=timezone.utc)
    return post.timestamp


def age_in_hours(post: Post, now: datetime) -> float:
    return (now - posted_at(post)).total_seconds() / 3600


def trending_score(post: Post, now: Optional[datetime] = None) -> float:
    now = now or datetime.now(timezone.utc)
    return post.upvotes / max(age_in_hours(post, now), 1)


def sort_posts(
    posts: Iterable[Post],
    sort_by: SortMode = SortMode.UPVOTES,
    direction: SortDirection = SortDirection.DESC,
    now: Optional[datetime] = None,
) -> List[Post]:
    now = now or datetime.now(timezone.utc)
    if sort_by == SortMode.NEWEST:
        key = posted_at
    elif sort_by == SortMode.TRENDING:
        key = lambda post: trending_score(post, now)
    else:
        key = lambda post: post.upvotes
    return sorted(posts, key=key, reverse=direction == SortDirection.DESC)


def build_feed(
    posts: Iterable[Post],
    viewer: Optional[User] = None,
    search: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    sort_by: SortMode = SortMode.UPVOTES,
    direction: SortDirection = SortDirection.DESC,
    now: Optional[datetime] = None,
) -> List[Post]:
    """Filter by visibility, search text and tags, then sort."""
    tags = list(tags or [])
    visible = [
        post for post in posts
        if is_visible(post, viewer) and matches_search(post, search) and matches_tags(post, tags)
    ]
    return sort_posts(visible, sort_by, direction, now)


def admin_view(posts: Iterable[Post], search: Optional[str] = None) -> Dict[str, List[Post]]:
    matching = [post for post in posts if matches_search(post, search)]
    return {
        "flagged": [post for post in matching if post.is_flagged],
        "all": matching,
    }
