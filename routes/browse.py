from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from schemas import Post, SortDirection, SortMode, User
from services.content import ContentService
from services.feed import build_feed
from utils.route_helpers import get_content_service, get_optional_user

router = APIRouter(prefix="/browse", tags=["browse"])

@router.get("/feed", response_model=List[Post])
def browse_feed(
    search: Optional[str] = Query(None),
    tags: List[str] = Query([]),
    sort: SortMode = Query(SortMode.UPVOTES),
    direction: SortDirection = Query(SortDirection.DESC),
    viewer: Optional[User] = Depends(get_optional_user),
    content: ContentService = Depends(get_content_service)
):
    """Feed filtered by search text and tags; flagged posts are only shown to admins."""
    return build_feed(content.posts, viewer=viewer, search=search, tags=tags, sort_by=sort, direction=direction)
