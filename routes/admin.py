from fastapi import APIRouter, Depends, Query
from typing import Optional
from schemas import AdminPostsResponse, User
from services.content import ContentService
from services.feed import admin_view
from utils.route_helpers import get_content_service, require_admin

router = APIRouter(prefix="/admin", tags=["admin"])

@router.get("/posts", response_model=AdminPostsResponse)
def moderation_posts(
    search: Optional[str] = Query(None),
    current_user: User = Depends(require_admin),
    content: ContentService = Depends(get_content_service)
):
    """Admin: flagged posts and all posts, both narrowed by the search text."""
    return admin_view(content.posts, search)
