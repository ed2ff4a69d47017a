from fastapi import APIRouter, Depends
from typing import List, Optional
from schemas import Comment, CommentCreate, Post, User
from errors import CampusError, PostNotFound
from services.content import ContentService
from services.feed import is_visible
from utils.route_helpers import get_content_service, get_current_user, get_optional_user, to_http_exception

router = APIRouter(prefix="/comments", tags=["comments"])

def get_visible_post(content: ContentService, post_id: str, viewer: Optional[User]) -> Post:
    post = content.get_post(post_id)
    if post is None or not is_visible(post, viewer):
        raise to_http_exception(PostNotFound())
    return post

@router.get("/post/{post_id}", response_model=List[Comment])
def list_comments(
    post_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    content: ContentService = Depends(get_content_service)
):
    get_visible_post(content, post_id, viewer)
    return content.list_comments(post_id)

@router.post("/post/{post_id}", response_model=Comment, status_code=201)
def add_comment(
    post_id: str,
    comment: CommentCreate,
    current_user: User = Depends(get_current_user),
    content: ContentService = Depends(get_content_service)
):
    get_visible_post(content, post_id, current_user)
    try:
        return content.add_comment(current_user, post_id, comment)
    except CampusError as exc:
        raise to_http_exception(exc)
