from fastapi import APIRouter, HTTPException, Depends
from typing import Optional
from schemas import Post, PostCreate, User
from errors import CampusError
from services.content import ContentService
from services.feed import is_visible
from utils.route_helpers import get_content_service, get_current_user, get_optional_user, to_http_exception

router = APIRouter(prefix="/posts", tags=["posts"])

@router.post("/", response_model=Post, status_code=201)
def create_post(
    post: PostCreate,
    current_user: User = Depends(get_current_user),
    content: ContentService = Depends(get_content_service)
):
    try:
        return content.create_post(current_user, post)
    except CampusError as exc:
        raise to_http_exception(exc)

@router.get("/{post_id}", response_model=Post)
def get_post(
    post_id: str,
    viewer: Optional[User] = Depends(get_optional_user),
    content: ContentService = Depends(get_content_service)
):
    """Get one post; flagged posts are only shown to admins"""
    post = content.get_post(post_id)
    if post is None or not is_visible(post, viewer):
        raise HTTPException(status_code=404, detail="Post not found")
    return post

@router.post("/{post_id}/upvote", response_model=Post)
def upvote_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    content: ContentService = Depends(get_content_service)
):
    try:
        post = content.upvote_post(current_user, post_id)
    except CampusError as exc:
        raise to_http_exception(exc)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post

@router.post("/{post_id}/flag", response_model=Post)
def flag_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    content: ContentService = Depends(get_content_service)
):
    try:
        post = content.flag_post(current_user, post_id)
    except CampusError as exc:
        raise to_http_exception(exc)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post

@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    content: ContentService = Depends(get_content_service)
):
    try:
        deleted = content.delete_post(current_user, post_id)
    except CampusError as exc:
        raise to_http_exception(exc)
    if not deleted:
        raise HTTPException(status_code=404, detail="Post not found")
    return {"msg": "Post deleted successfully."}
