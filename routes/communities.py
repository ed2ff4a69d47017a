from fastapi import APIRouter, HTTPException, Depends, Query
from typing import List, Optional
from schemas import Community, CommunityCreate, User
from errors import CampusError
from services.content import ContentService
from utils.route_helpers import get_content_service, get_current_user, to_http_exception

router = APIRouter(prefix="/communities", tags=["communities"])

@router.get("/", response_model=List[Community])
def list_communities(
    search: Optional[str] = Query(None),
    content: ContentService = Depends(get_content_service)
):
    """List communities, optionally matching name or description"""
    return content.list_communities(search)

@router.get("/defaults", response_model=List[Community])
def get_default_communities(content: ContentService = Depends(get_content_service)):
    return content.get_default_communities()

@router.post("/", response_model=Community, status_code=201)
def create_community(
    community: CommunityCreate,
    current_user: User = Depends(get_current_user),
    content: ContentService = Depends(get_content_service)
):
    """Create a new community"""
    try:
        created = content.create_community(community.name, community.description, current_user)
    except CampusError as exc:
        raise to_http_exception(exc)
    if created is None:
        raise HTTPException(status_code=409, detail="A community with this name already exists")
    return created
