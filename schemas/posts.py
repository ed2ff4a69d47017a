from pydantic import BaseModel, validator, model_validator
from typing import List, Optional
from datetime import datetime
from schemas.shared import CamelModel

class Post(CamelModel):
    id: str
    title: str
    content: str
    tags: List[str]
    timestamp: datetime
    upvotes: int = 0
    user_id: str
    user_name: Optional[str] = None  # None when anonymous
    is_anonymous: bool = False
    is_flagged: bool = False
    user_upvoted: bool = False  # this viewer's toggle, not a per-user ledger

    @model_validator(mode='after')
    def check_anonymity(self):
        if self.is_anonymous != (self.user_name is None):
            raise ValueError('Anonymous posts must not carry a user name, and named posts must')
        return self

class PostCreate(CamelModel):
    title: str
    content: str
    tags: List[str]
    is_anonymous: bool = False

    @validator('title')
    def validate_title(cls, v):
        if not v or not v.strip():
            raise ValueError('Please enter a title')
        if len(v) > 100:
            raise ValueError('Title must be at most 100 characters long')
        return v

    @validator('content')
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Please enter content')
        return v

    @validator('tags')
    def validate_tags(cls, v):
        tags = [tag.strip() for tag in v if tag and tag.strip()]
        if not tags:
            raise ValueError('Please select at least one community')
        return tags

class Comment(CamelModel):
    id: str
    post_id: str
    content: str
    user_id: str
    user_name: Optional[str] = None
    is_anonymous: bool = False
    timestamp: datetime

    @model_validator(mode='after')
    def check_anonymity(self):
        if self.is_anonymous != (self.user_name is None):
            raise ValueError('Anonymous comments must not carry a user name, and named comments must')
        return self

class CommentCreate(CamelModel):
    content: str
    is_anonymous: bool = False

    @validator('content')
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Please enter a comment')
        if len(v) > 1000:
            raise ValueError('Comment must be at most 1000 characters long')
        return v

class AdminPostsResponse(BaseModel):
    flagged: List[Post]
    all: List[Post]
