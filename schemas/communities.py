from pydantic import validator
from datetime import datetime
from schemas.shared import CamelModel

class Community(CamelModel):
    id: str
    name: str
    description: str
    created_by: str
    created_at: datetime
    member_count: int = 1

class CommunityCreate(CamelModel):
    name: str
    description: str

    @validator('name')
    def validate_name(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Please enter a community name')
        if len(v) > 50:
            raise ValueError('Community name must be at most 50 characters long')
        return v

    @validator('description')
    def validate_description(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Please enter a community description')
        return v
