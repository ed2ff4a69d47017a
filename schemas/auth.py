from pydantic import BaseModel, validator
from typing import Optional
from schemas.shared import CamelModel

class User(CamelModel):
    id: str
    email: str
    name: str
    is_admin: bool = False

class CredentialRecord(BaseModel):
    name: str
    password: str  # bcrypt hash

class SignupRequest(BaseModel):
    email: str
    name: Optional[str] = None
    password: str

    @validator('email')
    def normalize_email(cls, v):
        return v.strip()

class LoginRequest(BaseModel):
    email: str
    password: str

    @validator('email')
    def normalize_email(cls, v):
        return v.strip()

class AuthResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: User
