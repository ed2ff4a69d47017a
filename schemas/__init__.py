# Schemas package
from .shared import CamelModel, SortMode, SortDirection
from .auth import User, CredentialRecord, SignupRequest, LoginRequest, AuthResponse
from .posts import Post, PostCreate, Comment, CommentCreate, AdminPostsResponse
from .communities import Community, CommunityCreate
