from .session import SessionService
from .content import ContentService
