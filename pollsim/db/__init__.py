# Database module
from .database import get_db, init_db, AsyncSessionLocal
from .models import Base, Poll

__all__ = [
    "get_db",
    "init_db",
    "AsyncSessionLocal",
    "Base",
    "Poll",
]
