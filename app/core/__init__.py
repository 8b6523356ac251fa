from .config import settings
from .database import engine, SessionLocal, get_db, Base
from .cache import TTLCache, create_cache, invalidate, get_cache

__all__ = ["settings", "engine", "SessionLocal", "get_db", "Base", "TTLCache", "create_cache", "invalidate", "get_cache"]
