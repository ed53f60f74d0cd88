"""
Module-level singletons shared by the API and the services:
- storage: DBStorage (engine + scoped_session)
- token_cache: TokenCache (redis)
"""
from os import getenv

from dotenv import load_dotenv

from models.db_storage import DBStorage
from models.token_cache import TokenCache

load_dotenv()

storage = DBStorage()
storage.reload()

token_cache = TokenCache.from_url(getenv("REDIS_URL", "redis://localhost:6379/0"))
