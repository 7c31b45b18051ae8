"""Infrastructure repositories"""

from .postgres_user_repo import PostgresUserRepository
from .in_memory_user_repo import InMemoryUserRepository

__all__ = [
    "PostgresUserRepository",
    "InMemoryUserRepository",
]
