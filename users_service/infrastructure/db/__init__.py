"""Database infrastructure"""

from .pool import close_pool, get_pool, init_pool, reset_pool

__all__ = ["init_pool", "get_pool", "close_pool", "reset_pool"]
