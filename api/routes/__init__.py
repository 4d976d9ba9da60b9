# Routes module
from .articles import router as articles_router
from .stats import router as stats_router
from .users import router as users_router

__all__ = ["articles_router", "stats_router", "users_router"]
