# Models module
from .article import ArticleModel, CategoryEnum
from .stats import ArticleStatsModel, ViewHistoryEntry
from .user import UserModel

__all__ = ["ArticleModel", "CategoryEnum", "ArticleStatsModel", "ViewHistoryEntry", "UserModel"]
