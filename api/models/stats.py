"""Article stats model definitions."""
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class ViewHistoryEntry(BaseModel):
    """One counted view."""
    count: int = 1
    timestamp: datetime


class ArticleStatsModel(BaseModel):
    """
    Engagement record for one article.

    ``likes`` mirrors ``Article.like_count`` and can be stale for up to one
    like-sync interval. ``trending_score`` is only ever written from
    ``calculate_trending_score``.
    """
    id: str = Field(alias="_id")
    article_id: str
    views: int = Field(default=0, ge=0)
    likes: int = Field(default=0, ge=0)
    last_viewed: Optional[datetime] = None
    trending_score: float = 0.0
    view_history: List[ViewHistoryEntry] = Field(default_factory=list)
    unique_visitors: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True
