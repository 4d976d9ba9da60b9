"""Article model definitions."""
from enum import Enum
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class CategoryEnum(str, Enum):
    """News categories supported by the news API."""
    GENERAL = "general"
    WORLD = "world"
    BUSINESS = "business"
    NATION = "nation"
    TECHNOLOGY = "technology"
    ENTERTAINMENT = "entertainment"
    SPORTS = "sports"
    SCIENCE = "science"
    HEALTH = "health"


class ArticleModel(BaseModel):
    """Article model for database representation."""
    id: str = Field(alias="_id")
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: str
    image: Optional[str] = None
    published_at: datetime
    source_name: Optional[str] = None
    source_url: Optional[str] = None
    category: CategoryEnum = CategoryEnum.GENERAL
    like_count: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None

    class Config:
        populate_by_name = True
