"""Response schemas for API endpoints."""
from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from api.models import ArticleModel, CategoryEnum


class ArticleData(BaseModel):
    """Schema for a stored article."""
    id: str = Field(..., description="Unique article identifier")
    title: str
    description: Optional[str] = None
    content: Optional[str] = None
    url: str
    image: Optional[str] = None
    published_at: datetime
    source_name: Optional[str] = None
    source_url: Optional[str] = None
    category: CategoryEnum
    like_count: int = 0
    created_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, doc: Dict[str, Any], **extra: Any) -> "ArticleData":
        """Build from a Mongo document, with optional extra fields."""
        return cls(**ArticleModel.model_validate(doc).model_dump(), **extra)


class TrendingArticle(ArticleData):
    """Article annotated with its engagement counters."""
    views: int = 0
    trending_score: float = 0.0


class RecommendedArticle(ArticleData):
    """Article annotated with why it was recommended."""
    is_liked: bool
    is_from_followed_source: bool
    is_related: bool


class StatsSummary(BaseModel):
    """Counters returned after a view."""
    views: int
    likes: int
    trending_score: float


class ArticleStatsData(StatsSummary):
    """Counters of one article."""
    last_viewed: Optional[datetime] = None


class ViewResponse(BaseModel):
    success: bool = True
    message: str = "Article view recorded"
    stats: StatsSummary


class ArticleStatsResponse(BaseModel):
    success: bool = True
    stats: ArticleStatsData


class TrendingResponse(BaseModel):
    success: bool = True
    articles: List[TrendingArticle] = Field(default_factory=list)


class SyncLikesResponse(BaseModel):
    success: bool = True
    message: str = "Article likes synchronized"
    count: int = Field(..., description="Number of articles processed")


class RecommendationCounts(BaseModel):
    liked: int
    followed_sources: int
    related: int


class RecommendationResponse(BaseModel):
    success: bool = True
    count: int
    data: List[RecommendedArticle] = Field(default_factory=list)
    categories: RecommendationCounts


class ArticleListResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    count: int
    data: List[ArticleData] = Field(default_factory=list)


class SearchLocalResponse(ArticleListResponse):
    total_articles: int = 0
    total_pages: int = 0


class SearchNewsResponse(BaseModel):
    """Raw news API results; these are not stored."""
    success: bool = True
    total_articles: int
    count: int
    data: List[Dict[str, Any]] = Field(default_factory=list)


class ArticleResponse(BaseModel):
    success: bool = True
    message: str
    article: ArticleData


class LikeResponse(ArticleResponse):
    stats_synced: bool = Field(True, description="False when the stats record could not be updated")


class FollowResponse(BaseModel):
    success: bool = True
    message: str
    followed_sources: List[str] = Field(default_factory=list)


class CategoryCheckResponse(BaseModel):
    success: bool = True
    has_articles: bool
    count: int


class UserData(BaseModel):
    id: str
    username: Optional[str] = None
    email: Optional[str] = None
    liked_articles: List[str] = Field(default_factory=list)
    followed_sources: List[str] = Field(default_factory=list)


class UserDataResponse(BaseModel):
    success: bool = True
    data: UserData


class ErrorResponse(BaseModel):
    """Schema for error responses."""
    success: bool = False
    message: str = Field(..., description="Error message")
    error: Optional[str] = Field(None, description="Detailed error information")


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    404: {"model": ErrorResponse, "description": "Not found"},
    500: {"model": ErrorResponse, "description": "Store or upstream failure"},
}
