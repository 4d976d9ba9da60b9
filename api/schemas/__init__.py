# Schemas module
from .requests import ArticleSaveRequest, FollowRequest, LikeRequest, ViewRequest
from .responses import (
    ArticleData,
    TrendingArticle,
    RecommendedArticle,
    StatsSummary,
    ArticleStatsData,
    ViewResponse,
    ArticleStatsResponse,
    TrendingResponse,
    SyncLikesResponse,
    RecommendationCounts,
    RecommendationResponse,
    ArticleListResponse,
    SearchLocalResponse,
    SearchNewsResponse,
    ArticleResponse,
    LikeResponse,
    FollowResponse,
    CategoryCheckResponse,
    UserData,
    UserDataResponse,
    ErrorResponse,
    ERROR_RESPONSES
)

__all__ = [
    "ArticleSaveRequest",
    "FollowRequest",
    "LikeRequest",
    "ViewRequest",
    "ArticleData",
    "TrendingArticle",
    "RecommendedArticle",
    "StatsSummary",
    "ArticleStatsData",
    "ViewResponse",
    "ArticleStatsResponse",
    "TrendingResponse",
    "SyncLikesResponse",
    "RecommendationCounts",
    "RecommendationResponse",
    "ArticleListResponse",
    "SearchLocalResponse",
    "SearchNewsResponse",
    "ArticleResponse",
    "LikeResponse",
    "FollowResponse",
    "CategoryCheckResponse",
    "UserData",
    "UserDataResponse",
    "ErrorResponse",
    "ERROR_RESPONSES"
]
