"""Article stats routes: views, trending and like sync."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request

from api.dependencies import get_like_synchronizer, get_trending_service, get_view_recorder
from api.schemas.requests import ViewRequest
from api.schemas.responses import (
    ERROR_RESPONSES,
    ArticleStatsData,
    ArticleStatsResponse,
    StatsSummary,
    SyncLikesResponse,
    TrendingArticle,
    TrendingResponse,
    ViewResponse
)
from api.services.sync import LikeSynchronizer
from api.services.trending import TrendingService
from api.services.views import ViewRecorder
from shared.config import settings


router = APIRouter(tags=["stats"], responses=ERROR_RESPONSES)


@router.post("/articles/{article_id}/view", response_model=ViewResponse)
async def view_article(
    article_id: str,
    request: Request,
    body: Optional[ViewRequest] = None,
    recorder: ViewRecorder = Depends(get_view_recorder)
):
    """
    Record a view of an article.

    Logged-in users are identified by userId; anonymous visitors by
    their client address.
    """
    visitor_id = body.user_id if body and body.user_id else None
    if visitor_id is None and request.client:
        visitor_id = request.client.host

    stats = await recorder.record_view(article_id, visitor_id)
    return ViewResponse(stats=StatsSummary(**stats))


@router.get("/articles/{article_id}/stats", response_model=ArticleStatsResponse)
async def get_article_stats(
    article_id: str,
    trending: TrendingService = Depends(get_trending_service)
):
    """Get the counters of one article."""
    stats = await trending.get_article_stats(article_id)
    return ArticleStatsResponse(stats=ArticleStatsData(**stats))


@router.get("/trending", response_model=TrendingResponse)
async def get_trending_articles(
    limit: int = Query(default=settings.trending_default_limit, ge=1, le=100),
    trending: TrendingService = Depends(get_trending_service)
):
    """Get the top articles by trending score."""
    articles = await trending.get_trending(limit)
    return TrendingResponse(articles=[
        TrendingArticle.from_document(
            article,
            views=article["views"],
            trending_score=article["trending_score"]
        )
        for article in articles
    ])


@router.get("/sync-likes", response_model=SyncLikesResponse)
async def sync_article_likes(
    synchronizer: LikeSynchronizer = Depends(get_like_synchronizer)
):
    """Copy article like counts into stats and recompute trending scores."""
    count = await synchronizer.sync_all()
    return SyncLikesResponse(count=count)
