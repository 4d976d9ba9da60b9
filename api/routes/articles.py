"""Article routes: ingestion, listing, search and likes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status

from api.dependencies import get_ingestion_service, get_like_service
from api.schemas.requests import ArticleSaveRequest, LikeRequest
from api.schemas.responses import (
    ERROR_RESPONSES,
    ArticleData,
    ArticleListResponse,
    ArticleResponse,
    CategoryCheckResponse,
    LikeResponse,
    SearchLocalResponse,
    SearchNewsResponse
)
from api.services.ingestion import IngestionService
from api.services.likes import LikeResult, LikeService
from shared.config import settings


router = APIRouter(tags=["articles"], responses=ERROR_RESPONSES)


def _like_response(result: LikeResult) -> LikeResponse:
    return LikeResponse(
        message=result.message,
        article=ArticleData.from_document(result.article),
        stats_synced=result.stats_synced
    )


@router.get("/fetch-news", response_model=ArticleListResponse)
async def fetch_and_save_news(
    category: Optional[str] = None,
    service: IngestionService = Depends(get_ingestion_service)
):
    """Fetch top headlines from the news API and store the new ones."""
    saved, articles = await service.fetch_and_save(category)
    category = category or "general"
    return ArticleListResponse(
        message=f"{saved} new {category} articles saved",
        count=len(articles),
        data=[ArticleData.from_document(article) for article in articles]
    )


@router.get("/articles", response_model=ArticleListResponse)
async def get_all_articles(
    source: Optional[str] = None,
    category: Optional[str] = None,
    limit: Optional[int] = Query(default=None, ge=1),
    service: IngestionService = Depends(get_ingestion_service)
):
    """List stored articles, newest first."""
    articles = await service.list_articles(source=source, category=category, limit=limit)
    return ArticleListResponse(
        count=len(articles),
        data=[ArticleData.from_document(article) for article in articles]
    )


@router.post("/articles/{article_id}/like", response_model=LikeResponse)
async def like_article(
    article_id: str,
    request: Optional[LikeRequest] = None,
    service: LikeService = Depends(get_like_service)
):
    """Like an article."""
    result = await service.like_article(article_id, request.user_id if request else None)
    return _like_response(result)


@router.post("/articles/{article_id}/unlike", response_model=LikeResponse)
async def unlike_article(
    article_id: str,
    request: Optional[LikeRequest] = None,
    service: LikeService = Depends(get_like_service)
):
    """Remove a like from an article."""
    result = await service.unlike_article(article_id, request.user_id if request else None)
    return _like_response(result)


@router.get("/check-category", response_model=CategoryCheckResponse)
async def check_category_articles(
    category: str = Query(...),
    service: IngestionService = Depends(get_ingestion_service)
):
    """Check whether any articles are stored for a category."""
    count = await service.check_category(category)
    return CategoryCheckResponse(has_articles=count > 0, count=count)


@router.get("/search-news", response_model=SearchNewsResponse)
async def search_news(
    q: str = Query(..., min_length=1),
    max: int = Query(default=10, ge=1, le=100),
    page: int = Query(default=1, ge=1),
    service: IngestionService = Depends(get_ingestion_service)
):
    """Search the news API. Results are not stored."""
    results = await service.search_remote(q, max_results=max, page=page)
    return SearchNewsResponse(
        total_articles=results.total_articles,
        count=len(results.articles),
        data=results.articles
    )


@router.get("/search-local", response_model=SearchLocalResponse)
async def search_local_articles(
    q: str = Query(..., min_length=1),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.search_page_size, ge=1, le=100),
    category: Optional[str] = None,
    service: IngestionService = Depends(get_ingestion_service)
):
    """Full-text search over stored articles."""
    result = await service.search_local(q, page=page, limit=limit, category=category)
    articles = result["articles"]
    return SearchLocalResponse(
        message=None if articles else "No matching articles found",
        count=len(articles),
        data=[ArticleData.from_document(article) for article in articles],
        total_articles=result["total_articles"],
        total_pages=result["total_pages"]
    )


@router.post("/save-article", response_model=ArticleResponse)
async def save_article(
    request: ArticleSaveRequest,
    response: Response,
    service: IngestionService = Depends(get_ingestion_service)
):
    """Store an article from the news API. Known URLs return the stored record."""
    article, created = await service.save_article(request.model_dump(exclude_none=True))
    if not created:
        return ArticleResponse(
            message="Article already exists in database",
            article=ArticleData.from_document(article)
        )

    response.status_code = status.HTTP_201_CREATED
    return ArticleResponse(
        message="Article saved successfully",
        article=ArticleData.from_document(article)
    )
