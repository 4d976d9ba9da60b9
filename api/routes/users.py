"""User preference routes: follows and recommendations."""
from fastapi import APIRouter, Depends, Query

from api.dependencies import get_like_service, get_recommender
from api.schemas.requests import FollowRequest
from api.schemas.responses import (
    ERROR_RESPONSES,
    FollowResponse,
    RecommendationCounts,
    RecommendationResponse,
    RecommendedArticle,
    UserData,
    UserDataResponse
)
from api.services.likes import LikeService
from api.services.recommender import Recommender


router = APIRouter(tags=["users"], responses=ERROR_RESPONSES)


@router.post("/sources/{name}/follow", response_model=FollowResponse)
async def follow_source(
    name: str,
    request: FollowRequest,
    service: LikeService = Depends(get_like_service)
):
    """Follow a news source."""
    followed = await service.follow_source(request.user_id, name)
    return FollowResponse(message="Source followed successfully", followed_sources=followed)


@router.post("/sources/{name}/unfollow", response_model=FollowResponse)
async def unfollow_source(
    name: str,
    request: FollowRequest,
    service: LikeService = Depends(get_like_service)
):
    """Unfollow a news source."""
    followed = await service.unfollow_source(request.user_id, name)
    return FollowResponse(message="Source unfollowed successfully", followed_sources=followed)


@router.get("/recommended-articles", response_model=RecommendationResponse)
async def get_recommended_articles(
    user_id: str = Query(..., alias="userId"),
    recommender: Recommender = Depends(get_recommender)
):
    """Get articles recommended from the user's likes and followed sources."""
    recommendation = await recommender.recommend(user_id)
    data = [
        RecommendedArticle.from_document(
            article,
            is_liked=article["is_liked"],
            is_from_followed_source=article["is_from_followed_source"],
            is_related=article["is_related"]
        )
        for article in recommendation.articles
    ]
    return RecommendationResponse(
        count=len(data),
        data=data,
        categories=RecommendationCounts(
            liked=recommendation.liked_count,
            followed_sources=recommendation.followed_sources_count,
            related=recommendation.related_count
        )
    )


@router.get("/users/{user_id}", response_model=UserDataResponse)
async def get_user_data(
    user_id: str,
    service: LikeService = Depends(get_like_service)
):
    """Get a user's liked articles and followed sources."""
    user = await service.get_user_data(user_id)
    return UserDataResponse(data=UserData(**user))
