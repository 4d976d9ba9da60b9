"""FastAPI dependency providers for the services."""
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from api.services.ingestion import IngestionService
from api.services.likes import LikeService
from api.services.recommender import Recommender
from api.services.sync import LikeSynchronizer
from api.services.trending import TrendingService
from api.services.views import ViewRecorder
from database.connection import get_db


def get_view_recorder(db: AsyncIOMotorDatabase = Depends(get_db)) -> ViewRecorder:
    return ViewRecorder(db)


def get_trending_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> TrendingService:
    return TrendingService(db)


def get_like_synchronizer(db: AsyncIOMotorDatabase = Depends(get_db)) -> LikeSynchronizer:
    return LikeSynchronizer(db)


def get_recommender(db: AsyncIOMotorDatabase = Depends(get_db)) -> Recommender:
    return Recommender(db)


def get_like_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> LikeService:
    return LikeService(db)


def get_ingestion_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> IngestionService:
    return IngestionService(db)
