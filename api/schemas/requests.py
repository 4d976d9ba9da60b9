"""Request schemas for API endpoints."""
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class ViewRequest(BaseModel):
    """Body of a view event."""
    user_id: Optional[str] = Field(default=None, alias="userId", description="Logged-in user, if any")

    class Config:
        populate_by_name = True


class LikeRequest(BaseModel):
    """Body of a like or unlike request."""
    user_id: Optional[str] = Field(default=None, alias="userId", description="User liking the article")

    class Config:
        populate_by_name = True


class FollowRequest(BaseModel):
    """Body of a follow or unfollow request."""
    user_id: str = Field(..., alias="userId", description="User following the source")

    class Config:
        populate_by_name = True


class SourceInput(BaseModel):
    """Source block as returned by the news API."""
    name: Optional[str] = None
    url: Optional[str] = None


class ArticleSaveRequest(BaseModel):
    """
    Article payload to store.

    Accepts both the news API shape (nested ``source``) and the flat shape
    used by stored articles. Title and url are checked by the service so a
    missing field yields a 400 with the usual envelope.
    """
    title: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    image: Optional[str] = None
    published_at: Optional[str] = Field(default=None, alias="publishedAt")
    source: Optional[SourceInput] = None
    source_name: Optional[str] = None
    source_url: Optional[str] = None
    category: Optional[str] = None

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate URL format."""
        if v and not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v

    class Config:
        populate_by_name = True
