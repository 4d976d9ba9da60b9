"""User preference model definitions."""
from typing import List, Optional
from pydantic import BaseModel, Field


class UserModel(BaseModel):
    """User record as stored by the authentication service."""
    id: str = Field(alias="_id")
    username: Optional[str] = None
    email: Optional[str] = None
    liked_articles: List[str] = Field(default_factory=list)
    followed_sources: List[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True
