"""
Activity log schemas.

POST /users/{user_id}/activities → ActivityResponse
GET  /users/{user_id}/activities → ActivityListResponse
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActivityCreate(BaseModel):
    type: str = Field(
        min_length=1,
        max_length=64,
        description="Configured activity type, e.g. message, call, meeting.",
        examples=["call"],
    )
    date: Optional[datetime] = Field(
        default=None,
        description="When the action happened. Defaults to now (UTC).",
    )
    description: Optional[str] = Field(default=None, max_length=2000)
    contact_id: Optional[str] = Field(default=None, max_length=64)

    @field_validator("type")
    @classmethod
    def type_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("type must not be blank")
        return stripped


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    type: str
    category: Optional[str] = Field(description="Category the points count toward; null if uncategorized.")
    points: int
    date: str
    description: Optional[str] = None
    contact_id: Optional[str] = None


class ActivityListResponse(BaseModel):
    total: int
    items: list[ActivityResponse]
