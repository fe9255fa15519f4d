from datetime import datetime
from typing import Any, List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _str_id(v: Any) -> Any:
    return str(v) if isinstance(v, ObjectId) else v


class Movie(BaseModel):
    """
    One recommended movie, embedded in a RecommendationRecord.
    Every field is optional: whatever the LLM leaves out stays absent.
    """
    title: Optional[str] = None
    year: Optional[int] = None
    genre: Optional[str] = None
    rating: Optional[str] = None  # free text, e.g. "8.5"
    description: Optional[str] = None
    director: Optional[str] = None
    cast: Optional[List[str]] = None
    why_recommended: Optional[str] = None
    poster_url: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,  # "rating": 8.5 -> "8.5"
        extra="ignore",
        frozen=True,
    )

    @field_validator("genre", mode="before")
    @classmethod
    def join_genres(cls, v: Any) -> Any:
        # ["Action", "Thriller"] -> "Action/Thriller", same form the prompt asks for
        if isinstance(v, list) and all(isinstance(g, str) for g in v):
            return "/".join(v)
        return v

    def to_doc(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class RecommendationRecord(BaseModel):
    id: str = Field(alias="_id")
    user_query: str = Field(min_length=1)
    recommendations: List[Movie] = []
    user_id: str
    created_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_object_id(cls, v: Any) -> Any:
        return _str_id(v)


class SearchHistoryEntry(BaseModel):
    id: str = Field(alias="_id")
    user_id: str
    query: str
    timestamp: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_object_id(cls, v: Any) -> Any:
        return _str_id(v)
