# nextwatch/api/v1/schemas/recommend.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class RecommendIn(BaseModel):
    # Optional so a missing query reaches the handler and gets a 400, not a 422
    user_query: Optional[str] = None
    user_id: Optional[str] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecommendOut(BaseModel):
    success: bool = True
    query: str
    recommendations: List[Dict[str, Any]]
    recommendation_id: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ErrorOut(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
