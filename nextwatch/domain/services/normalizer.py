# nextwatch/domain/services/normalizer.py
"""
Turn the LLM reply into at most MAX_RECOMMENDATIONS movies.

The model is asked for {"movies": [...]} but does not always comply. The
parsed value is classified into exactly one PayloadShape, and each shape
has a single extraction rule:

  ARRAY            [...]                       -> the list itself
  MOVIES           {"movies": [...]}           -> value of "movies"
  RECOMMENDATIONS  {"recommendations": [...]}  -> value of "recommendations"
  OBJECT           {"a": {...}, "b": 1}        -> object-valued fields, in order

A "movies" or "recommendations" key holding null, "", 0 or false is treated
as absent and classification moves on to the next rule.

Anything else (invalid JSON, a bare scalar, a non-list branch value, items
that are not movie objects) raises ParseFailure.
"""
from __future__ import annotations

import json
import logging
import re
from enum import Enum
from typing import Any, List

from pydantic import ValidationError

from nextwatch.core.errors import ParseFailure
from nextwatch.domain.models.recommendation import Movie
from nextwatch.domain.services.constants import MAX_RECOMMENDATIONS

logger = logging.getLogger(__name__)

PARSE_FAILURE_MESSAGE = "Failed to parse movie recommendations"

# Regex to strip code fences (``` or ```json) from LLM output
_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.MULTILINE)


class PayloadShape(str, Enum):
    ARRAY = "array"
    MOVIES = "movies"
    RECOMMENDATIONS = "recommendations"
    OBJECT = "object"


def _strip_fences(s: str) -> str:
    """Remove ``` or ```json fences the LLM might add."""
    return _CODE_FENCE_RE.sub("", s).strip()


def parse_json(text: str | None) -> Any:
    if not text or not text.strip():
        raise ParseFailure(PARSE_FAILURE_MESSAGE)
    try:
        return json.loads(_strip_fences(text))
    except json.JSONDecodeError as e:
        logger.error("LLM reply is not valid JSON: %s", e)
        raise ParseFailure(PARSE_FAILURE_MESSAGE) from e


def _has_value(v: Any) -> bool:
    # null, "", 0 and false count as missing; any list or object counts as present
    if isinstance(v, (list, dict)):
        return True
    return v is not None and v is not False and v != "" and v != 0


def classify(value: Any) -> PayloadShape:
    if isinstance(value, list):
        return PayloadShape.ARRAY
    if isinstance(value, dict):
        if _has_value(value.get("movies")):
            return PayloadShape.MOVIES
        if _has_value(value.get("recommendations")):
            return PayloadShape.RECOMMENDATIONS
        return PayloadShape.OBJECT
    logger.error("LLM reply is a bare %s, expected an object or an array", type(value).__name__)
    raise ParseFailure(PARSE_FAILURE_MESSAGE)


def extract(value: Any, shape: PayloadShape) -> List[Any]:
    if shape is PayloadShape.ARRAY:
        items = value
    elif shape is PayloadShape.MOVIES:
        items = value["movies"]
    elif shape is PayloadShape.RECOMMENDATIONS:
        items = value["recommendations"]
    else:
        items = [v for v in value.values() if isinstance(v, dict)]

    if not isinstance(items, list):
        logger.error("LLM reply field %r is a %s, expected an array", shape.value, type(items).__name__)
        raise ParseFailure(PARSE_FAILURE_MESSAGE)
    return items


def normalize_payload(value: Any, limit: int = MAX_RECOMMENDATIONS) -> List[Any]:
    """Pick the movie list out of any recognized shape and keep the first `limit`."""
    shape = classify(value)
    items = extract(value, shape)
    logger.debug("LLM reply shape=%s items=%s (keeping %s)", shape.value, len(items), min(len(items), limit))
    return items[:limit]


def to_movies(items: List[Any]) -> List[Movie]:
    movies: List[Movie] = []
    for item in items:
        if not isinstance(item, dict):
            logger.error("LLM reply item is a %s, expected an object", type(item).__name__)
            raise ParseFailure(PARSE_FAILURE_MESSAGE)
        try:
            movies.append(Movie.model_validate(item))
        except ValidationError as e:
            logger.error("LLM reply item does not look like a movie: %s", e)
            raise ParseFailure(PARSE_FAILURE_MESSAGE) from e
    return movies


def parse_recommendations(text: str | None) -> List[Movie]:
    """
    Parse raw LLM text into at most MAX_RECOMMENDATIONS movies.
    Raises ParseFailure on anything that is not a recognizable movie list.
    An empty list is a valid result.
    """
    return to_movies(normalize_payload(parse_json(text)))
