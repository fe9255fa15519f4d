# nextwatch/core/errors.py
"""
Domain error taxonomy.

Services and repositories raise these; routers translate them into HTTP
responses. Nothing here is retried.
"""


class NextWatchError(Exception):
    """Base class for every error raised by the recommendation flow."""
    status_code: int = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class QueryValidationError(NextWatchError):
    """Missing or empty user query. Raised before any side effect."""
    status_code = 400


class UpstreamError(NextWatchError):
    """The LLM call failed (provider error, network error or timeout)."""
    status_code = 500


class ParseFailure(NextWatchError):
    """The LLM reply is not JSON, or not shaped like a movie list."""
    status_code = 500


class RecommendationNotFound(NextWatchError):
    status_code = 404


class StoreError(NextWatchError):
    """Any MongoDB failure."""
    status_code = 500
