# Limits for the recommendation flow and the read endpoints.
MAX_RECOMMENDATIONS = 3  # movies kept per LLM reply
HISTORY_LIMIT = 10  # GET /history/{user_id}
USER_RECOMMENDATIONS_LIMIT = 20  # GET /recommendations/{user_id}

# userId stored on records created without one
ANONYMOUS_USER = "anonymous"

# Mongo collection names (mongoose-style pluralized model names)
RECOMMENDATIONS_COLLECTION = "movierecommendations"
SEARCH_HISTORY_COLLECTION = "searchhistories"
