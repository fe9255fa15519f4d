from nextwatch.domain.services.constants import MAX_RECOMMENDATIONS

# Shape the normalizer expects back; kept verbatim in the system prompt.
OUTPUT_FORMAT = """{
  "movies": [
    {
      "title": "Movie Title",
      "year": 2023,
      "genre": "Action/Thriller",
      "rating": "8.5",
      "description": "A brief 2-3 sentence description of the movie plot",
      "director": "Director Name",
      "cast": ["Actor 1", "Actor 2", "Actor 3"],
      "whyRecommended": "1-2 sentences explaining why this matches the user's request"
    }
  ]
}"""


def system_prompt() -> str:
    return (
        "You are a movie recommendation AI. Based on the user's request, "
        f"recommend {MAX_RECOMMENDATIONS} movies in JSON format with the following structure:\n"
        + OUTPUT_FORMAT
    )


def user_prompt(user_query: str) -> str:
    # The query goes through untouched; the system prompt carries the format.
    return user_query.strip()


def build_messages(user_query: str) -> list[dict]:
    return [
        {"role": "system", "content": system_prompt()},
        {"role": "user", "content": user_prompt(user_query)},
    ]
