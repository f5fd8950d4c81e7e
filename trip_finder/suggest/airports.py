"""
Airport Suggestion Client

Asks the model for up to five airports matching a partial location string.
Suggestions are a convenience: every failure ends in an empty list, never an
exception, so autocomplete can't get in the way of the main search.
"""

import json
from typing import List, Optional

from pydantic import ValidationError

from trip_finder.config import settings
from trip_finder.errors import SuggestionLookupError
from trip_finder.llm.generator import StructuredGenerator
from trip_finder.llm.schemas import AIRPORT_SUGGESTION_SCHEMA
from trip_finder.obs.logger import log_event
from trip_finder.obs.metrics import inc_counter, timed
from trip_finder.types import AirportSuggestion


def build_airport_prompt(query: str, limit: int) -> str:
    return (
        f'Provide airport suggestions for the query: "{query}". '
        f"Return a list of up to {limit} relevant airports including their name, IATA code, and location."
    )


def parse_airports(text: str, limit: int) -> List[AirportSuggestion]:
    """Parse model output into suggestions, dropping malformed entries."""
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise SuggestionLookupError(f"suggestions were not valid JSON: {e}") from e
    if not isinstance(data, list):
        raise SuggestionLookupError(f"expected a JSON array, got {type(data).__name__}")

    suggestions: List[AirportSuggestion] = []
    for item in data:
        try:
            suggestions.append(AirportSuggestion.model_validate(item))
        except ValidationError:
            log_event("airport_suggestion_dropped", level="DEBUG", item=str(item))
            continue
        if len(suggestions) == limit:
            break
    return suggestions


class AirportSuggestionClient:
    """Schema-constrained airport lookup"""

    def __init__(self, generator: StructuredGenerator, limit: Optional[int] = None):
        self.generator = generator
        self.limit = limit or settings.SUGGESTION_LIMIT

    async def lookup_airports(self, query: str) -> List[AirportSuggestion]:
        prompt = build_airport_prompt(query, self.limit)
        try:
            with timed("llm_latency_ms", {"purpose": "suggest"}):
                text = await self.generator.generate(prompt, AIRPORT_SUGGESTION_SCHEMA, name="airport_suggestions")
            suggestions = parse_airports(text, self.limit)
        except Exception as e:
            inc_counter("llm_calls_total", {"purpose": "suggest", "outcome": "error"})
            log_event("airport_lookup_failed", level="WARNING", query=query, error=f"{type(e).__name__}: {e}")
            return []

        inc_counter("llm_calls_total", {"purpose": "suggest", "outcome": "ok"})
        log_event("airport_lookup", query=query, count=len(suggestions))
        return suggestions
