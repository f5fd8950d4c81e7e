"""Turn raw model text into typed search results.

Missing or null arrays become empty lists. Anything else that doesn't fit the
schema (bad JSON, wrong root type, malformed entries) raises
SchemaConformanceError, so a result is either fully typed or not produced.
"""

import json
from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from trip_finder.errors import SchemaConformanceError
from trip_finder.types import DestinationSuggestion, ExploreResult, FlightQuote, FlightResult


_QUOTES = TypeAdapter(List[FlightQuote])
_DESTINATIONS = TypeAdapter(List[DestinationSuggestion])
_NOTES = TypeAdapter(List[str])


def _load(text: str) -> Any:
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        raise SchemaConformanceError(f"response is not valid JSON: {e}", raw_text=text) from e


def parse_flight_result(text: str) -> FlightResult:
    data = _load(text)
    if not isinstance(data, dict):
        raise SchemaConformanceError("flight response must be a JSON object", raw_text=text)

    try:
        return FlightResult(
            departure_quotes=_QUOTES.validate_python(data.get("departureFlights") or []),
            return_quotes=_QUOTES.validate_python(data.get("returnFlights") or []),
            summary_notes=_NOTES.validate_python(data.get("summary") or []),
        )
    except ValidationError as e:
        raise SchemaConformanceError(f"flight response does not match schema: {e.error_count()} error(s)", raw_text=text) from e


def parse_explore_result(text: str) -> ExploreResult:
    data = _load(text)
    if data is None:
        data = []
    if not isinstance(data, list):
        raise SchemaConformanceError("destination response must be a JSON array", raw_text=text)

    try:
        return ExploreResult(destinations=_DESTINATIONS.validate_python(data))
    except ValidationError as e:
        raise SchemaConformanceError(f"destination response does not match schema: {e.error_count()} error(s)", raw_text=text) from e
