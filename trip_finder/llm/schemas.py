"""JSON schemas the model is asked to honour, one per query kind."""

from typing import Any, Dict

_FLIGHT_QUOTE = {
    "type": "object",
    "properties": {
        "day": {"type": "string", "description": "Day of the week (e.g., Monday)."},
        "date": {"type": "string", "description": "The specific date (e.g., 2024-12-25)."},
        "airline": {"type": "string", "description": "The name of the cheapest airline for that day."},
        "price": {"type": "number", "description": "The estimated lowest price in USD."},
    },
    "required": ["day", "date", "airline", "price"],
}

AIRPORT_SUGGESTION_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "name": {"type": "string", "description": "Full name of the airport."},
            "iata": {"type": "string", "description": "The 3-letter IATA code of the airport."},
            "location": {"type": "string", "description": "The city and country of the airport."},
        },
        "required": ["name", "iata", "location"],
    },
}

FLIGHT_SEARCH_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "departureFlights": {
            "type": "array",
            "description": (
                "A list of the cheapest departure flights for each day of the week "
                "starting from the user's selected departure date."
            ),
            "items": _FLIGHT_QUOTE,
        },
        "returnFlights": {
            "type": "array",
            "description": (
                "A list of the cheapest return flights for each day of the week starting "
                "from the user's selected return date. This array should be empty for one-way trips."
            ),
            "items": _FLIGHT_QUOTE,
        },
        "summary": {
            "type": "array",
            "description": (
                "A brief summary of findings as a list of bullet points. If a cheaper flight is "
                "found in the week before or after the user's selected date range, this MUST be "
                "mentioned as a separate point in the list, including the date and price."
            ),
            "items": {"type": "string"},
        },
    },
    "required": ["departureFlights", "returnFlights", "summary"],
}

EXPLORE_SCHEMA: Dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "city": {"type": "string", "description": "The name of the suggested city."},
            "country": {"type": "string", "description": "The country where the city is located."},
            "description": {
                "type": "string",
                "description": (
                    "A short, compelling description of the destination and why it's a good "
                    "fit for the user's interests."
                ),
            },
            "estimatedFlightPrice": {
                "type": "number",
                "description": "An estimated round-trip flight price from the user's departure location, in USD.",
            },
            "activities": {
                "type": "array",
                "description": "A list of 3-4 top activities or attractions in the destination.",
                "items": {"type": "string"},
            },
        },
        "required": ["city", "country", "description", "estimatedFlightPrice", "activities"],
    },
}
