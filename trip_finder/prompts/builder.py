"""
Prompt Builder

Renders a validated TripQuery into the natural-language request and the JSON
schema the model must answer with. Pure functions only: the same query always
yields the same prompt text and schema.
"""

from typing import Any, Dict, Tuple

from trip_finder.llm.schemas import EXPLORE_SCHEMA, FLIGHT_SEARCH_SCHEMA
from trip_finder.types import CabinClass, SearchMode, StopPreference, TripQuery

STOP_CLAUSES: Dict[StopPreference, str] = {
    StopPreference.ANY: "The number of stops does not matter.",
    StopPreference.NON_STOP: "The flight must be non-stop.",
    StopPreference.ONE_STOP: "The flight should have at most 1 stop.",
    StopPreference.TWO_PLUS_STOPS: "The flight can have 2 or more stops.",
}


def traveler_clause(adults: int, children: int = 0, infants: int = 0) -> str:
    details = f" for {adults} adult(s)"
    if children > 0:
        details += f", {children} child(ren)"
    if infants > 0:
        details += f", and {infants} infant(s)"
    return details


def cabin_label(cabin_class: CabinClass) -> str:
    return cabin_class.value.replace("_", " ")


def stop_clause(preference: StopPreference) -> str:
    return STOP_CLAUSES.get(preference, STOP_CLAUSES[StopPreference.ANY])


def airline_clause(preferred_airlines: str) -> str:
    airlines = (preferred_airlines or "").strip()
    if not airlines:
        return ""
    return f" Please prioritize the following airlines if possible: {airlines}."


def advanced_details(query: TripQuery) -> str:
    """Travellers, cabin, stops and airlines as one sentence run."""
    details = traveler_clause(query.adults, query.children, query.infants)
    details += f" in {cabin_label(query.cabin_class)} class."
    details += " " + stop_clause(query.stop_preference)
    details += airline_clause(query.preferred_airlines)
    return details


def build_flight_prompt(query: TripQuery) -> str:
    details = advanced_details(query)
    if query.is_round_trip:
        return (
            f"Analyze flight prices for a round trip from {query.departure} to {query.arrival}{details} "
            "Your primary task is to find the cheapest one-way flight option for each of the 7 days of the week "
            f"starting from the DEPARTURE date {query.departure_date}, and separately, for each of the 7 days "
            f"of the week starting from the RETURN date {query.return_date}. "
            "In parallel, you MUST also search the week immediately BEFORE and immediately AFTER both the "
            "departure and return dates to identify any potentially cheaper flights. "
            "For the JSON output, populate the 'departureFlights' and 'returnFlights' arrays with the 7-day "
            "data for the user's selected weeks. "
            "In the 'summary' array, provide a list of bullet points summarizing the findings. "
            "You MUST explicitly state as a separate point if a cheaper flight was found in the adjacent weeks, "
            "specifying the date and price of that better deal."
        )
    return (
        f"Analyze flight prices for a one-way trip from {query.departure} to {query.arrival}{details} "
        "Your primary task is to find the cheapest flight option for each of the 7 days of the week "
        f"starting from the departure date {query.departure_date}. "
        "In parallel, you MUST also search the week immediately BEFORE and immediately AFTER the departure "
        "date to identify any potentially cheaper flights. "
        "For the JSON output, populate the 'departureFlights' array with the 7-day data for the user's "
        "selected week and leave the 'returnFlights' array empty. "
        "In the 'summary' array, provide a list of bullet points summarizing the findings for the requested week. "
        "You MUST explicitly state as a separate point if a cheaper flight was found in the adjacent weeks, "
        "specifying the date and price of that better deal."
    )


def format_budget(amount: float) -> str:
    # 1000.0 -> "1000", 999.5 -> "999.5"
    return str(int(amount)) if amount == int(amount) else str(amount)


def build_explore_prompt(query: TripQuery) -> str:
    return (
        f"I want to travel from {query.departure}. "
        f"I'm thinking of going sometime around {query.travel_period}. "
        f"My maximum budget for a round-trip flight is around ${format_budget(query.max_budget)}. "
        f"I'm interested in activities related to: {query.interests}. "
        "Please suggest 3 to 4 destinations for me. For each destination, provide the city, country, "
        "a short, compelling description of why it's a great fit for my interests, an estimated "
        "round-trip flight price, and a list of 3 top activities."
    )


def build_prompt(query: TripQuery) -> Tuple[str, Dict[str, Any]]:
    """Return (prompt_text, response_schema) for the query's mode."""
    if query.mode == SearchMode.FIND:
        return build_flight_prompt(query), FLIGHT_SEARCH_SCHEMA
    return build_explore_prompt(query), EXPLORE_SCHEMA
