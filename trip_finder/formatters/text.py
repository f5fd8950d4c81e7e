from typing import List, Optional

from trip_finder.types import (
    AirportSuggestion,
    DestinationSuggestion,
    ErrorResult,
    ExploreResult,
    FlightQuote,
    FlightResult,
    SearchMode,
)


def format_price(amount: float) -> str:
    return f"${amount:,.0f}" if amount == int(amount) else f"${amount:,.2f}"


def format_suggestion(s: AirportSuggestion) -> str:
    return f"{s.iata_code} - {s.name}, {s.location}"


def format_price_grid(title: str, quotes: List[FlightQuote]) -> str:
    """One row per day: day, date, price, airline. Cheapest day is starred."""
    if not quotes:
        return ""
    cheapest = min(q.price for q in quotes)
    lines = [title, "-" * len(title)]
    for q in quotes:
        marker = " *" if q.price == cheapest else ""
        lines.append(f"{q.day:<10} {q.date:<11} {format_price(q.price):>9}  {q.airline}{marker}")
    return "\n".join(lines)


def format_flight_result(result: FlightResult, round_trip: bool) -> str:
    if not result.departure_quotes:
        return "No flights found for the selected week. Try different dates or airports?"

    title = "Cheapest Departure Flights This Week" if round_trip else "Cheapest Flights This Week"
    parts = [format_price_grid(title, result.departure_quotes)]
    if result.return_quotes:
        parts += ["", format_price_grid("Cheapest Return Flights This Week", result.return_quotes)]
    if result.summary_notes:
        parts += ["", "Smart Savings Tip"]
        parts += [f"• {note}" for note in result.summary_notes]
    return "\n".join(parts)


def format_destination(d: DestinationSuggestion) -> str:
    lines = [
        f"{d.city}, {d.country}  (~{format_price(d.estimated_flight_price)})",
        d.description,
        "Top Activities:",
    ]
    lines += [f"  ✓ {a}" for a in d.activities]
    return "\n".join(lines)


def format_explore_result(result: ExploreResult) -> str:
    if not result.destinations:
        return "No destinations matched. Try a different period, budget or interests?"
    cards = [format_destination(d) for d in result.destinations]
    return "Your Next Adventure Awaits...\n\n" + "\n\n".join(cards)


def format_result(result, mode: SearchMode, round_trip: bool = True, loading_message: Optional[str] = None) -> str:
    """Render the session's current result panel as plain text."""
    if loading_message:
        return loading_message
    if isinstance(result, ErrorResult):
        return result.message
    if isinstance(result, FlightResult) and mode == SearchMode.FIND:
        return format_flight_result(result, round_trip)
    if isinstance(result, ExploreResult) and mode == SearchMode.EXPLORE:
        return format_explore_result(result)
    return ""
