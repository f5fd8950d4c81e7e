"""
Search Form Validation

Local, synchronous gate in front of every search: checks the fields each mode
requires before anything is sent to the model, and turns a passing form into
a TripQuery.
"""

import math
from typing import List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from trip_finder.errors import QueryValidationError
from trip_finder.types import SearchForm, SearchMode, TripQuery

FIND_REQUIRED: Tuple[str, ...] = ("departure", "arrival", "departure_date")
EXPLORE_REQUIRED: Tuple[str, ...] = ("departure", "travel_period", "max_budget", "interests")

MISSING_MESSAGES = {
    SearchMode.FIND: "Please fill in all required fields.",
    SearchMode.EXPLORE: "Please fill in all fields to explore destinations.",
}
INVALID_TRAVELLERS = "Please enter a valid number of travellers (1-9 adults, 0-9 children and infants)."
INVALID_BUDGET = "Please enter a valid maximum budget in USD."


class ValidationResult(BaseModel):
    """Result of form validation"""
    is_valid: bool
    missing_required: List[str]
    validation_errors: List[str]
    message: Optional[str] = None


def required_fields(mode: SearchMode, form: SearchForm) -> List[str]:
    if mode == SearchMode.FIND:
        fields = list(FIND_REQUIRED)
        if form.is_round_trip:
            fields.append("return_date")
        return fields
    return list(EXPLORE_REQUIRED)


def missing_fields(mode: SearchMode, form: SearchForm) -> List[str]:
    """Required fields that are empty or whitespace only"""
    return [name for name in required_fields(mode, form) if not str(getattr(form, name) or "").strip()]


def _parse_budget(raw: str) -> Optional[float]:
    try:
        amount = float(raw.strip())
    except ValueError:
        return None
    if not math.isfinite(amount) or amount < 0:
        return None
    return amount


class QueryValidator:
    """Validate the form for a mode and build the TripQuery"""

    def validate(self, mode: SearchMode, form: SearchForm) -> ValidationResult:
        missing = missing_fields(mode, form)
        if missing:
            return ValidationResult(
                is_valid=False,
                missing_required=missing,
                validation_errors=[],
                message=MISSING_MESSAGES[mode],
            )

        errors: List[str] = []
        if mode == SearchMode.FIND:
            if not (1 <= form.adults <= 9) or not (0 <= form.children <= 9) or not (0 <= form.infants <= 9):
                errors.append(INVALID_TRAVELLERS)
        elif _parse_budget(form.max_budget) is None:
            errors.append(INVALID_BUDGET)

        return ValidationResult(
            is_valid=not errors,
            missing_required=[],
            validation_errors=errors,
            message=errors[0] if errors else None,
        )

    def to_query(self, mode: SearchMode, form: SearchForm) -> TripQuery:
        """Validate and build the query, raising QueryValidationError on failure."""
        result = self.validate(mode, form)
        if not result.is_valid:
            raise QueryValidationError(result.message or MISSING_MESSAGES[mode], missing=result.missing_required)

        try:
            if mode == SearchMode.FIND:
                return TripQuery(
                    mode=mode,
                    departure=form.departure.strip(),
                    arrival=form.arrival.strip(),
                    departure_date=form.departure_date.strip(),
                    return_date=form.return_date.strip() if form.is_round_trip else None,
                    is_round_trip=form.is_round_trip,
                    adults=form.adults,
                    children=form.children,
                    infants=form.infants,
                    cabin_class=form.cabin_class,
                    stop_preference=form.stop_preference,
                    preferred_airlines=form.preferred_airlines,
                )
            return TripQuery(
                mode=mode,
                departure=form.departure.strip(),
                travel_period=form.travel_period.strip(),
                max_budget=_parse_budget(form.max_budget),
                interests=form.interests.strip(),
            )
        except ValidationError as e:
            raise QueryValidationError(MISSING_MESSAGES[mode]) from e


def create_validator() -> QueryValidator:
    return QueryValidator()
