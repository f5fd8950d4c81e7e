import pytest
from pydantic import ValidationError

from trip_finder.errors import QueryValidationError
from trip_finder.search.validator import (
    INVALID_BUDGET,
    INVALID_TRAVELLERS,
    MISSING_MESSAGES,
    QueryValidator,
    missing_fields,
)
from trip_finder.types import SearchForm, SearchMode, TripQuery


def find_form(**overrides) -> SearchForm:
    form = SearchForm(
        departure="New York, USA",
        arrival="Paris, France",
        departure_date="2024-12-25",
        return_date="2025-01-05",
    )
    for k, v in overrides.items():
        setattr(form, k, v)
    return form


def explore_form(**overrides) -> SearchForm:
    form = SearchForm(departure="Chicago", travel_period="next summer", interests="beaches")
    for k, v in overrides.items():
        setattr(form, k, v)
    return form


class TestMissingFields:
    def test_round_trip_requires_return_date(self):
        form = find_form(return_date="")
        assert missing_fields(SearchMode.FIND, form) == ["return_date"]

    def test_one_way_ignores_return_date(self):
        form = find_form(return_date="")
        form.set_round_trip(False)
        assert missing_fields(SearchMode.FIND, form) == []

    def test_whitespace_counts_as_missing(self):
        form = find_form(arrival="   ")
        assert missing_fields(SearchMode.FIND, form) == ["arrival"]

    def test_explore_required(self):
        form = SearchForm(departure="Chicago", max_budget="")
        assert missing_fields(SearchMode.EXPLORE, form) == ["travel_period", "max_budget", "interests"]


class TestQueryValidator:
    def test_round_trip_blank_return_is_validation_error(self):
        validator = QueryValidator()
        with pytest.raises(QueryValidationError) as exc:
            validator.to_query(SearchMode.FIND, find_form(return_date=" "))
        assert exc.value.message == MISSING_MESSAGES[SearchMode.FIND]
        assert exc.value.missing == ["return_date"]

    def test_one_way_query_drops_return_date(self):
        form = find_form()
        form.is_round_trip = False
        query = QueryValidator().to_query(SearchMode.FIND, form)
        assert query.is_round_trip is False
        assert query.return_date is None

    def test_fields_are_trimmed(self):
        query = QueryValidator().to_query(SearchMode.FIND, find_form(departure="  JFK  "))
        assert query.departure == "JFK"

    def test_bad_traveller_counts(self):
        result = QueryValidator().validate(SearchMode.FIND, find_form(adults=0))
        assert not result.is_valid
        assert result.message == INVALID_TRAVELLERS

    def test_explore_budget_must_be_a_number(self):
        result = QueryValidator().validate(SearchMode.EXPLORE, explore_form(max_budget="lots"))
        assert not result.is_valid
        assert result.message == INVALID_BUDGET

    def test_explore_negative_budget(self):
        with pytest.raises(QueryValidationError):
            QueryValidator().to_query(SearchMode.EXPLORE, explore_form(max_budget="-5"))

    def test_explore_query(self):
        query = QueryValidator().to_query(SearchMode.EXPLORE, explore_form(max_budget=" 1500 "))
        assert query.mode == SearchMode.EXPLORE
        assert query.max_budget == 1500.0
        assert query.interests == "beaches"

    def test_explore_missing_message(self):
        with pytest.raises(QueryValidationError) as exc:
            QueryValidator().to_query(SearchMode.EXPLORE, explore_form(interests=""))
        assert exc.value.message == "Please fill in all fields to explore destinations."


class TestTripQueryRules:
    def test_find_requires_arrival(self):
        with pytest.raises(ValidationError):
            TripQuery(mode=SearchMode.FIND, departure="JFK", departure_date="2024-12-25", is_round_trip=False)

    def test_round_trip_requires_return(self):
        with pytest.raises(ValidationError):
            TripQuery(mode=SearchMode.FIND, departure="JFK", arrival="CDG", departure_date="2024-12-25")

    def test_adults_at_least_one(self):
        with pytest.raises(ValidationError):
            TripQuery(
                mode=SearchMode.FIND, departure="JFK", arrival="CDG",
                departure_date="2024-12-25", is_round_trip=False, adults=0,
            )

    def test_explore_requires_budget(self):
        with pytest.raises(ValidationError):
            TripQuery(mode=SearchMode.EXPLORE, departure="JFK", travel_period="May", interests="food")

    def test_round_trip_toggle_clears_return_date(self):
        form = find_form()
        form.set_round_trip(False)
        assert form.return_date == ""
