from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Annotated


class SearchMode(str, Enum):
    FIND = "find"
    EXPLORE = "explore"


class CabinClass(str, Enum):
    ECONOMY = "ECONOMY"
    PREMIUM_ECONOMY = "PREMIUM_ECONOMY"
    BUSINESS = "BUSINESS"
    FIRST = "FIRST"


class StopPreference(str, Enum):
    ANY = "ANY"
    NON_STOP = "NON_STOP"
    ONE_STOP = "ONE_STOP"
    TWO_PLUS_STOPS = "TWO_PLUS_STOPS"


LocationField = Literal["departure", "arrival"]
LOCATION_FIELDS = ("departure", "arrival")


class TripQuery(BaseModel):
    """Validated trip parameters handed to the prompt builder."""
    mode: SearchMode
    departure: str
    arrival: Optional[str] = None
    departure_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    return_date: Optional[str] = None
    is_round_trip: bool = True
    travel_period: Optional[str] = None
    max_budget: Optional[float] = Field(None, ge=0)
    interests: Optional[str] = None
    adults: int = Field(1, ge=1, le=9)
    children: int = Field(0, ge=0, le=9)
    infants: int = Field(0, ge=0, le=9)
    cabin_class: CabinClass = CabinClass.ECONOMY
    stop_preference: StopPreference = StopPreference.ANY
    preferred_airlines: str = ""

    @model_validator(mode="after")
    def check_mode_fields(self) -> "TripQuery":
        def blank(value) -> bool:
            return value is None or not str(value).strip()

        if blank(self.departure):
            raise ValueError("departure is required")
        if self.mode == SearchMode.FIND:
            if blank(self.arrival) or blank(self.departure_date):
                raise ValueError("arrival and departure_date are required for flight search")
            if self.is_round_trip and blank(self.return_date):
                raise ValueError("return_date is required for round trips")
            if not self.is_round_trip:
                self.return_date = None
        else:
            if blank(self.travel_period) or self.max_budget is None or blank(self.interests):
                raise ValueError("travel_period, max_budget and interests are required to explore")
        return self


class SearchForm(BaseModel):
    """Raw form state as the user edits it. Nothing here is validated."""
    departure: str = ""
    arrival: str = ""
    departure_date: str = ""
    return_date: str = ""
    is_round_trip: bool = True
    travel_period: str = ""
    max_budget: str = "1000"
    interests: str = ""
    adults: int = 1
    children: int = 0
    infants: int = 0
    cabin_class: CabinClass = CabinClass.ECONOMY
    stop_preference: StopPreference = StopPreference.ANY
    preferred_airlines: str = ""

    def set_round_trip(self, enabled: bool) -> None:
        self.is_round_trip = enabled
        if not enabled:
            self.return_date = ""


class SearchFormUpdate(BaseModel):
    """Partial update for the non-autocomplete form widgets."""
    departure_date: Optional[str] = None
    return_date: Optional[str] = None
    is_round_trip: Optional[bool] = None
    travel_period: Optional[str] = None
    max_budget: Optional[str] = None
    interests: Optional[str] = None
    adults: Optional[int] = None
    children: Optional[int] = None
    infants: Optional[int] = None
    cabin_class: Optional[CabinClass] = None
    stop_preference: Optional[StopPreference] = None
    preferred_airlines: Optional[str] = None


class AirportSuggestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    iata_code: str = Field(..., alias="iata", pattern=r"^[A-Za-z]{3}$")
    location: str

    @field_validator("iata_code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return v.upper()


class FlightQuote(BaseModel):
    day: str
    date: str
    airline: str
    price: float = Field(..., ge=0, description="USD")


class DestinationSuggestion(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    city: str
    country: str
    description: str
    estimated_flight_price: float = Field(..., alias="estimatedFlightPrice", ge=0)
    activities: List[str] = Field(default_factory=list)


class FlightResult(BaseModel):
    kind: Literal["flights"] = "flights"
    departure_quotes: List[FlightQuote] = Field(default_factory=list)
    return_quotes: List[FlightQuote] = Field(default_factory=list)
    summary_notes: List[str] = Field(default_factory=list)


class ExploreResult(BaseModel):
    kind: Literal["explore"] = "explore"
    destinations: List[DestinationSuggestion] = Field(default_factory=list)


class EmptyResult(BaseModel):
    kind: Literal["empty"] = "empty"


class ErrorResult(BaseModel):
    kind: Literal["error"] = "error"
    message: str


SearchResult = Annotated[
    Union[FlightResult, ExploreResult, EmptyResult, ErrorResult],
    Field(discriminator="kind"),
]
