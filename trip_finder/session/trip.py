"""
Trip Session

Everything one user's search form owns: the raw form values, the autocomplete
state for both location fields and the search orchestrator. A session is the
only owner of its results; nothing is shared or cached across sessions.
"""

from typing import Any, Callable, Dict, List, Optional

from trip_finder.formatters.text import format_result, format_suggestion
from trip_finder.llm.generator import StructuredGenerator
from trip_finder.obs.logger import log_event
from trip_finder.search.client import StructuredSearchClient
from trip_finder.search.orchestrator import SearchOrchestrator
from trip_finder.suggest.airports import AirportSuggestionClient
from trip_finder.suggest.debouncer import SuggestionDebouncer
from trip_finder.types import LOCATION_FIELDS, SearchForm, SearchFormUpdate, SearchMode

PointerListener = Callable[[Optional[str]], None]


class TripSession:
    def __init__(self, session_id: str, generator: StructuredGenerator, quiet_period: Optional[float] = None):
        self.id = session_id
        self.form = SearchForm()
        self.airports = AirportSuggestionClient(generator)
        self.suggestions = SuggestionDebouncer(
            self.airports.lookup_airports,
            quiet_period=quiet_period,
            echo=self._echo,
        )
        self.search = SearchOrchestrator(StructuredSearchClient(generator), self.form)
        self.pointer_listeners: List[PointerListener] = []
        self.closed = False
        self._start()

    def _start(self) -> None:
        # Pointer-down observer lives exactly as long as the session
        if self.suggestions.on_pointer_down not in self.pointer_listeners:
            self.pointer_listeners.append(self.suggestions.on_pointer_down)
        log_event("session_started", session_id=self.id)

    def _echo(self, field_id: str, text: str) -> None:
        setattr(self.form, field_id, text)

    def type_location(self, field_id: str, text: str) -> None:
        self.suggestions.on_field_change(field_id, text)

    def select_suggestion(self, field_id: str, index: int) -> str:
        return self.suggestions.select(field_id, index)

    def pointer_down(self, target_field: Optional[str]) -> None:
        for listener in list(self.pointer_listeners):
            listener(target_field)

    def update_form(self, update: SearchFormUpdate) -> None:
        changes = update.model_dump(exclude_none=True)
        round_trip = changes.pop("is_round_trip", None)
        for name, value in changes.items():
            setattr(self.form, name, value)
        if round_trip is not None:
            self.form.set_round_trip(round_trip)

    def switch_mode(self, mode: SearchMode) -> None:
        self.search.switch_mode(mode)

    async def submit(self, trigger: str = "button") -> bool:
        if trigger == "enter":
            return await self.search.on_enter()
        return await self.search.submit()

    def close(self) -> None:
        if self.closed:
            return
        if self.suggestions.on_pointer_down in self.pointer_listeners:
            self.pointer_listeners.remove(self.suggestions.on_pointer_down)
        self.suggestions.close()
        self.closed = True
        log_event("session_closed", session_id=self.id)

    def rendered(self) -> str:
        search = self.search
        round_trip = search.last_query.is_round_trip if search.last_query else self.form.is_round_trip
        return format_result(
            search.result,
            search.mode,
            round_trip=round_trip,
            loading_message=search.loading_message() if search.loading else None,
        )

    def snapshot(self) -> Dict[str, Any]:
        search = self.search
        return {
            "id": self.id,
            "mode": search.mode.value,
            "status": search.status.value,
            "error": search.error,
            "can_submit": search.can_submit(),
            "form": self.form.model_dump(mode="json"),
            "active_suggestion_box": self.suggestions.active_field,
            "suggestions": {
                f: [format_suggestion(s) for s in self.suggestions.visible_suggestions(f)]
                for f in LOCATION_FIELDS
            },
            "result": search.result.model_dump(mode="json", by_alias=True),
            "rendered": self.rendered(),
        }
