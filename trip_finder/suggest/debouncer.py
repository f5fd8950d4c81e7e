"""
Suggestion Debouncer

Turns raw keystrokes on the location fields into at most one airport lookup
per field. Each keystroke bumps the field's generation and replaces whatever
lookup was scheduled or running for that field; a lookup result is applied
only while its generation is still the latest one for the field.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

from trip_finder.config import settings
from trip_finder.obs.logger import log_event
from trip_finder.types import LOCATION_FIELDS, AirportSuggestion

Lookup = Callable[[str], Awaitable[List[AirportSuggestion]]]
Echo = Callable[[str, str], None]


@dataclass
class FieldSuggestions:
    """Autocomplete state for one location field"""
    text: str = ""
    suggestions: List[AirportSuggestion] = field(default_factory=list)
    generation: int = 0
    pending: Optional[asyncio.Task] = None


def suggestion_label(suggestion: AirportSuggestion) -> str:
    """Text written into the field when a suggestion is picked."""
    return f"{suggestion.name} ({suggestion.iata_code})"


class SuggestionDebouncer:
    def __init__(
        self,
        lookup: Lookup,
        quiet_period: Optional[float] = None,
        min_chars: Optional[int] = None,
        echo: Optional[Echo] = None,
    ):
        self.lookup = lookup
        if quiet_period is None:
            quiet_period = settings.SUGGESTION_DEBOUNCE_MS / 1000.0
        self.quiet_period = quiet_period
        self.min_chars = settings.SUGGESTION_MIN_CHARS if min_chars is None else min_chars
        self.echo = echo
        self.fields: Dict[str, FieldSuggestions] = {f: FieldSuggestions() for f in LOCATION_FIELDS}
        self.active_field: Optional[str] = None

    def _field(self, field_id: str) -> FieldSuggestions:
        try:
            return self.fields[field_id]
        except KeyError:
            raise ValueError(f"Unknown suggestion field: {field_id}") from None

    def _invalidate(self, state: FieldSuggestions) -> int:
        """Cancel anything scheduled for the field and start a new generation."""
        if state.pending is not None and not state.pending.done():
            state.pending.cancel()
        state.pending = None
        state.generation += 1
        return state.generation

    def on_field_change(self, field_id: str, text: str) -> None:
        """Record a keystroke. Must be called from inside the event loop."""
        state = self._field(field_id)
        state.text = text
        if self.echo:
            self.echo(field_id, text)

        generation = self._invalidate(state)

        if len(text) > self.min_chars:
            self.active_field = field_id
            state.pending = asyncio.get_running_loop().create_task(
                self._lookup_after_quiet_period(field_id, text, generation)
            )
        else:
            self.active_field = None
            state.suggestions = []

    async def _lookup_after_quiet_period(self, field_id: str, text: str, generation: int) -> None:
        await asyncio.sleep(self.quiet_period)

        state = self.fields[field_id]
        try:
            suggestions = await self.lookup(text)
        except Exception as e:
            log_event("suggestion_lookup_failed", level="WARNING", field=field_id, error=f"{type(e).__name__}: {e}")
            suggestions = []

        if generation != state.generation:
            log_event("suggestion_discarded", level="DEBUG", field=field_id, generation=generation, latest=state.generation)
            return

        state.suggestions = list(suggestions)
        state.pending = None
        log_event("suggestions_applied", field=field_id, count=len(state.suggestions))

    def visible_suggestions(self, field_id: str) -> List[AirportSuggestion]:
        state = self._field(field_id)
        if self.active_field != field_id:
            return []
        return list(state.suggestions)

    def select(self, field_id: str, index: int) -> str:
        """Pick a suggestion: fill the field, clear its list, close the box."""
        state = self._field(field_id)
        if index < 0 or index >= len(state.suggestions):
            raise ValueError(f"No suggestion at index {index} for {field_id}")

        text = suggestion_label(state.suggestions[index])
        self._invalidate(state)
        state.text = text
        state.suggestions = []
        if self.echo:
            self.echo(field_id, text)
        self.active_field = None
        return text

    def on_pointer_down(self, target_field: Optional[str]) -> None:
        """Close the active box when the pointer lands outside its container."""
        if self.active_field is not None and target_field != self.active_field:
            self.active_field = None

    async def drain(self) -> None:
        """Wait for the lookups currently scheduled or running."""
        tasks = [s.pending for s in self.fields.values() if s.pending is not None and not s.pending.done()]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def close(self) -> None:
        for state in self.fields.values():
            self._invalidate(state)
        self.active_field = None
