"""
Search Orchestrator

Session-scoped state machine for the two search modes:

    IDLE -> VALIDATING -> LOADING -> SUCCESS | FAILED
    VALIDATING -> IDLE          (required fields missing, no request made)
    LOADING -> IDLE             (the awaiting task was cancelled)
    any -> IDLE                 (mode switch, full reset)

Every submit and every mode switch advances the epoch. A response is applied
only if the epoch it was issued under is still current, so a late answer from
an abandoned search can never overwrite newer state.
"""

import asyncio
from enum import Enum
from typing import Optional

from trip_finder.errors import QueryValidationError, SchemaConformanceError, TransportError
from trip_finder.obs.logger import log_event
from trip_finder.prompts.builder import build_prompt
from trip_finder.search.client import StructuredSearchClient
from trip_finder.search.parse import parse_explore_result, parse_flight_result
from trip_finder.search.validator import QueryValidator, create_validator, missing_fields
from trip_finder.types import EmptyResult, ErrorResult, SearchForm, SearchMode, SearchResult, TripQuery


class SearchStatus(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


TRANSPORT_MESSAGES = {
    SearchMode.FIND: (
        "Sorry, an error occurred while fetching flight information. "
        "Please check your connection or API key and try again."
    ),
    SearchMode.EXPLORE: (
        "Sorry, an error occurred while finding destinations. "
        "Please check your connection or API key and try again."
    ),
}

FORMAT_MESSAGES = {
    SearchMode.FIND: "There was an issue processing the flight data. The format was unexpected.",
    SearchMode.EXPLORE: "There was an issue processing the destination data. The format was unexpected.",
}

LOADING_MESSAGES = {
    SearchMode.FIND: "Scanning the skies for the best deals...",
    SearchMode.EXPLORE: "Finding inspiring adventures for you...",
}


class SearchOrchestrator:
    """Validate, dispatch and apply one search at a time for a session"""

    def __init__(
        self,
        client: StructuredSearchClient,
        form: SearchForm,
        validator: Optional[QueryValidator] = None,
        mode: SearchMode = SearchMode.FIND,
    ):
        self.client = client
        self.form = form
        self.validator = validator or create_validator()
        self.mode = mode
        self.status = SearchStatus.IDLE
        self.result: SearchResult = EmptyResult()
        self.error = ""
        self.epoch = 0
        self.last_query: Optional[TripQuery] = None

    @property
    def loading(self) -> bool:
        return self.status == SearchStatus.LOADING

    def _reset_results(self) -> None:
        self.result = EmptyResult()
        self.error = ""

    def switch_mode(self, mode: SearchMode) -> None:
        """Start a clean session in ``mode``. In-flight responses become stale."""
        self.mode = mode
        self.epoch += 1
        self._reset_results()
        self.last_query = None
        self.status = SearchStatus.IDLE
        log_event("mode_switched", mode=mode.value, epoch=self.epoch)

    def can_submit(self) -> bool:
        return not self.loading and not missing_fields(self.mode, self.form)

    def loading_message(self) -> str:
        return LOADING_MESSAGES[self.mode]

    async def on_enter(self) -> bool:
        """Enter key: submits only when the submit control would be enabled."""
        if not self.can_submit():
            return False
        return await self.submit()

    async def submit(self) -> bool:
        """Run one search. Returns False if rejected because one is in flight."""
        if self.loading:
            log_event("search_rejected", level="WARNING", reason="already_loading", epoch=self.epoch)
            return False

        self.status = SearchStatus.VALIDATING
        try:
            query = self.validator.to_query(self.mode, self.form)
        except QueryValidationError as e:
            # Only one message on screen: drop a stale failure panel
            if isinstance(self.result, ErrorResult):
                self.result = EmptyResult()
            self.error = e.message
            self.status = SearchStatus.IDLE
            log_event("search_invalid", mode=self.mode.value, missing=e.missing)
            return True

        self.epoch += 1
        epoch = self.epoch
        mode = self.mode
        self._reset_results()
        self.last_query = query
        self.status = SearchStatus.LOADING

        prompt, schema = build_prompt(query)
        try:
            text = await self.client.execute(prompt, schema, purpose=_purpose(mode))
            result = parse_flight_result(text) if mode == SearchMode.FIND else parse_explore_result(text)
        except TransportError:
            if self._is_stale(epoch):
                return True
            self._fail(TRANSPORT_MESSAGES[mode])
            return True
        except SchemaConformanceError as e:
            if self._is_stale(epoch):
                return True
            log_event("search_bad_format", level="ERROR", mode=mode.value, error=str(e), raw=e.raw_text)
            self._fail(FORMAT_MESSAGES[mode])
            return True
        except asyncio.CancelledError:
            if epoch == self.epoch and self.loading:
                self.status = SearchStatus.IDLE
                log_event("search_cancelled", level="WARNING", mode=mode.value, epoch=epoch)
            raise

        if self._is_stale(epoch):
            return True
        self.result = result
        self.status = SearchStatus.SUCCESS
        log_event("search_succeeded", mode=mode.value, epoch=epoch, kind=result.kind)
        return True

    def _is_stale(self, epoch: int) -> bool:
        if epoch == self.epoch:
            return False
        log_event("search_response_discarded", epoch=epoch, current_epoch=self.epoch)
        return True

    def _fail(self, message: str) -> None:
        self.error = message
        self.result = ErrorResult(message=message)
        self.status = SearchStatus.FAILED


def _purpose(mode: SearchMode) -> str:
    return "flight_search" if mode == SearchMode.FIND else "explore"
