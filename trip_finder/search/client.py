"""
Structured Search Client

One model call per search. The response text is returned as-is; parsing it
is the orchestrator's job. No retries and no timeout here: a failed call
surfaces as TransportError.
"""

from typing import Any, Dict

from trip_finder.errors import TransportError
from trip_finder.llm.generator import StructuredGenerator
from trip_finder.obs.logger import log_event
from trip_finder.obs.metrics import inc_counter, timed


class StructuredSearchClient:
    """Execute a prompt against the generator with a response schema"""

    def __init__(self, generator: StructuredGenerator):
        self.generator = generator

    async def execute(self, prompt_text: str, schema: Dict[str, Any], purpose: str = "search") -> str:
        log_event("search_request", purpose=purpose, prompt=prompt_text)
        try:
            with timed("llm_latency_ms", {"purpose": purpose}):
                text = await self.generator.generate(prompt_text, schema, name=purpose)
        except Exception as e:
            inc_counter("llm_calls_total", {"purpose": purpose, "outcome": "error"})
            log_event("search_transport_error", level="ERROR", purpose=purpose, error=f"{type(e).__name__}: {e}")
            raise TransportError(f"{purpose} call failed: {e}") from e

        inc_counter("llm_calls_total", {"purpose": purpose, "outcome": "ok"})
        return text
