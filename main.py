from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from trip_finder.config import settings
from trip_finder.llm.generator import StructuredGenerator, create_llm
from trip_finder.obs.context import session_id_var
from trip_finder.obs.logger import log_event
from trip_finder.obs.metrics import get_metrics_snapshot
from trip_finder.obs.middleware import ObservabilityMiddleware
from trip_finder.session.store import SessionStore
from trip_finder.session.trip import TripSession
from trip_finder.types import LocationField, SearchFormUpdate, SearchMode

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    print("[INFO] Starting Trip Finder")
    app.state.generator = StructuredGenerator(create_llm())
    app.state.sessions = SessionStore(app.state.generator)
    log_event("startup", env=settings.APP_ENV, model=settings.OPENAI_MODEL)

    yield

    # Shutdown
    app.state.sessions.close_all()
    print("[INFO] Shutting down Trip Finder")


api = FastAPI(
    title="Trip Finder",
    version="1.0.0",
    lifespan=lifespan,
)


class KeystrokeIn(BaseModel):
    text: str


class SelectIn(BaseModel):
    index: int


class PointerIn(BaseModel):
    target: Optional[LocationField] = None


class ModeIn(BaseModel):
    mode: SearchMode


class SearchIn(BaseModel):
    trigger: str = "button"  # "button" or "enter"


def _session(request: Request, session_id: str) -> TripSession:
    session = request.app.state.sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Unknown or expired session")
    session_id_var.set(session.id)
    return session


@api.get("/")
async def root():
    return {
        "service": "Trip Finder",
        "version": "1.0.0",
        "status": "running",
        "modes": [m.value for m in SearchMode],
    }


@api.get("/health")
async def health():
    return {"status": "healthy", "service": "trip-finder"}


@api.get("/metrics")
async def metrics(request: Request):
    snapshot = get_metrics_snapshot()
    sessions = getattr(request.app.state, "sessions", None)
    snapshot["sessions"] = len(sessions) if sessions is not None else 0
    return snapshot


@api.post("/sessions", status_code=201)
async def create_session(request: Request):
    session = request.app.state.sessions.create()
    session_id_var.set(session.id)
    return session.snapshot()


@api.get("/sessions/{session_id}")
async def get_session(request: Request, session_id: str):
    return _session(request, session_id).snapshot()


@api.delete("/sessions/{session_id}")
async def delete_session(request: Request, session_id: str):
    if not request.app.state.sessions.clear(session_id):
        raise HTTPException(status_code=404, detail="Unknown or expired session")
    return {"status": "closed", "id": session_id}


@api.patch("/sessions/{session_id}/form")
async def update_form(request: Request, session_id: str, update: SearchFormUpdate):
    session = _session(request, session_id)
    session.update_form(update)
    return session.snapshot()


@api.post("/sessions/{session_id}/fields/{field}")
async def keystroke(request: Request, session_id: str, field: LocationField, body: KeystrokeIn):
    session = _session(request, session_id)
    session.type_location(field, body.text)
    return session.snapshot()


@api.get("/sessions/{session_id}/suggestions/{field}")
async def suggestions(request: Request, session_id: str, field: LocationField, wait: bool = False):
    session = _session(request, session_id)
    if wait:
        await session.suggestions.drain()
    return {
        "field": field,
        "active": session.suggestions.active_field == field,
        "suggestions": [
            s.model_dump(by_alias=True) for s in session.suggestions.visible_suggestions(field)
        ],
    }


@api.post("/sessions/{session_id}/fields/{field}/select")
async def select_suggestion(request: Request, session_id: str, field: LocationField, body: SelectIn):
    session = _session(request, session_id)
    try:
        session.select_suggestion(field, body.index)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return session.snapshot()


@api.post("/sessions/{session_id}/pointer")
async def pointer_down(request: Request, session_id: str, body: PointerIn):
    session = _session(request, session_id)
    session.pointer_down(body.target)
    return session.snapshot()


@api.post("/sessions/{session_id}/mode")
async def switch_mode(request: Request, session_id: str, body: ModeIn):
    session = _session(request, session_id)
    session.switch_mode(body.mode)
    return session.snapshot()


@api.post("/sessions/{session_id}/search")
async def search(request: Request, session_id: str, body: Optional[SearchIn] = None):
    session = _session(request, session_id)
    trigger = body.trigger if body else "button"
    accepted = await session.submit(trigger)
    if not accepted and session.search.loading:
        raise HTTPException(status_code=409, detail="A search is already in progress")
    return session.snapshot()


# Apply middleware
app = ObservabilityMiddleware(api)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
        log_level="info"
    )
