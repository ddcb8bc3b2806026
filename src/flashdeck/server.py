import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel

from flashdeck.application.config import resolve_config
from flashdeck.application.deck_service import DeckService
from flashdeck.application.factory import get_deck_store
from flashdeck.application.id_service import generate_id
from flashdeck.application.session import SessionState, StudySession
from flashdeck.consts import VERSION
from flashdeck.domain.errors import (
    FlashdeckError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from flashdeck.domain.models import Card, Deck, Rating

logger = logging.getLogger("flashdeck.server")


@dataclass
class ActiveSession:
    deck_id: str
    session: StudySession


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    config = resolve_config()
    store = get_deck_store(config)
    store.open()
    app.state.store = store
    app.state.sessions = {}
    logger.info(f"flashdeck server v{VERSION} starting up (store: {config.data_path})")
    yield
    # Shutdown
    app.state.sessions.clear()
    store.close()
    logger.info("flashdeck server shutting down...")


app = FastAPI(
    title="flashdeck",
    description="Decks, cards and study sessions over HTTP.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


async def get_service(request: Request) -> DeckService:
    return DeckService(request.app.state.store)


async def get_sessions(request: Request) -> dict[str, ActiveSession]:
    return request.app.state.sessions


def _http_error(e: FlashdeckError) -> HTTPException:
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, InvalidTransitionError):
        return HTTPException(status_code=409, detail=str(e))
    logger.error(f"Request failed: {e}", exc_info=True)
    return HTTPException(status_code=500, detail=str(e))


# ---------- Response models ----------


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class CardView(BaseModel):
    id: str
    front: str
    back: str
    interval: int
    repetition: int
    ease_factor: float
    next_review_date: int
    last_difficulty: Rating | None
    is_done: bool

    @classmethod
    def of(cls, card: Card) -> "CardView":
        return cls(
            id=card.id,
            front=card.front,
            back=card.back,
            interval=card.interval,
            repetition=card.repetition,
            ease_factor=card.ease_factor,
            next_review_date=card.next_review_date,
            last_difficulty=card.last_difficulty,
            is_done=card.is_done,
        )


class DeckView(BaseModel):
    id: str
    name: str
    description: str
    due: int
    cards: list[CardView]

    @classmethod
    def of(cls, deck: Deck, due: int) -> "DeckView":
        return cls(
            id=deck.id,
            name=deck.name,
            description=deck.description,
            due=due,
            cards=[CardView.of(c) for c in deck.cards],
        )


class DeckSummaryView(BaseModel):
    id: str
    name: str
    total: int
    due: int


class SessionView(BaseModel):
    id: str
    deck_id: str
    state: SessionState
    position: int
    total: int
    revealed: bool
    front: str | None = None
    back: str | None = None  # only once revealed
    labels: dict[Rating, str] | None = None  # only once revealed


def _session_view(sid: str, active: ActiveSession) -> SessionView:
    session = active.session
    position, total = session.progress
    view = SessionView(
        id=sid,
        deck_id=active.deck_id,
        state=session.state,
        position=position,
        total=total,
        revealed=session.revealed,
    )
    if session.state is SessionState.ACTIVE:
        view.front = session.current.front
        if session.revealed:
            view.back = session.current.back
            view.labels = session.preview()
    return view


# ---------- Request models ----------


class DeckRequest(BaseModel):
    name: str
    description: str = ""


class CardRequest(BaseModel):
    front: str
    back: str


class RateRequest(BaseModel):
    rating: Rating


# ---------- Routes ----------


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/version")
async def get_version():
    return {"version": VERSION}


@app.get("/decks", response_model=list[DeckSummaryView])
async def list_decks(service: DeckService = Depends(get_service)):
    return [
        DeckSummaryView(id=s.deck_id, name=s.name, total=s.total, due=s.due)
        for s in service.deck_summaries()
    ]


@app.post("/decks", response_model=DeckView, status_code=201)
async def create_deck(req: DeckRequest, service: DeckService = Depends(get_service)):
    try:
        deck = service.create_deck(req.name, req.description)
    except FlashdeckError as e:
        raise _http_error(e) from e
    return DeckView.of(deck, due=0)


@app.get("/decks/{deck_id}", response_model=DeckView)
async def get_deck(deck_id: str, service: DeckService = Depends(get_service)):
    try:
        return DeckView.of(service.get_deck(deck_id), due=service.due_count(deck_id))
    except FlashdeckError as e:
        raise _http_error(e) from e


@app.post("/decks/{deck_id}/cards", response_model=CardView, status_code=201)
async def add_card(deck_id: str, req: CardRequest, service: DeckService = Depends(get_service)):
    try:
        return CardView.of(service.add_card(deck_id, req.front, req.back))
    except FlashdeckError as e:
        raise _http_error(e) from e


@app.post("/decks/{deck_id}/sessions", response_model=SessionView, status_code=201)
async def start_session(
    deck_id: str,
    service: DeckService = Depends(get_service),
    sessions: dict[str, ActiveSession] = Depends(get_sessions),
):
    """Start a study session over the cards due right now."""
    try:
        session = service.start_session(deck_id)
    except FlashdeckError as e:
        raise _http_error(e) from e

    sid = generate_id()
    sessions[sid] = ActiveSession(deck_id=deck_id, session=session)
    return _session_view(sid, sessions[sid])


def _lookup(sid: str, sessions: dict[str, ActiveSession]) -> ActiveSession:
    active = sessions.get(sid)
    if active is None:
        raise HTTPException(status_code=404, detail=f"Session '{sid}' not found")
    return active


@app.get("/sessions/{sid}", response_model=SessionView)
async def get_session(sid: str, sessions: dict[str, ActiveSession] = Depends(get_sessions)):
    return _session_view(sid, _lookup(sid, sessions))


@app.post("/sessions/{sid}/reveal", response_model=SessionView)
async def reveal(sid: str, sessions: dict[str, ActiveSession] = Depends(get_sessions)):
    active = _lookup(sid, sessions)
    try:
        active.session.reveal()
    except FlashdeckError as e:
        raise _http_error(e) from e
    return _session_view(sid, active)


@app.post("/sessions/{sid}/rate", response_model=SessionView)
async def rate(
    sid: str, req: RateRequest, sessions: dict[str, ActiveSession] = Depends(get_sessions)
):
    active = _lookup(sid, sessions)
    try:
        if active.session.state is SessionState.ACTIVE and not active.session.revealed:
            raise InvalidTransitionError("Reveal the answer before rating")
        active.session.rate(req.rating)
    except FlashdeckError as e:
        raise _http_error(e) from e
    return _session_view(sid, active)


@app.post("/sessions/{sid}/done", response_model=SessionView)
async def mark_done(sid: str, sessions: dict[str, ActiveSession] = Depends(get_sessions)):
    active = _lookup(sid, sessions)
    try:
        if active.session.state is SessionState.ACTIVE and not active.session.revealed:
            raise InvalidTransitionError("Reveal the answer before marking it done")
        active.session.mark_done()
    except FlashdeckError as e:
        raise _http_error(e) from e
    return _session_view(sid, active)


@app.delete("/sessions/{sid}", status_code=204)
async def acknowledge(
    sid: str,
    abandon: bool = False,
    sessions: dict[str, ActiveSession] = Depends(get_sessions),
):
    """
    Acknowledge a finished (or empty) session and forget it.

    With ``abandon=true`` an unfinished session is dropped as is. Cards rated
    so far are already saved; the rest keep their schedule.
    """
    active = _lookup(sid, sessions)
    if abandon and active.session.state not in (SessionState.FINISHED, SessionState.EMPTY):
        position, total = active.session.progress
        logger.info(f"Session {sid} abandoned at card {position}/{total}")
    else:
        try:
            active.session.acknowledge()
        except FlashdeckError as e:
            raise _http_error(e) from e
    del sessions[sid]
