import logging
import math
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from flashdeck import VERSION
from flashdeck.application.config import resolve_config
from flashdeck.application.factory import open_session
from flashdeck.application.session import ReviewSession
from flashdeck.domain.constants import CARD_BACK, CARD_FRONT
from flashdeck.domain.errors import NoCardSelectedError, StorageError
from flashdeck.domain.models import RegionState

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("flashdeck.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"flashdeck server v{VERSION} starting up...")
    if getattr(app.state, "session", None) is None:
        session = await open_session(resolve_config())
        await session.start()
        app.state.session = session
    yield
    # Shutdown
    logger.info("flashdeck server shutting down...")
    await app.state.session.aclose()


app = FastAPI(
    title="flashdeck server",
    description="Weighted flashcard review over HTTP.",
    version=VERSION,
    lifespan=lifespan,
)

start_time = time.time()


@app.exception_handler(NoCardSelectedError)
async def no_card_handler(request: Request, exc: NoCardSelectedError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_handler(request: Request, exc: StorageError):
    logger.error(f"Storage failure: {exc}")
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def get_session(request: Request) -> ReviewSession:
    return request.app.state.session


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float


class CardView(BaseModel):
    index: int
    front: str
    back: str
    tags: list[str]
    score: int
    showing: str | None  # "front", "back" or None while hidden


class CurrentResponse(BaseModel):
    card: CardView | None
    tag: str
    average: float | None


class AddRequest(BaseModel):
    front: str
    back: str
    tags: str = ""
    replace: bool = False


class TagRequest(BaseModel):
    tag: str = ""


class EditResponse(BaseModel):
    front: str
    back: str
    tags: str


class ListingRow(BaseModel):
    index: int
    front: str
    back: str
    score: int


class ListingResponse(BaseModel):
    tag: str
    tags: list[str]
    cards: list[ListingRow]


def _current(session: ReviewSession) -> CurrentResponse:
    card_view = None
    card = session.current_card
    if card is not None:
        showing = None
        if session.engine.target(CARD_FRONT) is RegionState.VISIBLE:
            showing = "front"
        elif session.engine.target(CARD_BACK) is RegionState.VISIBLE:
            showing = "back"
        card_view = CardView(
            index=session.current_index,
            front=card.front,
            back=card.back,
            tags=list(card.tags),
            score=card.score,
            showing=showing,
        )
    average = session.average()
    return CurrentResponse(
        card=card_view, tag=session.tag, average=None if math.isnan(average) else average
    )


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Simple health check to verify server is reachable.
    """
    return HealthResponse(status="ok", version=VERSION, uptime_seconds=time.time() - start_time)


@app.get("/card", response_model=CurrentResponse)
async def get_card(session: ReviewSession = Depends(get_session)):
    return _current(session)


@app.post("/card/next", response_model=CurrentResponse)
async def next_card(session: ReviewSession = Depends(get_session)):
    await session.next_card()
    return _current(session)


@app.post("/card/flip", response_model=CurrentResponse)
async def flip_card(session: ReviewSession = Depends(get_session)):
    await session.flip()
    return _current(session)


@app.post("/card/correct", response_model=CurrentResponse)
async def mark_correct(session: ReviewSession = Depends(get_session)):
    await session.mark_correct()
    return _current(session)


@app.post("/card/incorrect", response_model=CurrentResponse)
async def mark_incorrect(session: ReviewSession = Depends(get_session)):
    await session.mark_incorrect()
    return _current(session)


@app.post("/card/edit", response_model=EditResponse)
async def edit_card(session: ReviewSession = Depends(get_session)):
    """Take the current card out for editing. Re-submit it through POST /cards."""
    form = await session.edit_current()
    return EditResponse(front=form.front, back=form.back, tags=form.tags_text)


@app.delete("/card", response_model=CurrentResponse)
async def remove_card(session: ReviewSession = Depends(get_session)):
    await session.remove_current()
    return _current(session)


@app.post("/cards/{index}/show", response_model=CurrentResponse)
async def show_card(index: int, session: ReviewSession = Depends(get_session)):
    try:
        await session.show_card(index)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return _current(session)


@app.get("/cards", response_model=ListingResponse)
async def list_cards(session: ReviewSession = Depends(get_session)):
    rows = [
        ListingRow(index=r.index, front=r.front, back=r.back, score=r.score)
        for r in session.listing()
    ]
    return ListingResponse(tag=session.tag, tags=session.tags(), cards=rows)


@app.post("/cards", response_model=CurrentResponse, status_code=201)
async def add_card(req: AddRequest, session: ReviewSession = Depends(get_session)):
    logger.info(f"Adding card '{req.front}'")
    await session.add_card(req.front, req.back, req.tags, replace=req.replace)
    return _current(session)


@app.put("/tag", response_model=CurrentResponse)
async def set_tag(req: TagRequest, session: ReviewSession = Depends(get_session)):
    await session.set_tag(req.tag)
    return _current(session)


class StatsResponse(BaseModel):
    tag: str
    cards: int
    average: float | None  # None when no card matches the tag


@app.get("/stats", response_model=StatsResponse)
async def get_stats(session: ReviewSession = Depends(get_session)):
    average = session.average()
    return StatsResponse(
        tag=session.tag,
        cards=len(session.listing()),
        average=None if math.isnan(average) else average,
    )
