import random

import pytest

from flashdeck.application.repository import CardRepository, encode_cards
from flashdeck.application.session import ReviewSession
from flashdeck.application.transitions import InstantTransition, TransitionEngine
from flashdeck.application.weighting import harmonic_decay
from flashdeck.domain.models import Card
from flashdeck.infrastructure.storage import MemoryGateway
from flashdeck.infrastructure.view import HeadlessViewPort


class CountingGateway(MemoryGateway):
    """MemoryGateway that records every save and can be told to fail."""

    def __init__(self, blobs=None):
        super().__init__(blobs)
        self.saves: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    async def save(self, key: str, data: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.saves.append((key, data))
        await super().save(key, data)


@pytest.fixture
def gateway():
    return CountingGateway()


@pytest.fixture
def view():
    return HeadlessViewPort(frame_scale=0.0)


@pytest.fixture
def engine(view):
    return TransitionEngine(view, InstantTransition())


@pytest.fixture
def sample_cards():
    return [
        Card("hallo", "hello", ["dutch"], 0),
        Card("dank je", "thank you", ["dutch", "polite"], 3),
        Card("bonjour", "hello", ["french"], 7),
    ]


@pytest.fixture
def session_factory(gateway, engine):
    """Builds a ReviewSession over the shared gateway, seeded with the given cards."""

    def build(cards=None, tag="", seed=0):
        if cards is not None:
            gateway.blobs["cards.json"] = encode_cards(cards)
        return ReviewSession(
            repository=CardRepository(gateway, "cards.json"),
            engine=engine,
            weight=harmonic_decay,
            tag=tag,
            rng=random.Random(seed),
        )

    return build


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config
    monkeypatch.setenv("HOME", str(home))
    return home
