import json

import pytest

from flashdeck.application.collection import CardCollection
from flashdeck.application.repository import CardRepository
from flashdeck.application.scoring import apply_correct, apply_incorrect, mark_correct, mark_incorrect
from flashdeck.domain.errors import StorageError
from flashdeck.domain.models import Card


@pytest.mark.parametrize("old", [0, 1, 4, 99])
def test_correct_adds_exactly_one(old):
    card = Card("f", "b", [], old)
    assert apply_correct(card) == old + 1


@pytest.mark.parametrize("old,new", [(5, 1), (2, 0), (0, 0), (3, 0), (4, 1), (17, 4)])
def test_incorrect_floors_quarter(old, new):
    card = Card("f", "b", [], old)
    assert apply_incorrect(card) == new


def test_incorrect_never_negative():
    for old in range(50):
        card = Card("f", "b", [], old)
        assert apply_incorrect(card) == old // 4 >= 0


@pytest.mark.asyncio
async def test_mark_correct_persists_before_returning(gateway, sample_cards):
    collection = CardCollection(sample_cards)
    repo = CardRepository(gateway)

    score = await mark_correct(collection, 1, repo)

    assert score == 4
    assert len(gateway.saves) == 1
    saved = json.loads(gateway.saves[0][1])
    assert saved[1]["score"] == 4


@pytest.mark.asyncio
async def test_mark_incorrect_persists(gateway, sample_cards):
    collection = CardCollection(sample_cards)
    score = await mark_incorrect(collection, 2, CardRepository(gateway))
    assert score == 1
    assert json.loads(gateway.saves[0][1])[2]["score"] == 1


@pytest.mark.asyncio
async def test_failed_save_propagates(gateway, sample_cards):
    gateway.fail_with = StorageError("disk full")
    collection = CardCollection(sample_cards)

    with pytest.raises(StorageError, match="disk full"):
        await mark_correct(collection, 0, CardRepository(gateway))
    assert gateway.saves == []
