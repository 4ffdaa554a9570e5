"""Tests for the review session orchestrator."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from flashdeck.domain.constants import (
    ADD_SCREEN,
    CARD_BACK,
    CARD_FRONT,
    CARD_SCREEN,
    EMPTY_SCREEN,
    WAITING_SCREEN,
)
from flashdeck.domain.errors import NoCardSelectedError, StorageError
from flashdeck.domain.models import Card, RegionState

VISIBLE = RegionState.VISIBLE


@pytest.mark.asyncio
async def test_start_on_missing_blob_shows_empty_screen(session_factory, gateway, view):
    session = session_factory()

    index = await session.start()

    assert index is None
    assert session.current_index is None
    assert gateway.saves == [("cards.json", "[]")]
    assert view.region_state(EMPTY_SCREEN) is VISIBLE
    assert view.content[EMPTY_SCREEN] == "No cards yet."


@pytest.mark.asyncio
async def test_start_shows_one_face_of_selected_card(session_factory, sample_cards, view):
    session = session_factory(sample_cards)

    index = await session.start()

    assert index == session.current_index
    assert view.region_state(CARD_SCREEN) is VISIBLE
    card = session.current_card
    faces = {view.region_state(CARD_FRONT), view.region_state(CARD_BACK)}
    assert faces == {VISIBLE, RegionState.HIDDEN}
    assert view.visible_face() in (
        f"{card.front}\nScore: {card.score}",
        f"{card.back}\nScore: {card.score}",
    )


@pytest.mark.asyncio
async def test_tag_filter_restricts_selection(session_factory, sample_cards):
    session = session_factory(sample_cards, tag="french")
    for _ in range(10):
        assert await session.next_card() == 2


@pytest.mark.asyncio
async def test_set_tag_with_no_match_shows_empty_screen(session_factory, sample_cards, view):
    session = session_factory(sample_cards)
    await session.start()

    assert await session.set_tag("german") is None
    assert session.current_index is None
    assert view.region_state(EMPTY_SCREEN) is VISIBLE
    assert view.region_state(CARD_SCREEN) is RegionState.HIDDEN


@pytest.mark.asyncio
async def test_mark_correct_saves_before_next_draw(session_factory, sample_cards, gateway):
    session = session_factory(sample_cards)
    await session.start()
    index = session.current_index
    old = session.collection[index].score

    draws = []
    original = session.next_card

    async def spy():
        # The save must already be visible to the gateway when re-selecting.
        draws.append(len(gateway.saves))
        return await original()

    session.next_card = spy
    new = await session.mark_correct()

    assert new == old + 1
    assert draws == [1]
    assert json.loads(gateway.saves[-1][1])[index]["score"] == old + 1


@pytest.mark.asyncio
async def test_mark_incorrect_quarters_score(session_factory, gateway):
    session = session_factory([Card("a", "b", [], 5)])
    await session.start()
    assert await session.mark_incorrect() == 1
    assert session.collection[0].score == 1


@pytest.mark.asyncio
async def test_failed_save_stops_before_next_round(session_factory, sample_cards, gateway):
    session = session_factory(sample_cards)
    await session.start()
    index = session.current_index
    gateway.fail_with = StorageError("offline")

    with pytest.raises(StorageError):
        await session.mark_correct()
    # No re-selection happened: the same card is still current.
    assert session.current_index == index


@pytest.mark.asyncio
async def test_operations_need_a_current_card(session_factory):
    session = session_factory()
    await session.start()
    with pytest.raises(NoCardSelectedError):
        await session.mark_correct()
    with pytest.raises(NoCardSelectedError):
        await session.flip()
    with pytest.raises(NoCardSelectedError):
        await session.remove_current()
    with pytest.raises(NoCardSelectedError):
        await session.edit_current()


@pytest.mark.asyncio
async def test_flip_swaps_visible_face(session_factory, sample_cards, view):
    session = session_factory(sample_cards)
    await session.start()
    before = view.region_state(CARD_FRONT)

    await session.flip()

    assert view.region_state(CARD_FRONT) is not before


@pytest.mark.asyncio
async def test_add_card_saves_and_reselects(session_factory, gateway, view):
    session = session_factory()
    await session.start()

    index = await session.add_card("vraag", "question", " nl , words")

    assert index == 0
    assert session.collection[0].tags == ["nl", "words"]
    assert session.current_index == 0
    assert json.loads(gateway.saves[-1][1])[0]["front"] == "vraag"
    assert view.content[WAITING_SCREEN] == "Saving..."
    assert view.region_state(CARD_SCREEN) is VISIBLE


@pytest.mark.asyncio
async def test_add_card_with_replace(session_factory, sample_cards):
    session = session_factory(sample_cards)
    await session.start()

    await session.add_card("hallo", "hi there", "", replace=True)

    fronts = [c.front for c in session.collection]
    assert fronts.count("hallo") == 1
    assert session.collection[len(fronts) - 1].back == "hi there"


@pytest.mark.asyncio
async def test_remove_current_persists(session_factory, sample_cards, gateway):
    session = session_factory(sample_cards)
    await session.start()
    await session.show_card(1)

    removed = await session.remove_current()

    assert removed.front == "dank je"
    assert len(session.collection) == 2
    assert [c["front"] for c in json.loads(gateway.saves[-1][1])] == ["hallo", "bonjour"]


@pytest.mark.asyncio
async def test_edit_removes_immediately_and_prefills(session_factory, sample_cards, gateway, view):
    session = session_factory(sample_cards)
    await session.start()
    await session.show_card(1)

    form = await session.edit_current()

    assert (form.front, form.back, form.tags_text) == ("dank je", "thank you", "dutch,polite")
    assert len(session.collection) == 2
    assert session.current_index is None
    assert len(json.loads(gateway.saves[-1][1])) == 2
    assert view.region_state(ADD_SCREEN) is VISIBLE


@pytest.mark.asyncio
async def test_edit_then_resubmit_restores_card(session_factory, sample_cards):
    session = session_factory(sample_cards)
    await session.start()
    await session.show_card(0)

    form = await session.edit_current()
    await session.add_card(form.front, "hi", form.tags_text)

    assert len(session.collection) == 3
    assert session.collection[2].front == "hallo"
    assert session.collection[2].tags == ["dutch"]
    assert session.collection[2].score == 0


@pytest.mark.asyncio
async def test_show_card_out_of_range(session_factory, sample_cards):
    session = session_factory(sample_cards)
    await session.start()
    with pytest.raises(IndexError):
        await session.show_card(3)
    with pytest.raises(IndexError):
        await session.show_card(-1)


@pytest.mark.asyncio
async def test_read_models(session_factory, sample_cards, view):
    session = session_factory(sample_cards, tag="dutch")
    await session.start()

    assert session.average() == 1.5
    assert session.average_text() == "1.50"
    assert [r.index for r in session.listing()] == [0, 1]
    assert session.tags() == ["dutch", "polite", "french"]

    rows = await session.show_list()
    assert len(rows) == 2
    assert "hallo ⇄ hello" in view.content["list_screen"]


@pytest.mark.asyncio
async def test_aclose_releases_gateway(session_factory, gateway):
    session = session_factory()
    with patch.object(gateway, "aclose", new_callable=AsyncMock) as closed:
        await session.aclose()
    closed.assert_awaited_once()
