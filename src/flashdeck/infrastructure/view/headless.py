"""Display-free ViewPort that only tracks region state."""

import asyncio

from flashdeck.domain.constants import CARD_BACK, CARD_FRONT, SCREEN_REGIONS
from flashdeck.domain.models import RegionState
from flashdeck.domain.ports import ViewPort


class HeadlessViewPort(ViewPort):
    """
    Records region state, opacity and content in memory.

    Args:
        screens: Ids of the mutually exclusive screen regions.
        frame_scale: Multiplier applied to frame intervals; 0 makes fades
            finish without real delay while still yielding to the event loop.
    """

    def __init__(self, screens: list[str] | None = None, frame_scale: float = 1.0):
        self.screens = list(screens if screens is not None else SCREEN_REGIONS)
        self.frame_scale = frame_scale
        self.states: dict[str, RegionState] = {}
        self.opacity: dict[str, float] = {}
        self.content: dict[str, str] = {}
        self.history: list[tuple[str, RegionState]] = []
        self.frames = 0

    def screen_regions(self) -> list[str]:
        return list(self.screens)

    def region_state(self, region_id: str) -> RegionState:
        return self.states.get(region_id, RegionState.HIDDEN)

    def set_region_state(self, region_id: str, state: RegionState) -> None:
        self.states[region_id] = state
        self.history.append((region_id, state))

    def set_opacity(self, region_id: str, opacity: float) -> None:
        self.opacity[region_id] = opacity

    async def next_frame(self, interval: float) -> None:
        self.frames += 1
        await asyncio.sleep(interval * self.frame_scale)

    def set_content(self, region_id: str, content: str) -> None:
        self.content[region_id] = content

    def visible_regions(self) -> list[str]:
        return [r for r, s in self.states.items() if s is RegionState.VISIBLE]

    def visible_face(self) -> str | None:
        """Content of whichever card face is showing, if any."""
        for region_id in (CARD_FRONT, CARD_BACK):
            if self.region_state(region_id) is RegionState.VISIBLE:
                return self.content.get(region_id)
        return None
