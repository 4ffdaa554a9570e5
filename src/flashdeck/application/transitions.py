"""
Show/hide sequencing for view regions.

Each region is a small state machine: HIDDEN or VISIBLE when settled, with at
most one in-flight transition toward one of those. Operations are idempotent
at the start-state check:

- A region already in the requested state resolves immediately.
- A request matching the in-flight target joins that transition.
- A request opposing the in-flight target waits for it to finish, then runs.

There is no cancellation. A transition that has started always runs to the
end, even if every caller awaiting it is cancelled.
"""

import asyncio
import logging
import math
from abc import ABC, abstractmethod

from flashdeck.domain.constants import FADE_DURATION, FADE_FPS
from flashdeck.domain.models import RegionState
from flashdeck.domain.ports import ViewPort

logger = logging.getLogger(__name__)


class Transition(ABC):
    """How a single region moves between hidden and visible."""

    @abstractmethod
    async def show(self, view: ViewPort, region_id: str) -> None:
        pass

    @abstractmethod
    async def hide(self, view: ViewPort, region_id: str) -> None:
        pass


class InstantTransition(Transition):
    """Flip the region's display state with no animation."""

    async def show(self, view: ViewPort, region_id: str) -> None:
        view.set_opacity(region_id, 1.0)
        view.set_region_state(region_id, RegionState.VISIBLE)

    async def hide(self, view: ViewPort, region_id: str) -> None:
        view.set_opacity(region_id, 0.0)
        view.set_region_state(region_id, RegionState.HIDDEN)


class FadeTransition(Transition):
    """
    Linear opacity ramp, one step per animation frame.

    With the defaults (0.25 s at 30 frames/s) each frame moves opacity by
    1 / 7.5, clamped to [0, 1], so a fade takes eight frames.
    """

    def __init__(self, duration: float = FADE_DURATION, fps: float = FADE_FPS):
        if duration <= 0 or fps <= 0:
            raise ValueError("Fade duration and fps must be positive")
        self.duration = duration
        self.fps = fps

    @property
    def step(self) -> float:
        return 1.0 / (self.duration * self.fps)

    @property
    def interval(self) -> float:
        return 1.0 / self.fps

    @property
    def frame_count(self) -> int:
        return math.ceil(self.duration * self.fps)

    async def show(self, view: ViewPort, region_id: str) -> None:
        opacity = 0.0
        view.set_opacity(region_id, opacity)
        view.set_region_state(region_id, RegionState.VISIBLE)
        while opacity < 1.0:
            await view.next_frame(self.interval)
            opacity = min(opacity + self.step, 1.0)
            view.set_opacity(region_id, opacity)

    async def hide(self, view: ViewPort, region_id: str) -> None:
        opacity = 1.0
        view.set_opacity(region_id, opacity)
        while opacity > 0.0:
            await view.next_frame(self.interval)
            opacity = max(opacity - self.step, 0.0)
            view.set_opacity(region_id, opacity)
        view.set_region_state(region_id, RegionState.HIDDEN)


class TransitionEngine:
    """Drives regions of a ViewPort through idempotent, awaitable transitions."""

    def __init__(self, view: ViewPort, transition: Transition | None = None):
        self.view = view
        self.transition = transition or InstantTransition()
        self._states: dict[str, RegionState] = {}
        self._pending: dict[str, tuple[RegionState, asyncio.Task]] = {}

    def state(self, region_id: str) -> RegionState:
        """Last settled state; read from the view the first time a region is seen."""
        if region_id not in self._states:
            self._states[region_id] = self.view.region_state(region_id)
        return self._states[region_id]

    def target(self, region_id: str) -> RegionState:
        """The in-flight target if a transition is running, else the settled state."""
        pending = self._pending.get(region_id)
        if pending is not None:
            return pending[0]
        return self.state(region_id)

    def is_transitioning(self, region_id: str) -> bool:
        return region_id in self._pending

    async def show(self, region_id: str) -> None:
        await self._request(region_id, RegionState.VISIBLE)

    async def hide(self, region_id: str) -> None:
        await self._request(region_id, RegionState.HIDDEN)

    async def switch_screen(self, target_id: str) -> None:
        """
        Hide every other screen region concurrently, then show the target.

        The target is never shown before all siblings have finished hiding.
        """
        siblings = [r for r in self.view.screen_regions() if r != target_id]
        await asyncio.gather(*(self.hide(r) for r in siblings))
        await self.show(target_id)

    async def flip(self, first_id: str, second_id: str) -> None:
        """Swap which of two regions is visible, running both sides concurrently."""
        if self.target(first_id) is RegionState.VISIBLE:
            await asyncio.gather(self.hide(first_id), self.show(second_id))
        else:
            await asyncio.gather(self.show(first_id), self.hide(second_id))

    async def settle(self, *region_ids: str) -> None:
        """Wait until no transition is in flight on the given regions (all if none given)."""
        regions = list(region_ids) or list(self._pending)
        for region_id in regions:
            while region_id in self._pending:
                await asyncio.shield(self._pending[region_id][1])

    async def _request(self, region_id: str, target: RegionState) -> None:
        while region_id in self._pending:
            pending_target, task = self._pending[region_id]
            await asyncio.shield(task)
            if pending_target is target:
                return

        if self.state(region_id) is target:
            return

        logger.debug(f"{region_id}: {self.state(region_id).value} -> {target.value}")
        task = asyncio.ensure_future(self._run(region_id, target))
        self._pending[region_id] = (target, task)
        await asyncio.shield(task)

    async def _run(self, region_id: str, target: RegionState) -> None:
        try:
            if target is RegionState.VISIBLE:
                await self.transition.show(self.view, region_id)
            else:
                await self.transition.hide(self.view, region_id)
            self._states[region_id] = target
        finally:
            self._pending.pop(region_id, None)
