import typer

from flashdeck.domain.constants import CARD_BACK, CARD_FRONT, EMPTY_SCREEN, WAITING_SCREEN
from flashdeck.domain.models import RegionState

from .headless import HeadlessViewPort

# Regions whose text is printed when they become visible.
_ECHOED = {
    CARD_FRONT: "cyan",
    CARD_BACK: "magenta",
    EMPTY_SCREEN: "yellow",
    WAITING_SCREEN: None,
}


class TerminalViewPort(HeadlessViewPort):
    """Headless viewport that prints card faces and status screens as they appear."""

    def __init__(self, screens: list[str] | None = None):
        super().__init__(screens=screens, frame_scale=0.0)

    def set_region_state(self, region_id: str, state: RegionState) -> None:
        super().set_region_state(region_id, state)
        if state is RegionState.VISIBLE and region_id in _ECHOED:
            text = self.content.get(region_id)
            if text:
                typer.secho(text, fg=_ECHOED[region_id])
