# Infrastructure View Adapters Package
from .headless import HeadlessViewPort
from .terminal import TerminalViewPort

__all__ = ["HeadlessViewPort", "TerminalViewPort"]
