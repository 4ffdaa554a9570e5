"""
Ports (interfaces) for flashdeck.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from .models import RegionState


class PersistenceGateway(ABC):
    """
    Port for the key-value blob store that holds the card collection.

    Implementations:
        - LocalFileGateway: One file per key under a directory.
        - MemoryGateway: Process-local dict, for tests and throwaway sessions.
        - HttpBlobGateway: Remote blob store over HTTP.
    """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return True if a blob is stored under the key."""
        pass

    @abstractmethod
    async def load(self, key: str) -> str:
        """
        Load the blob stored under the key.

        Raises:
            BlobNotFoundError: Nothing is stored under the key.
            StorageError: The blob could not be read.
        """
        pass

    @abstractmethod
    async def save(self, key: str, data: str) -> None:
        """
        Store data under the key, replacing any previous blob.

        Raises:
            StorageError: The blob could not be written.
        """
        pass

    async def aclose(self) -> None:
        """Release any connections held by the gateway."""
        pass


class ViewPort(ABC):
    """
    Port for the display surface driven by the TransitionEngine.

    A region is a named area (a screen or a card face) that is either shown or
    hidden and carries an opacity used by timed fades.
    """

    @abstractmethod
    def screen_regions(self) -> list[str]:
        """Region ids belonging to the mutually exclusive screen group."""
        pass

    @abstractmethod
    def region_state(self, region_id: str) -> RegionState:
        """Current display state of a region as reported by the surface."""
        pass

    @abstractmethod
    def set_region_state(self, region_id: str, state: RegionState) -> None:
        """Display or remove a region immediately."""
        pass

    @abstractmethod
    def set_opacity(self, region_id: str, opacity: float) -> None:
        """Set a region's opacity in [0, 1]."""
        pass

    @abstractmethod
    async def next_frame(self, interval: float) -> None:
        """Suspend until the next animation tick, roughly interval seconds away."""
        pass

    @abstractmethod
    def set_content(self, region_id: str, content: str) -> None:
        """Replace the text rendered inside a region."""
        pass
