from flashdeck.domain.errors import BlobNotFoundError
from flashdeck.domain.ports import PersistenceGateway


class MemoryGateway(PersistenceGateway):
    """Process-local blob store. Nothing survives the process."""

    def __init__(self, blobs: dict[str, str] | None = None):
        self.blobs: dict[str, str] = dict(blobs or {})

    async def exists(self, key: str) -> bool:
        return key in self.blobs

    async def load(self, key: str) -> str:
        try:
            return self.blobs[key]
        except KeyError:
            raise BlobNotFoundError(key) from None

    async def save(self, key: str, data: str) -> None:
        self.blobs[key] = data
