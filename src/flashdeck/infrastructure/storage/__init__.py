# Infrastructure Storage Adapters Package
from .http_blob import HttpBlobGateway
from .local_file import LocalFileGateway
from .memory import MemoryGateway

__all__ = ["LocalFileGateway", "MemoryGateway", "HttpBlobGateway"]
