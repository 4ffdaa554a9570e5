# Domain Package
from .errors import (
    BlobNotFoundError,
    ConfigurationError,
    CorruptCollectionError,
    FlashdeckError,
    NoCardSelectedError,
    StorageError,
)
from .models import Card, CardListing, EditForm, RegionState, normalize_tags
from .ports import PersistenceGateway, ViewPort

__all__ = [
    "Card",
    "CardListing",
    "EditForm",
    "RegionState",
    "normalize_tags",
    "PersistenceGateway",
    "ViewPort",
    "FlashdeckError",
    "ConfigurationError",
    "StorageError",
    "BlobNotFoundError",
    "CorruptCollectionError",
    "NoCardSelectedError",
]
