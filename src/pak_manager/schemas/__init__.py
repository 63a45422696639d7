from pak_manager.schemas.archive import (
    CreateResult,
    EntryInfo,
    ListingResult,
    PakOptions,
    StreamResult,
)
from pak_manager.schemas.duplicates import DuplicateOwner, DuplicateRecord
from pak_manager.schemas.extract import ExtractAction, ExtractOutcome, ExtractResult

__all__ = [
    "CreateResult",
    "DuplicateOwner",
    "DuplicateRecord",
    "EntryInfo",
    "ExtractAction",
    "ExtractOutcome",
    "ExtractResult",
    "ListingResult",
    "PakOptions",
    "StreamResult",
]
