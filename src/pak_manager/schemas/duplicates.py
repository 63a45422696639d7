"""Schemas for cross-archive duplicate detection."""

from pydantic import BaseModel


class DuplicateOwner(BaseModel):
    archive: str
    offset: int
    size: int


class DuplicateRecord(BaseModel):
    """A path provided by several archives, owners ordered highest load priority first."""

    path: str
    owners: list[DuplicateOwner]
    identical: bool = False
    checksum: int | None = None

    @property
    def archives(self) -> list[str]:
        return [o.archive for o in self.owners]
