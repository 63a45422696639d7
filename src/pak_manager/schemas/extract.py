"""Schemas for archive extraction outcomes."""

from enum import StrEnum

from pydantic import BaseModel


class ExtractAction(StrEnum):
    extracted = "extracted"
    overwrote = "overwrote"
    skipped = "skipped"
    error = "error"


class ExtractOutcome(BaseModel):
    path: str
    destination: str
    action: ExtractAction
    message: str | None = None


class ExtractResult(BaseModel):
    archive: str
    destination_root: str
    outcomes: list[ExtractOutcome]
    extracted: int = 0
    overwritten: int = 0
    skipped: int = 0
    errors: int = 0
    dry_run: bool = False
