"""Pydantic models for records of the TC39 proposals dataset."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NoteModel(BaseModel):
    """A dated link to meeting notes discussing a proposal.

    The date is kept as the raw dataset string because some records carry
    dates that do not parse.
    """

    model_config = ConfigDict(extra="ignore")

    date: str | None = None
    url: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def non_string_date_is_missing(cls, value: Any) -> Any:
        """Treat a date that is not a string as missing, so only this note is dropped when rendering."""
        if value is not None and not isinstance(value, str):
            return None
        return value


class ProposalModel(BaseModel):
    """A single proposal from the dataset."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    name: str
    url: str | None = None
    stage: float
    edition: int | None = None
    notes: list[NoteModel] = Field(default_factory=list)

    @field_validator("notes", mode="before")
    @classmethod
    def null_notes_are_empty(cls, value: Any) -> Any:
        """A proposal with `"notes": null` has no notes."""
        if value is None:
            return []
        return value


class ProposalsDatasetModel(BaseModel):
    """The whole dataset, in published order."""

    proposals: list[ProposalModel] = Field(default_factory=list)
