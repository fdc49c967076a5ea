"""Pydantic models for contact records and extraction results."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContactFields(BaseModel):
    """Editable fields of a contact record.

    Numbers are stored as their text and null as an empty string, so any
    card body the client sends can be saved.
    """

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = Field(default="", description="Person's full name")
    title: str = Field(default="", description="Job title or position")
    company: str = Field(default="", description="Company name")
    phone: str = Field(default="", description="Phone number")
    email: str = Field(default="", description="Email address")

    @field_validator("name", "title", "company", "phone", "email", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class ContactUpdate(BaseModel):
    """Partial update of a contact record.

    Only the keys actually sent are applied; anything outside the five
    editable fields is rejected.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    title: str | None = None
    company: str | None = None
    phone: str | None = None
    email: str | None = None

    def changes(self) -> dict[str, str]:
        """Return the fields that were present in the request."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class ContactRecord(ContactFields):
    """A stored business card entry."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: int = Field(ge=1, description="Store-assigned identifier")
    created_at: datetime = Field(alias="createdAt", description="Creation timestamp (UTC)")


class ExtractedFields(BaseModel):
    """Fields recovered from OCR text by the language model."""

    name: str = ""
    title: str = ""
    company: str = ""
    phone: str = ""
    email: str = ""


class Metadata(BaseModel):
    """Processing metadata."""

    ocr_backend: str = Field(description="OCR backend used")
    extractor_backend: str = Field(description="LLM extractor used")
    processing_time_ms: float = Field(description="Total processing time in ms")


class ScanResult(BaseModel):
    """Result of scanning a single card image."""

    fields: ExtractedFields = Field(default_factory=ExtractedFields)
    raw_text: str = Field(description="Raw OCR text for reference")
    metadata: Metadata | None = Field(default=None, description="Processing metadata")
