"""Meeting schemas."""
from datetime import datetime
from typing import Optional
from pydantic import AliasChoices, Field, field_validator

from cedoi.core.sanitization import MAX_AGENDA_LENGTH, MAX_VENUE_LENGTH, sanitize_optional_text
from cedoi.schemas.common import CamelModel, EntityId


class MeetingCreate(CamelModel):
    date: datetime
    venue: Optional[str] = None
    # The PWA calls the agenda the meeting's "theme"
    agenda: Optional[str] = Field(None, validation_alias=AliasChoices("agenda", "theme"))
    created_by: Optional[EntityId] = None
    repeat_weekly: bool = False
    is_active: bool = True

    @field_validator('venue')
    @classmethod
    def sanitize_venue_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_optional_text(v, MAX_VENUE_LENGTH)

    @field_validator('agenda')
    @classmethod
    def sanitize_agenda_field(cls, v: Optional[str]) -> Optional[str]:
        return sanitize_optional_text(v, MAX_AGENDA_LENGTH)


class Meeting(CamelModel):
    id: EntityId
    date: datetime
    venue: Optional[str] = None
    agenda: Optional[str] = None
    created_by: EntityId
    repeat_weekly: bool = False
    is_active: bool = True
    created_at: Optional[datetime] = None
