from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Normalized Pokemon record returned by /pokemon/v1/data (Public Endpoint)
class CatalogEntry(BaseModel):
    name: str = Field(min_length=1)
    number: int = Field(gt=0)
    sprite_animated: str | None = None
    sprite_static: str | None = None
    types: list[str] = Field(default_factory=list)
    cry: str | None = None
    # Passed through verbatim from PokeAPI
    stats: list[Any] = Field(default_factory=list)
    abilities: list[Any] = Field(default_factory=list)
    moves: list[Any] = Field(default_factory=list)

# English effect text of an ability (Public Endpoint)
class AbilityInfo(BaseModel):
    effect: str
    short_effect: str

# Inbound team payload, built from the add-team form fields
class TeamCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str
    nickname: str
    stats: str  # JSON string, stored as-is
    ability: str
    held_item: Optional[str] = None

    @field_validator("held_item")
    @classmethod
    def blank_held_item_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

# Persisted team row (read from the ORM object)
class TeamRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    nickname: str
    stats: str
    ability: str
    held_item: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

class TeamCreatedResponse(BaseModel):
    message: str
    data: int

class MessageResponse(BaseModel):
    message: str
