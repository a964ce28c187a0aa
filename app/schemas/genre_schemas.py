from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class GenreWrite(BaseModel):
    name: str = Field(..., max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Genre name must be a non-empty string")
        return value

class GenreRead(BaseModel):
    id: str
    name: str
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True
