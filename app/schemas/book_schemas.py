from pydantic import BaseModel, Field, StrictInt
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.schemas.genre_schemas import GenreRead


class BookCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    writer: str = Field(..., min_length=1, max_length=100)
    publisher: str = Field(..., min_length=1, max_length=100)
    publication_year: int
    description: Optional[str] = None

    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    stock_quantity: StrictInt = Field(..., ge=0)

    genre_id: str = Field(..., min_length=1)


class BookUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    writer: Optional[str] = Field(None, min_length=1, max_length=100)
    publisher: Optional[str] = Field(None, min_length=1, max_length=100)
    publication_year: Optional[int] = None
    description: Optional[str] = None

    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    stock_quantity: Optional[StrictInt] = Field(None, ge=0)

    genre_id: Optional[str] = Field(None, min_length=1)


class BookRead(BaseModel):
    id: str
    title: str
    writer: str
    publisher: str
    publication_year: int
    description: Optional[str]

    price: float
    stock_quantity: int

    genre_id: str
    genre: Optional[GenreRead] = None

    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookSummary(BaseModel):
    id: str
    title: str
    price: float
    writer: str

    class Config:
        from_attributes = True
