from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from decimal import Decimal
from uuid import uuid4


if TYPE_CHECKING:
    from .genre import Genre

class Book(SQLModel, table=True):
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_books_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_books_price_non_negative"),
    )

    #main info
    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    title: str = Field(index=True, unique=True)
    writer: str
    publisher: str
    publication_year: int
    description: Optional[str] = None

    #Shop Details
    price: Decimal = Field(default=0, max_digits=10, decimal_places=2)
    stock_quantity: int = Field(default=0)

    #genre
    genre_id: str = Field(foreign_key="genres.id")
    genre: Optional["Genre"] = Relationship(back_populates="books")

    #timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
