from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime

from app.schemas.book_schemas import BookSummary
from app.schemas.user_schemas import UserSummary


class TransactionItemRead(BaseModel):
    id: str
    book_id: str
    quantity: int
    book: Optional[BookSummary] = None

    class Config:
        from_attributes = True


class TransactionRead(BaseModel):
    id: str
    user_id: str
    total_price: float
    created_at: datetime
    user: Optional[UserSummary] = None
    items: List[TransactionItemRead]

    class Config:
        from_attributes = True


class GenreSales(BaseModel):
    genre: str
    total_sold: int
    unique_books: int


class TransactionStatistics(BaseModel):
    totalTransactions: int
    totalItemsSold: int
    averageQuantityPerTransaction: float
    genreMostSold: Optional[GenreSales] = None
    genreLeastSold: Optional[GenreSales] = None
    allGenres: List[GenreSales]
