from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field , Relationship
from typing import Optional , TYPE_CHECKING
from uuid import uuid4

if TYPE_CHECKING:
    from app.models.order import Order
    from app.models.book import Book

class OrderItem(SQLModel, table=True):
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),
    )

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    order_id: str = Field(foreign_key="orders.id", index=True)
    book_id: str = Field(foreign_key="books.id", index=True)
    quantity: int
    # 1-based position of the line in the checkout request
    position: int = Field(default=1)

    order: Optional["Order"] = Relationship(back_populates="items")
    book: Optional["Book"] = Relationship()
