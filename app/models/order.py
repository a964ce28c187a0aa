from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from app.models.order_item import OrderItem
from app.models.user import User

class Order(SQLModel, table=True):
    """One checkout. Rows are only ever inserted, never updated after commit."""
    __tablename__ = "orders"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    total_price: Decimal = Field(default=0, max_digits=12, decimal_places=2)

    created_at: datetime = Field(default_factory=datetime.utcnow)

    # relationships
    user: Optional["User"] = Relationship()
    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderItem.position"},
    )
