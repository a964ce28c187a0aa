"""
Order placement and order read-side queries.

``place_order`` is the only write path for orders: the request is validated
up front, then the order row, every stock decrement and every order line are
written inside one ``atomic`` block, so a checkout either fully happens or
leaves the database untouched.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, List

from sqlalchemy import func, update
from sqlmodel import Session, select

from app.database import atomic
from app.errors import business_rule, not_found, validation_error
from app.models import Book, Genre, Order, OrderItem, User

logger = logging.getLogger(__name__)

# largest quantity a BIGINT comparison can hold
MAX_QUANTITY = 2 ** 63 - 1


@dataclass(frozen=True)
class OrderLine:
    book_id: str
    quantity: int


def validate_order_items(items: Any) -> List[OrderLine]:
    if items is None:
        raise validation_error("Items array is required", "items")

    if not isinstance(items, list):
        raise validation_error("Items must be an array", "items")

    if len(items) == 0:
        raise validation_error("Items array cannot be empty", "items")

    lines = []
    for index, item in enumerate(items, start=1):
        if not isinstance(item, dict):
            raise validation_error(f"Item {index}: must be an object", "items")

        book_id = item.get("book_id")
        if not isinstance(book_id, str) or not book_id.strip():
            raise validation_error(f"Item {index}: book_id is required", "book_id")

        lines.append(OrderLine(book_id=book_id.strip(), quantity=_parse_quantity(index, item.get("quantity"))))

    return lines


def _parse_quantity(index: int, quantity: Any) -> int:
    if quantity is None:
        raise validation_error(f"Item {index}: quantity must be at least 1", "quantity")

    # bool is an int subclass, but true is not a quantity
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        raise validation_error(
            f"Item {index}: quantity must be an integer, not a decimal number", "quantity"
        )

    if quantity < 1:
        raise validation_error(f"Item {index}: quantity must be at least 1", "quantity")

    if quantity > MAX_QUANTITY or (isinstance(quantity, float) and not quantity.is_integer()):
        raise validation_error(
            f"Item {index}: quantity must be an integer, not a decimal number", "quantity"
        )

    return int(quantity)


def _ensure_purchasable(book: Book, quantity: int):
    if book.is_deleted:
        raise business_rule(
            f'Book "{book.title}" has been deleted and cannot be purchased',
            book_id=book.id,
        )

    if book.stock_quantity < quantity:
        raise business_rule(
            f'Insufficient stock for "{book.title}". '
            f"Available: {book.stock_quantity}, Requested: {quantity}",
            book_id=book.id,
            available=book.stock_quantity,
            requested=quantity,
        )


def _decrement_stock(session: Session, book: Book, quantity: int):
    # The WHERE clause re-checks stock against the row the database holds,
    # so a concurrent checkout that already took the units makes this a no-op.
    result = session.execute(
        update(Book)
        .where(
            Book.id == book.id,
            Book.stock_quantity >= quantity,
            Book.deleted_at.is_(None),
        )
        .values(
            stock_quantity=Book.stock_quantity - quantity,
            updated_at=datetime.utcnow(),
        )
        .execution_options(synchronize_session=False)
    )
    session.refresh(book)

    if result.rowcount == 0:
        _ensure_purchasable(book, quantity)
        # row changed under us in some other way
        raise business_rule(f'Book "{book.title}" could not be reserved', book_id=book.id)


def place_order(session: Session, user_id: str, items: Any) -> Order:
    """Create one order covering every requested item, or nothing at all.

    Items are applied in the order given; two lines for the same book see
    each other's decrement.
    """
    lines = validate_order_items(items)

    user = session.get(User, user_id)
    if user is None:
        raise not_found("User", user_id)

    with atomic(session):
        order = Order(user_id=user.id)
        session.add(order)
        session.flush()
        logger.info(f"Placing order {order.id} for user {user.id} with {len(lines)} item(s)")

        total = Decimal("0")
        for position, line in enumerate(lines, start=1):
            book = session.get(Book, line.book_id)
            if book is None:
                raise not_found("Book", line.book_id)

            _ensure_purchasable(book, line.quantity)
            _decrement_stock(session, book, line.quantity)
            logger.info(f"  {book.title}: -{line.quantity}, stock now {book.stock_quantity}")

            session.add(
                OrderItem(
                    order_id=order.id,
                    book_id=book.id,
                    quantity=line.quantity,
                    position=position,
                )
            )
            total += Decimal(book.price) * line.quantity

        order.total_price = total
        session.add(order)

    session.refresh(order)
    logger.info(f"Order {order.id} committed, total {order.total_price}")
    return order


def list_transactions(session: Session) -> List[Order]:
    return session.exec(
        select(Order).order_by(Order.created_at.desc())
    ).all()


def get_transaction(session: Session, transaction_id: str) -> Order:
    order = session.get(Order, transaction_id)
    if order is None:
        raise not_found("Transaction", transaction_id)
    return order


def get_statistics(session: Session) -> dict:
    total_transactions = session.exec(select(func.count(Order.id))).one()

    total_sold, average_quantity = session.exec(
        select(func.sum(OrderItem.quantity), func.avg(OrderItem.quantity))
    ).one()

    rows = session.exec(
        select(
            Genre.name,
            func.count(OrderItem.id).label("total_sold"),
            func.count(func.distinct(Book.id)).label("unique_books"),
        )
        .select_from(OrderItem)
        .join(Book, OrderItem.book_id == Book.id)
        .join(Genre, Book.genre_id == Genre.id)
        .group_by(Genre.id, Genre.name)
        .order_by(func.count(OrderItem.id).desc(), Genre.name)
    ).all()

    genres = [
        {"genre": name, "total_sold": sold, "unique_books": unique}
        for name, sold, unique in rows
    ]

    return {
        "totalTransactions": total_transactions,
        "totalItemsSold": int(total_sold or 0),
        "averageQuantityPerTransaction": float(average_quantity or 0),
        "genreMostSold": genres[0] if genres else None,
        "genreLeastSold": genres[-1] if genres else None,
        "allGenres": genres,
    }
