from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session, select
from app.database import atomic, get_session
from app.errors import conflict, not_found, validation_error
from app.models.book import Book
from app.models.genre import Genre
from app.schemas.book_schemas import BookCreate, BookRead, BookUpdate
from app.utils.pagination import paginate
from app.utils.token import get_current_user_id

router = APIRouter()


def _active_books_query(q: str):
    query = select(Book).where(Book.deleted_at.is_(None))
    if q:
        query = query.where(Book.title.ilike(f"%{q}%"))
    return query.order_by(Book.created_at.desc())


def _ensure_genre(session: Session, genre_id: str) -> Genre:
    genre = session.get(Genre, genre_id)
    if not genre or genre.deleted_at:
        raise not_found("Genre", genre_id)
    return genre


def _ensure_unique_title(session: Session, title: str):
    existing = session.exec(select(Book).where(Book.title == title)).first()
    if existing:
        raise conflict("Book title already exists")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_book(
    payload: BookCreate,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id),
):
    _ensure_genre(session, payload.genre_id)
    _ensure_unique_title(session, payload.title)

    book = Book(**payload.model_dump())
    with atomic(session):
        session.add(book)

    session.refresh(book)
    return {"status": True, "message": "Book created", "data": BookRead.model_validate(book)}


@router.get("")
def list_books(
    page: int = Query(1),
    limit: int = Query(10),
    q: str = Query(""),
    session: Session = Depends(get_session),
):
    data = paginate(session=session, query=_active_books_query(q), page=page, limit=limit)

    return {
        "status": True,
        "meta": data["meta"],
        "data": [BookRead.model_validate(b) for b in data["results"]],
    }


@router.get("/genre/{genre_id}")
def list_books_by_genre(
    genre_id: str,
    page: int = Query(1),
    limit: int = Query(10),
    q: str = Query(""),
    session: Session = Depends(get_session),
):
    genre = session.get(Genre, genre_id)
    if not genre:
        raise not_found("Genre", genre_id)

    query = _active_books_query(q).where(Book.genre_id == genre_id)
    data = paginate(session=session, query=query, page=page, limit=limit)

    meta = data["meta"]
    meta.update({"genre_id": genre.id, "genre_name": genre.name})

    return {
        "status": True,
        "message": f'Found {meta["total"]} books in "{genre.name}" genre',
        "meta": meta,
        "data": [BookRead.model_validate(b) for b in data["results"]],
    }


@router.get("/{book_id}")
def get_book(book_id: str, session: Session = Depends(get_session)):
    book = session.get(Book, book_id)
    if not book or book.is_deleted:
        raise not_found("Book", book_id)

    return {"status": True, "data": BookRead.model_validate(book)}


@router.patch("/{book_id}")
def update_book(
    book_id: str,
    payload: BookUpdate,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id),
):
    book = session.get(Book, book_id)
    if not book:
        raise not_found("Book", book_id)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)

    if "title" in changes and changes["title"] != book.title:
        _ensure_unique_title(session, changes["title"])

    if "genre_id" in changes and changes["genre_id"] != book.genre_id:
        _ensure_genre(session, changes["genre_id"])

    with atomic(session):
        for field, value in changes.items():
            setattr(book, field, value)
        book.updated_at = datetime.utcnow()
        session.add(book)

    session.refresh(book)
    return {"status": True, "message": "Book updated", "data": BookRead.model_validate(book)}


@router.delete("/{book_id}")
def delete_book(
    book_id: str,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id),
):
    book = session.get(Book, book_id)
    if not book:
        raise not_found("Book", book_id)

    if book.is_deleted:
        raise validation_error(f"Book with id {book_id} has already been deleted", "book_id")

    with atomic(session):
        book.deleted_at = datetime.utcnow()
        session.add(book)

    session.refresh(book)
    return {
        "status": True,
        "message": "Book deleted (soft delete)",
        "data": BookRead.model_validate(book),
    }
