from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlmodel import Session, select
from app.database import atomic, get_session
from app.errors import conflict, not_found, validation_error
from app.models.book import Book
from app.models.genre import Genre
from app.schemas.genre_schemas import GenreRead, GenreWrite
from app.utils.token import get_current_user_id

router = APIRouter()


def _get_active_genre(session: Session, genre_id: str) -> Genre:
    genre = session.get(Genre, genre_id)
    if not genre or genre.deleted_at:
        raise not_found("Genre", genre_id)
    return genre


@router.post("", status_code=status.HTTP_201_CREATED)
def create_genre(
    payload: GenreWrite,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    existing = session.exec(select(Genre).where(Genre.name == payload.name)).first()
    if existing:
        raise conflict("Genre name already exists")

    genre = Genre(name=payload.name)
    with atomic(session):
        session.add(genre)

    session.refresh(genre)
    return {"status": True, "message": "Genre created", "data": GenreRead.model_validate(genre)}


@router.get("")
def list_genres(session: Session = Depends(get_session)):
    genres = session.exec(
        select(Genre)
        .where(Genre.deleted_at.is_(None))
        .order_by(Genre.created_at.desc())
    ).all()

    return {"status": True, "data": [GenreRead.model_validate(g) for g in genres]}


@router.get("/{genre_id}")
def get_genre(genre_id: str, session: Session = Depends(get_session)):
    genre = _get_active_genre(session, genre_id)
    return {"status": True, "data": GenreRead.model_validate(genre)}


@router.patch("/{genre_id}")
def update_genre(
    genre_id: str,
    payload: GenreWrite,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    genre = session.get(Genre, genre_id)
    if not genre:
        raise not_found("Genre", genre_id)

    if payload.name != genre.name:
        duplicate = session.exec(select(Genre).where(Genre.name == payload.name)).first()
        if duplicate:
            raise conflict("Genre name already exists")

    with atomic(session):
        genre.name = payload.name
        genre.updated_at = datetime.utcnow()
        session.add(genre)

    session.refresh(genre)
    return {"status": True, "message": "Genre updated", "data": GenreRead.model_validate(genre)}


@router.delete("/{genre_id}")
def delete_genre(
    genre_id: str,
    session: Session = Depends(get_session),
    current_user_id: str = Depends(get_current_user_id)
):
    genre = session.get(Genre, genre_id)
    if not genre:
        raise not_found("Genre", genre_id)

    if genre.deleted_at:
        raise validation_error(f"Genre with id {genre_id} has already been deleted", "genre_id")

    books_count = session.exec(
        select(func.count(Book.id)).where(Book.genre_id == genre_id, Book.deleted_at.is_(None))
    ).one()
    if books_count > 0:
        raise validation_error(
            f"Cannot delete genre that has {books_count} book(s) assigned to it", "genre_id"
        )

    with atomic(session):
        genre.deleted_at = datetime.utcnow()
        session.add(genre)

    session.refresh(genre)
    return {
        "status": True,
        "message": "Genre deleted (soft delete)",
        "data": GenreRead.model_validate(genre),
    }
