from sqlalchemy import func
from sqlmodel import select

from app.errors import validation_error

MAX_LIMIT = 100


def paginate(
    *,
    session,
    query,
    page: int = 1,
    limit: int = 10,
):
    if page < 1:
        raise validation_error("Page must be at least 1", "page")

    if limit < 1 or limit > MAX_LIMIT:
        raise validation_error(f"Limit must be between 1 and {MAX_LIMIT}", "limit")

    offset = (page - 1) * limit

    total = session.exec(
        select(func.count()).select_from(query.subquery())
    ).one()

    results = session.exec(
        query.offset(offset).limit(limit)
    ).all()

    return {
        "meta": {
            "total": total,
            "page": page,
            "limit": limit,
            "pages": (total + limit - 1) // limit,
        },
        "results": results,
    }
