from typing import Any, Dict

from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import Session, select


def contains_insensitive(column, term: str) -> ColumnElement:
    """
    Case-insensitive substring match.

    Both sides are lowered and ``%``/``_`` in the term are escaped, so the
    result is the same on SQLite and Postgres.
    """
    return func.lower(column).contains(term.lower(), autoescape=True)


def paginate(db: Session, statement, page: int, page_size: int) -> Dict[str, Any]:
    """Run a page query and its total count in the same session transaction."""
    total = db.exec(
        select(func.count()).select_from(statement.order_by(None).subquery())
    ).one()
    items = db.exec(
        statement.offset((page - 1) * page_size).limit(page_size)
    ).all()
    return {"items": items, "total": total, "page": page, "page_size": page_size}
