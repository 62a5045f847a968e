# recipe_catalog/services/pagination.py
from typing import Any, Dict

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from recipe_catalog.schemas import PaginationMeta


def build_pagination(total_count: int, return_count: int, page: int, limit: int) -> PaginationMeta:
    return PaginationMeta(
        total_count=total_count,
        return_count=return_count,
        page=page,
        limit=limit,
        has_prev_page=page > 1,
        has_next_page=page * limit < total_count,
    )


def paginate(db: Session, stmt: Select, page: int, limit: int) -> Dict[str, Any]:
    """Run `stmt` for one page and count every row it would return without paging."""
    total_count = db.execute(
        select(func.count()).select_from(stmt.order_by(None).subquery())
    ).scalar_one()
    rows = db.execute(stmt.offset((page - 1) * limit).limit(limit)).scalars().all()
    return {"data": list(rows), "pagination": build_pagination(total_count, len(rows), page, limit)}
