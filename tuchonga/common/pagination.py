import math

from fastapi import Query
from sqlalchemy.orm import Query as ORMQuery

from tuchonga.common.schemas.responses import PageMeta


class PageParams:
    """``?page=&limit=`` query parameters shared by list endpoints."""

    def __init__(
        self,
        page: int = Query(1, ge=1),
        limit: int = Query(20, ge=1, le=200),
    ):
        self.page = page
        self.limit = limit

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def paginate(query: ORMQuery, page: int, limit: int) -> tuple[list, PageMeta]:
    total = query.order_by(None).count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    meta = PageMeta(
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if limit else 0,
    )
    return rows, meta
