# recipe_catalog/routers/params.py
from dataclasses import dataclass

from fastapi import Query


@dataclass
class PageParams:
    page: int
    limit: int


def page_params(
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(10, ge=1, le=100, description="Number of items per page"),
) -> PageParams:
    return PageParams(page=page, limit=limit)
