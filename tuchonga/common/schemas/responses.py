from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


# generic success message
class ApiResponse(BaseModel):
    message: str


class DeleteResponse(BaseModel):
    message: str


class CountResponse(BaseModel):
    count: int


class PageMeta(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class Page(BaseModel, Generic[T]):
    items: list[T]
    meta: PageMeta
