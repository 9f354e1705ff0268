from pydantic import BaseModel
from typing import Any, Generic, List, Optional, TypeVar

T = TypeVar('T')

class ErrorResponse(BaseModel):
    """오류 응답 봉투"""
    code: str
    message: str
    details: Optional[Any] = None

class PageResponse(BaseModel, Generic[T]):
    """페이지 응답"""
    data: List[T]
    page_number: int
    page_size: int
    total_items: int
    total_pages: int

    @classmethod
    def from_page(cls, page, convert) -> "PageResponse[T]":
        return cls(
            data=[convert(item) for item in page.items],
            page_number=page.page_number,
            page_size=page.page_size,
            total_items=page.total_items,
            total_pages=page.total_pages
        )
