import math
from dataclasses import dataclass, field
from typing import Generic, List, Optional, Tuple, TypeVar

from coursework.core.config import settings

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    page_number: int = 1
    page_size: int = 20
    total_items: int = 0

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_items / self.page_size)


def parse_pagination(page_number: Optional[str], page_size: Optional[str]) -> Tuple[int, int]:
    """쿼리 파라미터 해석. 잘못된 값은 기본값으로 대체"""
    page = 1
    size = settings.DEFAULT_PAGE_SIZE
    try:
        value = int(page_number) if page_number else 0
        if value > 0:
            page = value
    except ValueError:
        pass
    try:
        value = int(page_size) if page_size else 0
        if 0 < value <= settings.MAX_PAGE_SIZE:
            size = value
    except ValueError:
        pass
    return page, size


def resolve_page(page: int, size: int, total: int, clamp_to_last: bool = True) -> Tuple[int, int]:
    """(실제 페이지, offset) 계산

    페이지는 항상 1 이상이다. ``clamp_to_last`` 가 False 이면 마지막 페이지를
    넘는 요청을 그대로 두어 빈 페이지가 나올 수 있다.
    """
    page = max(page, 1)
    total_pages = math.ceil(total / size) if size > 0 else 0
    if clamp_to_last and total_pages > 0 and page > total_pages:
        page = total_pages
    return page, (page - 1) * size
