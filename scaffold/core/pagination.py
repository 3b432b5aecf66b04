"""分页工具：校验分页参数并组装 ``PagedResult``。

页码从 1 开始；``page``/``size`` 小于 1 或 ``size`` 超过上限时直接报校验错误，不做静默修正。
"""

import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from sqlalchemy.orm import Query

from scaffold.core.exceptions import ValidationException

T = TypeVar("T")

DEFAULT_MAX_PAGE_SIZE = 500


class PagedResult(BaseModel, Generic[T]):
    """一页数据及满足条件的总条数。"""

    model_config = ConfigDict(frozen=True)

    records: List[T] = Field(default_factory=list)
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    size: int = Field(default=DEFAULT_MAX_PAGE_SIZE, ge=1)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.size) if self.total else 0

    @model_validator(mode="after")
    def _check_bounds(self) -> "PagedResult[T]":
        if len(self.records) > self.total:
            raise ValueError("records cannot outnumber total")
        if len(self.records) > self.size:
            raise ValueError("records cannot exceed page size")
        return self


@dataclass(frozen=True)
class PageParams:
    page: int
    size: int

    @classmethod
    def of(cls, page: Any, size: Any, *, max_size: int = DEFAULT_MAX_PAGE_SIZE) -> "PageParams":
        """校验分页参数，非法值抛出 ``ValidationException``。"""
        if not isinstance(page, int) or isinstance(page, bool) or page < 1:
            raise ValidationException("page must be greater than or equal to 1", field="page")
        if not isinstance(size, int) or isinstance(size, bool) or size < 1 or size > max_size:
            raise ValidationException(f"size must be between 1 and {max_size}", field="size")
        return cls(page=page, size=size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size


def assemble_page(
    params: PageParams,
    fetch: Callable[[int, int], Sequence[T]],
    count: Callable[[], int],
) -> PagedResult[T]:
    """先取当前页，再统计总数，二者共享同一过滤条件。"""
    records = list(fetch(params.offset, params.limit))
    total = int(count())
    return PagedResult(records=records, total=total, page=params.page, size=params.size)


async def assemble_page_async(
    params: PageParams,
    fetch: Callable[[int, int], Awaitable[Sequence[T]]],
    count: Callable[[], Awaitable[int]],
) -> PagedResult[T]:
    records = list(await fetch(params.offset, params.limit))
    total = int(await count())
    return PagedResult(records=records, total=total, page=params.page, size=params.size)


def paginate_query(query: Query, params: PageParams) -> PagedResult:
    """对 SQLAlchemy 查询执行分页；统计总数时去掉排序条件。"""
    return assemble_page(
        params,
        fetch=lambda offset, limit: query.offset(offset).limit(limit).all(),
        count=lambda: query.order_by(None).count(),
    )
