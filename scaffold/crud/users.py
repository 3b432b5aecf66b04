"""用户 CRUD：集中管理用户相关的数据操作。"""

from typing import Optional

from sqlalchemy.orm import Session

from scaffold.core.pagination import PagedResult, PageParams
from scaffold.crud.base import CRUDBase
from scaffold.models.user import User


class CRUDUser(CRUDBase[User]):
    def get_by_username(self, db: Session, username: str, *, include_deleted: bool = False) -> Optional[User]:
        """根据唯一用户名获取用户；唯一索引覆盖已软删除的行，查重时需包含它们。"""
        query = self.query(db, include_deleted=include_deleted).filter(User.username == username)
        return query.first()

    def list_with_filters(
        self,
        db: Session,
        params: PageParams,
        *,
        username: Optional[str] = None,
        status: Optional[str] = None,
    ) -> PagedResult:
        """按用户名模糊匹配与状态过滤用户并返回分页结果。"""
        query = self.query(db)
        if username:
            query = query.filter(self.model.username.ilike(f"%{username.strip()}%"))
        if status:
            query = query.filter(self.model.status == status.strip().lower())
        return self.page(db, params, query)


user_crud = CRUDUser(User)
