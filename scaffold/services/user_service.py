"""用户服务：用户的增删改查业务逻辑与实体到 DTO 的转换。"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from scaffold.core.constants import HTTP_STATUS_CONFLICT, HTTP_STATUS_NOT_FOUND
from scaffold.core.exceptions import AppException
from scaffold.core.logger import logger
from scaffold.core.pagination import PagedResult, PageParams
from scaffold.core.snowflake import SnowflakeIdGenerator
from scaffold.core.timezone import format_datetime
from scaffold.crud.users import user_crud
from scaffold.models.user import User
from scaffold.schemas.users import UserCreateRequest, UserDeletionPayload, UserDetail, UserUpdateRequest


def to_user_detail(user: User) -> UserDetail:
    return UserDetail(
        id=str(user.id),
        username=user.username,
        nickname=user.nickname,
        email=user.email,
        age=user.age,
        status=user.status,
        remark=user.remark,
        create_time=format_datetime(user.create_time),
        update_time=format_datetime(user.update_time),
    )


class UserService:
    """调用方需保证入参已通过字段校验。"""

    def create_user(
        self,
        db: Session,
        payload: UserCreateRequest,
        *,
        id_generator: SnowflakeIdGenerator,
    ) -> UserDetail:
        username = payload.username.strip()
        if user_crud.get_by_username(db, username, include_deleted=True) is not None:
            raise AppException("用户名已存在", HTTP_STATUS_CONFLICT)

        body = payload.model_dump()
        body.update(id=id_generator.next_id(), username=username)
        try:
            user = user_crud.create(db, body)
        except IntegrityError as exc:
            db.rollback()
            raise AppException("用户名已存在", HTTP_STATUS_CONFLICT) from exc
        logger.info("Created user %s (%s)", user.username, user.id)
        return to_user_detail(user)

    def get_user(self, db: Session, user_id: int) -> UserDetail:
        return to_user_detail(self._require_user(db, user_id))

    def list_users(
        self,
        db: Session,
        params: PageParams,
        *,
        username: str | None = None,
        status: str | None = None,
    ) -> PagedResult[UserDetail]:
        page = user_crud.list_with_filters(db, params, username=username, status=status)
        return PagedResult[UserDetail](
            records=[to_user_detail(user) for user in page.records],
            total=page.total,
            page=page.page,
            size=page.size,
        )

    def update_user(self, db: Session, user_id: int, payload: UserUpdateRequest) -> UserDetail:
        user = self._require_user(db, user_id)
        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(user, field, value)
        user = user_crud.save(db, user)
        return to_user_detail(user)

    def delete_user(self, db: Session, user_id: int) -> UserDeletionPayload:
        user = self._require_user(db, user_id)
        user_crud.soft_delete(db, user)
        logger.info("Deleted user %s (%s)", user.username, user.id)
        return UserDeletionPayload(id=str(user_id))

    @staticmethod
    def _require_user(db: Session, user_id: int) -> User:
        user = user_crud.get(db, user_id)
        if user is None:
            raise AppException("用户不存在", HTTP_STATUS_NOT_FOUND)
        return user


user_service = UserService()
