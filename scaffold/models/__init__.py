"""ORM 模型集合，导入即完成表注册。"""

from scaffold.models.base import Base
from scaffold.models.user import User

__all__ = ["Base", "User"]
