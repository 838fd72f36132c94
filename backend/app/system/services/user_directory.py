"""
用户目录 — 删除目录条目前统计仍在使用该名称的启用用户
"""
from abc import ABC, abstractmethod

from sqlalchemy.orm import Session

from app.models.user import User

USAGE_FIELDS = ("department", "role")


class UserDirectory(ABC):
    """用户目录接口"""

    @abstractmethod
    def count_active_users_with_field_value(self, field: str, value: str) -> int:
        ...


class SqlUserDirectory(UserDirectory):
    """基于 users 表的用户目录"""

    def __init__(self, db: Session):
        self.db = db

    def count_active_users_with_field_value(self, field: str, value: str) -> int:
        if field not in USAGE_FIELDS:
            raise ValueError(f"不支持按字段 '{field}' 统计用户")
        column = getattr(User, field)
        return (
            self.db.query(User)
            .filter(column == value, User.is_active == True)  # noqa: E712
            .count()
        )
