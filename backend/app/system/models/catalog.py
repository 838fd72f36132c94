"""
系统配置目录 ORM 模型
- SysConfigCatalog: 每个 (config_type, scope_id) 一份目录，聚合根
- SysConfigItem: 目录下的有序条目（部门名、角色名等下拉选项）
"""
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Text, ForeignKey,
    Index, UniqueConstraint, text,
)
from sqlalchemy.orm import relationship, validates

from app.database import Base
from app.models.user import User

DEFAULT_ITEM_COLOR = "#3B82F6"

# None 表示全局目录；多租户时为公司 ID
ScopeId = Optional[int]


class ConfigType(str, Enum):
    """目录类型（封闭集合）"""
    DEPARTMENTS = "departments"
    ROLES = "roles"
    POSITIONS = "positions"
    SKILLS = "skills"
    BENEFITS = "benefits"


class SysConfigCatalog(Base):
    """配置目录"""
    __tablename__ = "sys_config_catalog"

    id = Column(Integer, primary_key=True, index=True)
    config_type = Column(String(20), nullable=False, index=True)
    scope_id = Column(Integer, nullable=True, index=True)
    last_modified_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship(
        "SysConfigItem",
        back_populates="catalog",
        cascade="all, delete-orphan",
        order_by="SysConfigItem.id",
    )
    last_modified_user = relationship(User, foreign_keys=[last_modified_by])

    __table_args__ = (
        UniqueConstraint("config_type", "scope_id", name="uq_config_catalog_type_scope"),
        # NULL 在唯一约束中互不相等，全局目录需要单独的部分唯一索引
        Index(
            "uq_config_catalog_type_global",
            "config_type",
            unique=True,
            sqlite_where=text("scope_id IS NULL"),
            postgresql_where=text("scope_id IS NULL"),
        ),
    )
    __mapper_args__ = {"version_id_col": version}

    @validates("config_type")
    def _validate_config_type(self, key, value):
        value = ConfigType(value).value
        if self.config_type is not None and self.config_type != value:
            raise ValueError("config_type cannot be changed once the catalog exists")
        return value

    def find_item(self, item_id: Optional[int]) -> Optional["SysConfigItem"]:
        if item_id is None:
            return None
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def active_items(self) -> List[Dict]:
        """启用条目，按 order 升序；order 相同时保持插入顺序"""
        active = [item for item in self.items if item.is_active]
        active.sort(key=lambda item: item.sort_order or 0)
        return [item.to_dict() for item in active]


class SysConfigItem(Base):
    """配置目录条目"""
    __tablename__ = "sys_config_item"

    id = Column(Integer, primary_key=True, index=True)
    catalog_id = Column(
        Integer, ForeignKey("sys_config_catalog.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(100), nullable=False)
    description = Column(Text, default="")
    color = Column(String(20), default=DEFAULT_ITEM_COLOR)
    is_active = Column(Boolean, default=True)
    sort_order = Column(Integer, default=0)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    catalog = relationship("SysConfigCatalog", back_populates="items")

    @validates("name")
    def _strip_name(self, key, value):
        return value.strip() if isinstance(value, str) else value

    def to_dict(self) -> Dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description or "",
            "color": self.color or DEFAULT_ITEM_COLOR,
            "order": self.sort_order or 0,
        }
