"""
系统管理 ORM 模型
"""
from app.system.models.catalog import (
    ConfigType, ScopeId, SysConfigCatalog, SysConfigItem, DEFAULT_ITEM_COLOR,
)

__all__ = [
    "ConfigType", "ScopeId", "SysConfigCatalog", "SysConfigItem", "DEFAULT_ITEM_COLOR",
]
