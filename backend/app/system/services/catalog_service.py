"""
配置目录 Service — 部门、角色、职位、技能、福利等下拉选项的维护

读取时若目录缺失会先写入默认数据；所有修改都在目录聚合上完成，
目录行的 version 列用于乐观并发控制。
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.system.errors import (
    CatalogItemInUse,
    CatalogItemNotFound,
    CatalogNotFound,
    ConcurrentCatalogUpdate,
    DuplicateItemName,
    EmptyItemName,
    InvalidConfigType,
    MalformedReorderPayload,
)
from app.system.models.catalog import (
    DEFAULT_ITEM_COLOR,
    ConfigType,
    ScopeId,
    SysConfigCatalog,
    SysConfigItem,
)
from app.system.services.catalog_seed import seed_catalog_data
from app.system.services.user_directory import SqlUserDirectory, UserDirectory

logger = logging.getLogger(__name__)

# 删除前需要检查引用的目录类型 -> 用户字段
USAGE_FIELD_BY_TYPE = {
    ConfigType.DEPARTMENTS: "department",
    ConfigType.ROLES: "role",
}


def _coerce_item_id(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def _user_summary(user) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {
        "id": user.id,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "email": user.email,
    }


class ConfigCatalogService:
    def __init__(self, db: Session, user_directory: Optional[UserDirectory] = None):
        self.db = db
        self.user_directory = user_directory or SqlUserDirectory(db)

    # ---- helpers ----

    @staticmethod
    def validate_type(config_type: Any) -> ConfigType:
        try:
            return ConfigType(config_type)
        except ValueError:
            raise InvalidConfigType(config_type)

    def get_catalog(self, config_type: ConfigType, scope_id: ScopeId = None) -> Optional[SysConfigCatalog]:
        query = self.db.query(SysConfigCatalog).filter(
            SysConfigCatalog.config_type == ConfigType(config_type).value
        )
        if scope_id is None:
            query = query.filter(SysConfigCatalog.scope_id.is_(None))
        else:
            query = query.filter(SysConfigCatalog.scope_id == scope_id)
        return query.first()

    def list_catalogs(self, scope_id: ScopeId = None) -> List[SysConfigCatalog]:
        query = self.db.query(SysConfigCatalog)
        if scope_id is None:
            query = query.filter(SysConfigCatalog.scope_id.is_(None))
        else:
            query = query.filter(SysConfigCatalog.scope_id == scope_id)
        return query.order_by(SysConfigCatalog.id).all()

    def ensure_defaults(self, scope_id: ScopeId = None) -> dict:
        """写入缺失的默认目录（幂等）"""
        return seed_catalog_data(self.db, scope_id)

    def _get_or_seed(self, config_type: ConfigType, scope_id: ScopeId) -> SysConfigCatalog:
        catalog = self.get_catalog(config_type, scope_id)
        if catalog is None:
            self.ensure_defaults(scope_id)
            catalog = self.get_catalog(config_type, scope_id)
        if catalog is None:
            raise CatalogNotFound(config_type.value)
        return catalog

    def _require_catalog(self, config_type: ConfigType, scope_id: ScopeId) -> SysConfigCatalog:
        catalog = self.get_catalog(config_type, scope_id)
        if catalog is None:
            raise CatalogNotFound(config_type.value)
        return catalog

    @staticmethod
    def _find_active_by_name(
        catalog: SysConfigCatalog, name: str, exclude_id: Optional[int] = None
    ) -> Optional[SysConfigItem]:
        wanted = name.strip().lower()
        for item in catalog.items:
            if not item.is_active or (exclude_id is not None and item.id == exclude_id):
                continue
            if item.name.strip().lower() == wanted:
                return item
        return None

    @staticmethod
    def _touch(catalog: SysConfigCatalog, actor_id: Optional[int]) -> None:
        # 每次修改都更新目录行，使 version 检查覆盖条目变更
        catalog.last_modified_by = actor_id
        catalog.updated_at = datetime.utcnow()

    def _commit(self, catalog: SysConfigCatalog) -> None:
        config_type, catalog_id = catalog.config_type, catalog.id
        try:
            self.db.commit()
        except StaleDataError:
            self.db.rollback()
            logger.warning(f"Concurrent update detected on {config_type} catalog {catalog_id}")
            raise ConcurrentCatalogUpdate(config_type)
        self.db.refresh(catalog)

    # ---- reads ----

    def get_by_type(self, config_type: Any, scope_id: ScopeId = None) -> Tuple[Optional[SysConfigCatalog], bool]:
        """获取目录；缺失时写入默认数据后重读一次。返回 (目录, 是否刚初始化)"""
        ctype = self.validate_type(config_type)
        catalog = self.get_catalog(ctype, scope_id)
        if catalog is not None:
            return catalog, False
        self.ensure_defaults(scope_id)
        return self.get_catalog(ctype, scope_id), True

    def get_all(self, scope_id: ScopeId = None) -> Tuple[Dict[str, List[Dict]], bool]:
        """全部目录的启用条目，五种类型都会出现在结果中"""
        catalogs = self.list_catalogs(scope_id)
        seeded = False
        if not catalogs:
            self.ensure_defaults(scope_id)
            catalogs = self.list_catalogs(scope_id)
            seeded = True

        result: Dict[str, List[Dict]] = {ctype.value: [] for ctype in ConfigType}
        for catalog in catalogs:
            result[catalog.config_type] = catalog.active_items()
        return result, seeded

    def get_config_by_type(self, config_type: Any, scope_id: ScopeId = None) -> List[Dict]:
        """只读查询，不触发初始化；目录不存在时返回空列表"""
        catalog = self.get_catalog(self.validate_type(config_type), scope_id)
        return catalog.active_items() if catalog else []

    def to_api_dict(self, config_type: Any, catalog: Optional[SysConfigCatalog]) -> Dict[str, Any]:
        ctype = self.validate_type(config_type)
        if catalog is None:
            return {"configType": ctype.value, "items": [], "lastModified": None, "lastModifiedBy": None}
        return {
            "configType": ctype.value,
            "items": catalog.active_items(),
            "lastModified": catalog.updated_at,
            "lastModifiedBy": _user_summary(catalog.last_modified_user),
        }

    # ---- mutations ----

    def add_item(
        self,
        config_type: Any,
        name: Optional[str],
        description: Optional[str] = None,
        color: Optional[str] = None,
        actor_id: Optional[int] = None,
        scope_id: ScopeId = None,
    ) -> List[Dict]:
        ctype = self.validate_type(config_type)
        clean_name = (name or "").strip()
        if not clean_name:
            raise EmptyItemName()

        catalog = self._get_or_seed(ctype, scope_id)
        if self._find_active_by_name(catalog, clean_name):
            raise DuplicateItemName(clean_name, ctype.value)

        catalog.items.append(SysConfigItem(
            name=clean_name,
            description=description or "",
            color=color or DEFAULT_ITEM_COLOR,
            is_active=True,
            sort_order=len(catalog.items),
            created_by=actor_id,
        ))
        self._touch(catalog, actor_id)
        self._commit(catalog)
        logger.info(f"Added '{clean_name}' to {ctype.value} (actor={actor_id})")
        return catalog.active_items()

    def update_item(
        self,
        config_type: Any,
        item_id: Any,
        patch: Dict[str, Any],
        actor_id: Optional[int] = None,
        scope_id: ScopeId = None,
    ) -> List[Dict]:
        """部分更新：name / description / color / is_active，未提供的字段保持不变"""
        ctype = self.validate_type(config_type)
        catalog = self._require_catalog(ctype, scope_id)
        item = catalog.find_item(_coerce_item_id(item_id))
        if item is None:
            raise CatalogItemNotFound(item_id)

        # 空白 name / color 视为未提供
        new_name = (patch.get("name") or "").strip() or None
        new_color = patch.get("color") or None
        new_active = patch.get("is_active")

        will_be_active = item.is_active if new_active is None else bool(new_active)
        if will_be_active and self._find_active_by_name(catalog, new_name or item.name, exclude_id=item.id):
            raise DuplicateItemName(new_name or item.name, ctype.value)

        if new_name is not None:
            item.name = new_name
        if patch.get("description") is not None:
            item.description = patch["description"]
        if new_color is not None:
            item.color = new_color
        if new_active is not None:
            item.is_active = bool(new_active)

        self._touch(catalog, actor_id)
        self._commit(catalog)
        logger.info(f"Updated {ctype.value} item {item_id} (actor={actor_id})")
        return catalog.active_items()

    def remove_item(
        self,
        config_type: Any,
        item_id: Any,
        actor_id: Optional[int] = None,
        scope_id: ScopeId = None,
    ) -> List[Dict]:
        """硬删除条目；部门/角色仍被启用用户引用时拒绝"""
        ctype = self.validate_type(config_type)
        catalog = self._require_catalog(ctype, scope_id)
        item = catalog.find_item(_coerce_item_id(item_id))
        if item is None:
            raise CatalogItemNotFound(item_id)

        field = USAGE_FIELD_BY_TYPE.get(ctype)
        if field is not None:
            usage_count = self.user_directory.count_active_users_with_field_value(field, item.name)
            if usage_count > 0:
                raise CatalogItemInUse(item.name, usage_count)

        removed_name = item.name
        catalog.items.remove(item)
        self._touch(catalog, actor_id)
        self._commit(catalog)
        logger.info(f"Removed '{removed_name}' from {ctype.value} (actor={actor_id})")
        return catalog.active_items()

    def reorder_items(
        self,
        config_type: Any,
        item_ids: Sequence[Any],
        actor_id: Optional[int] = None,
        scope_id: ScopeId = None,
    ) -> List[Dict]:
        """按给定顺序设置 order；未知 ID 跳过，未列出的条目保持原 order"""
        ctype = self.validate_type(config_type)
        if not isinstance(item_ids, (list, tuple)):
            raise MalformedReorderPayload()
        catalog = self._require_catalog(ctype, scope_id)

        for index, raw_id in enumerate(item_ids):
            item = catalog.find_item(_coerce_item_id(raw_id))
            if item is not None:
                item.sort_order = index

        self._touch(catalog, actor_id)
        self._commit(catalog)
        logger.info(f"Reordered {ctype.value} items (actor={actor_id})")
        return catalog.active_items()
