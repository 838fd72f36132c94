"""
系统配置目录 API 路由
前缀: /api/system/config
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.database import get_db
from app.responses import error_response, log_failure, success_response
from app.security.auth import require_admin, require_catalog_reader
from app.security.context import IdentityContext
from app.system.models.catalog import ScopeId
from app.system.schemas import CatalogItemCreate, CatalogItemUpdate
from app.system.services.catalog_service import ConfigCatalogService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/system/config", tags=["System Config"])

# 当前部署只使用全局目录
GLOBAL_SCOPE: ScopeId = None


def _store_failure(message: str, exc: SQLAlchemyError):
    log_failure(message, exc, logger)
    return error_response(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, error=str(exc))


def _reorder_ids(payload: Any) -> Any:
    # 非对象请求体没有 itemIds，交给 Service 按格式错误处理
    return payload.get("itemIds") if isinstance(payload, dict) else None


@router.get("")
def get_all_configs(
    db: Session = Depends(get_db),
    identity: IdentityContext = Depends(require_catalog_reader),
):
    """获取全部配置目录"""
    service = ConfigCatalogService(db)
    try:
        result, seeded = service.get_all(scope_id=GLOBAL_SCOPE)
    except SQLAlchemyError as e:
        return _store_failure("Error fetching system configurations", e)
    message = (
        "Configurations initialized and retrieved" if seeded
        else "All configurations retrieved successfully"
    )
    return success_response(result, message)


@router.get("/{config_type}")
def get_config(
    config_type: str,
    db: Session = Depends(get_db),
    identity: IdentityContext = Depends(require_catalog_reader),
):
    """按类型获取配置目录"""
    service = ConfigCatalogService(db)
    try:
        catalog, seeded = service.get_by_type(config_type, scope_id=GLOBAL_SCOPE)
        data = service.to_api_dict(config_type, catalog)
    except SQLAlchemyError as e:
        return _store_failure("Error fetching system configuration", e)
    message = (
        "Configuration initialized and retrieved" if seeded
        else "Configuration retrieved successfully"
    )
    return success_response(data, message)


@router.post("/{config_type}")
def add_config_item(
    config_type: str,
    data: CatalogItemCreate,
    db: Session = Depends(get_db),
    identity: IdentityContext = Depends(require_admin),
):
    """新增目录条目（仅 Admin）"""
    service = ConfigCatalogService(db)
    try:
        items = service.add_item(
            config_type, data.name,
            description=data.description, color=data.color,
            actor_id=identity.current_actor_id(), scope_id=GLOBAL_SCOPE,
        )
    except SQLAlchemyError as e:
        return _store_failure("Error adding configuration item", e)
    return success_response(
        {"configType": config_type, "items": items},
        f"Item added to {config_type} successfully",
        status_code=status.HTTP_201_CREATED,
    )


@router.put("/{config_type}/reorder")
def reorder_config_items(
    config_type: str,
    payload: Any = Body(None),
    db: Session = Depends(get_db),
    identity: IdentityContext = Depends(require_admin),
):
    """调整目录条目顺序（仅 Admin）"""
    service = ConfigCatalogService(db)
    try:
        items = service.reorder_items(
            config_type, _reorder_ids(payload),
            actor_id=identity.current_actor_id(), scope_id=GLOBAL_SCOPE,
        )
    except SQLAlchemyError as e:
        return _store_failure("Error reordering configuration items", e)
    return success_response(
        {"configType": config_type, "items": items},
        f"{config_type} items reordered successfully",
    )


@router.put("/{config_type}/{item_id}")
def update_config_item(
    config_type: str,
    item_id: str,
    data: CatalogItemUpdate,
    db: Session = Depends(get_db),
    identity: IdentityContext = Depends(require_admin),
):
    """更新目录条目（仅 Admin，部分更新）"""
    service = ConfigCatalogService(db)
    try:
        items = service.update_item(
            config_type, item_id, data.model_dump(exclude_unset=True),
            actor_id=identity.current_actor_id(), scope_id=GLOBAL_SCOPE,
        )
    except SQLAlchemyError as e:
        return _store_failure("Error updating configuration item", e)
    return success_response(
        {"configType": config_type, "items": items},
        f"{config_type} item updated successfully",
    )


@router.delete("/{config_type}/{item_id}")
def delete_config_item(
    config_type: str,
    item_id: str,
    db: Session = Depends(get_db),
    identity: IdentityContext = Depends(require_admin),
):
    """删除目录条目（仅 Admin，被启用用户引用时拒绝）"""
    service = ConfigCatalogService(db)
    try:
        items = service.remove_item(
            config_type, item_id,
            actor_id=identity.current_actor_id(), scope_id=GLOBAL_SCOPE,
        )
    except SQLAlchemyError as e:
        return _store_failure("Error deleting configuration item", e)
    return success_response(
        {"configType": config_type, "items": items},
        f"{config_type} item deleted successfully",
    )
