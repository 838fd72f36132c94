"""
配置目录业务异常
每个异常携带 HTTP 状态码，由应用级异常处理器渲染为统一响应
"""
from typing import Any, Dict


class CatalogError(ValueError):
    """配置目录异常基类"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def extra(self) -> Dict[str, Any]:
        return {}


class InvalidConfigType(CatalogError):
    def __init__(self, config_type: Any):
        super().__init__("Invalid configuration type")
        self.config_type = config_type


class EmptyItemName(CatalogError):
    def __init__(self):
        super().__init__("Item name is required")


class DuplicateItemName(CatalogError):
    def __init__(self, name: str, config_type: str):
        super().__init__(f"{name} already exists in {config_type}")
        self.name = name


class CatalogNotFound(CatalogError):
    status_code = 404

    def __init__(self, config_type: str):
        super().__init__("Configuration not found")
        self.config_type = config_type


class CatalogItemNotFound(CatalogError):
    status_code = 404

    def __init__(self, item_id: Any):
        super().__init__("Configuration item not found")
        self.item_id = item_id


class CatalogItemInUse(CatalogError):
    def __init__(self, name: str, usage_count: int):
        super().__init__(
            f"Cannot delete {name}. It is currently assigned to {usage_count} user(s). "
            "Please reassign these users first."
        )
        self.name = name
        self.usage_count = usage_count

    def extra(self) -> Dict[str, Any]:
        return {"usageCount": self.usage_count}


class MalformedReorderPayload(CatalogError):
    def __init__(self):
        super().__init__("itemIds must be an array")


class ConcurrentCatalogUpdate(CatalogError):
    status_code = 409

    def __init__(self, config_type: str):
        super().__init__(f"{config_type} configuration was modified concurrently, please retry")
        self.config_type = config_type
