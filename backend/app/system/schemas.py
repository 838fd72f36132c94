"""
系统配置目录请求模式
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogItemCreate(BaseModel):
    # name 的非空校验在 Service 中完成，以返回统一的错误信息
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=20)


class CatalogItemUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = Field(None, max_length=20)
    is_active: Optional[bool] = Field(None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

