"""
身份上下文 — 当前请求的操作者，用于审计字段和角色校验
"""
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional


@dataclass(frozen=True)
class IdentityContext:
    """
    Attributes:
        user_id: 操作者用户ID
        email: 登录邮箱
        roles: 角色名集合（如 'Admin', 'HR', 'Manager', 'Team Lead'）
    """

    user_id: Optional[int]
    email: Optional[str] = None
    roles: FrozenSet[str] = field(default_factory=frozenset)

    def current_actor_id(self) -> Optional[int]:
        return self.user_id

    def current_actor_roles(self) -> FrozenSet[str]:
        return self.roles

    def has_any_role(self, allowed: Iterable[str]) -> bool:
        return bool(self.roles.intersection(allowed))
