"""
认证与授权模块
JWT Bearer 认证，按角色名授权
"""
import bcrypt
import logging
from datetime import datetime, timedelta, UTC
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.user import User, UserRole
from app.security.context import IdentityContext

logger = logging.getLogger(__name__)

security = HTTPBearer()

# 目录读取 / 维护权限
CATALOG_READ_ROLES = (UserRole.ADMIN, UserRole.HR, UserRole.MANAGER, UserRole.TEAM_LEAD)
CATALOG_WRITE_ROLES = (UserRole.ADMIN,)


def get_password_hash(password: str) -> str:
    """密码哈希"""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """验证密码"""
    return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))


def create_access_token(user_id: int, role: str, expires_minutes: Optional[int] = None) -> str:
    """创建 JWT token"""
    minutes = expires_minutes if expires_minutes is not None else settings.ACCESS_TOKEN_EXPIRE_MINUTES
    expire = datetime.now(UTC) + timedelta(minutes=minutes)
    to_encode = {
        "sub": str(user_id),
        "role": role,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """解码 JWT token"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed"
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """获取当前登录用户"""
    payload = decode_token(credentials.credentials)

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, user not found"
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is deactivated"
        )
    return user


async def get_identity_context(current_user: User = Depends(get_current_user)) -> IdentityContext:
    """当前操作者的身份上下文"""
    return IdentityContext(
        user_id=current_user.id,
        email=current_user.email,
        roles=frozenset({current_user.role}),
    )


def require_roles(*allowed_roles: str):
    """角色权限验证依赖，通过后返回 IdentityContext"""
    async def role_checker(identity: IdentityContext = Depends(get_identity_context)) -> IdentityContext:
        if not identity.has_any_role(allowed_roles):
            logger.info(f"User {identity.user_id} denied, requires one of {allowed_roles}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User role is not authorized to access this route"
            )
        return identity
    return role_checker


require_catalog_reader = require_roles(*CATALOG_READ_ROLES)
require_admin = require_roles(*CATALOG_WRITE_ROLES)
