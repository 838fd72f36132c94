"""
用户服务 — 登录认证
"""
from typing import Optional

from sqlalchemy.orm import Session

from app.models.user import User
from app.security.auth import create_access_token, verify_password


class UserService:
    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def authenticate(self, email: str, password: str) -> Optional[dict]:
        """认证登录"""
        user = self.get_user_by_email(email)
        if not user:
            return None

        if not user.is_active:
            raise ValueError("Account is deactivated")

        if not verify_password(password, user.password_hash):
            return None

        return {
            'access_token': create_access_token(user.id, user.role),
            'token_type': 'bearer',
            'user': user,
        }
