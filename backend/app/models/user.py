"""
用户对象
目录服务只关心 role / department / is_active，其余为登录所需字段
"""
from datetime import datetime

from sqlalchemy import Column, Integer, String, Boolean, DateTime

from app.database import Base


class UserRole:
    """常用角色名（role 列为自由字符串，与角色目录中的名称对应）"""
    ADMIN = "Admin"
    HR = "HR"
    MANAGER = "Manager"
    TEAM_LEAD = "Team Lead"
    EMPLOYEE = "Employee"


class User(Base):
    """员工账号"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(100), nullable=False, default=UserRole.EMPLOYEE, index=True)
    department = Column(String(100), nullable=False, index=True)
    position = Column(String(100), nullable=False, default="")
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
