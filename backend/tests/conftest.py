"""
Pytest 配置和共享 fixtures
"""
import os

# 测试不写本地数据库文件，也不在启动时写入默认目录
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SEED_DEFAULTS_ON_STARTUP", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.database import Base, get_db
from app.models.user import User, UserRole
from app.system import models as system_models  # noqa
from app.security.auth import get_password_hash, create_access_token
from app.main import app


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== 用户相关 Fixtures ==============

@pytest.fixture
def make_user(db_session):
    """用户工厂"""
    counter = {"n": 0}

    def _make_user(role=UserRole.EMPLOYEE, department="Engineering", is_active=True, **kwargs):
        counter["n"] += 1
        user = User(
            first_name=kwargs.pop("first_name", "Test"),
            last_name=kwargs.pop("last_name", f"User{counter['n']}"),
            email=kwargs.pop("email", f"user{counter['n']}@example.com"),
            password_hash=get_password_hash(kwargs.pop("password", "123456")),
            role=role,
            department=department,
            position=kwargs.pop("position", "Staff"),
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


def _headers_for(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def admin_user(make_user):
    return make_user(role=UserRole.ADMIN, department="Administration",
                     first_name="Ada", last_name="Admin", email="admin@example.com")


@pytest.fixture
def admin_headers(admin_user):
    """返回 Admin 认证的请求头"""
    return _headers_for(admin_user)


@pytest.fixture
def hr_headers(make_user):
    """返回 HR 认证的请求头"""
    return _headers_for(make_user(role=UserRole.HR, department="Human Resources"))


@pytest.fixture
def team_lead_headers(make_user):
    """返回 Team Lead 认证的请求头"""
    return _headers_for(make_user(role=UserRole.TEAM_LEAD))


@pytest.fixture
def employee_headers(make_user):
    """返回普通员工认证的请求头"""
    return _headers_for(make_user(role=UserRole.EMPLOYEE))
