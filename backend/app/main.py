"""
EMS 主应用入口
员工管理系统后端：认证 + 系统配置目录
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import SessionLocal, init_db
from app.responses import register_exception_handlers
from app.routers import auth
from app.system.routers import catalog_router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging() -> str:
    """根日志配置；DEBUG 开启时强制 DEBUG 级别"""
    level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # basicConfig 在已有 handler 时不生效，级别单独设置
    logging.getLogger().setLevel(level)
    return level


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    configure_logging()

    # 初始化数据库
    init_db()

    # 写入默认部门/角色目录（幂等）
    if settings.SEED_DEFAULTS_ON_STARTUP:
        from app.system.services.catalog_seed import seed_catalog_data
        seed_db = SessionLocal()
        try:
            seed_stats = seed_catalog_data(seed_db)
            if any(seed_stats.values()):
                logger.info(f"✓ 系统配置目录种子数据已初始化: {seed_stats}")
        finally:
            seed_db.close()

    yield


# 创建应用
app = FastAPI(
    title=settings.APP_NAME,
    description="Employee Management System API",
    version="1.0.0",
    lifespan=lifespan
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境应限制具体域名
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# 注册路由
app.include_router(auth.router)
app.include_router(catalog_router.router)


@app.get("/")
def root():
    """根路径"""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0",
        "description": "Employee Management System API"
    }


@app.get("/health")
def health_check():
    """健康检查"""
    return {"status": "healthy"}
