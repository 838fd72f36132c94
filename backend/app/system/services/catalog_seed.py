"""
配置目录种子数据 — 首次访问时写入默认部门和角色
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.system.models.catalog import ConfigType, ScopeId, SysConfigCatalog, SysConfigItem

logger = logging.getLogger(__name__)


SEED_CATALOGS = {
    ConfigType.DEPARTMENTS: [
        {"name": "Engineering", "description": "Software development and technical roles", "color": "#3B82F6"},
        {"name": "Human Resources", "description": "HR and people management", "color": "#10B981"},
        {"name": "Sales", "description": "Sales and business development", "color": "#F59E0B"},
        {"name": "Marketing", "description": "Marketing and promotions", "color": "#EF4444"},
        {"name": "Finance", "description": "Accounting and financial operations", "color": "#8B5CF6"},
        {"name": "Operations", "description": "Business operations and logistics", "color": "#06B6D4"},
        {"name": "Support", "description": "Customer support and service", "color": "#84CC16"},
        {"name": "Administration", "description": "Administrative and office management", "color": "#6B7280"},
    ],
    ConfigType.ROLES: [
        {"name": "Admin", "description": "System administrator with full access", "color": "#DC2626"},
        {"name": "HR", "description": "Human resources personnel", "color": "#059669"},
        {"name": "Manager", "description": "Department or team manager", "color": "#7C3AED"},
        {"name": "Team Lead", "description": "Team leader and coordinator", "color": "#0891B2"},
        {"name": "Senior Developer", "description": "Senior software developer", "color": "#1D4ED8"},
        {"name": "Developer", "description": "Software developer", "color": "#2563EB"},
        {"name": "Junior Developer", "description": "Junior software developer", "color": "#3B82F6"},
        {"name": "Designer", "description": "UI/UX designer", "color": "#F59E0B"},
        {"name": "Sales Executive", "description": "Sales representative", "color": "#EA580C"},
        {"name": "Marketing Specialist", "description": "Marketing specialist", "color": "#DB2777"},
        {"name": "Support Specialist", "description": "Customer support specialist", "color": "#65A30D"},
        {"name": "Analyst", "description": "Business or data analyst", "color": "#7C2D12"},
        {"name": "Intern", "description": "Intern or trainee", "color": "#6B7280"},
    ],
}


def _catalog_exists(db: Session, config_type: ConfigType, scope_id: ScopeId) -> bool:
    query = db.query(SysConfigCatalog.id).filter(SysConfigCatalog.config_type == config_type.value)
    if scope_id is None:
        query = query.filter(SysConfigCatalog.scope_id.is_(None))
    else:
        query = query.filter(SysConfigCatalog.scope_id == scope_id)
    return query.first() is not None


def _build_catalog(config_type: ConfigType, scope_id: ScopeId) -> SysConfigCatalog:
    items = [
        SysConfigItem(
            name=seed["name"],
            description=seed["description"],
            color=seed["color"],
            is_active=True,
            sort_order=index,
        )
        for index, seed in enumerate(SEED_CATALOGS.get(config_type, []))
    ]
    return SysConfigCatalog(config_type=config_type.value, scope_id=scope_id, items=items)


def seed_catalog_data(db: Session, scope_id: ScopeId = None) -> dict:
    """Seed default catalogs for a scope. Idempotent — checked per type.

    Each missing catalog is committed on its own; a unique-constraint
    violation means a concurrent request inserted it first and is skipped.

    Returns dict with count of created catalogs.
    """
    stats = {"catalogs": 0}

    for config_type in ConfigType:
        if _catalog_exists(db, config_type, scope_id):
            continue
        db.add(_build_catalog(config_type, scope_id))
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(f"Catalog {config_type.value} already seeded for scope {scope_id}")
            continue
        stats["catalogs"] += 1

    if stats["catalogs"] > 0:
        logger.info(f"Seeded {stats['catalogs']} configuration catalog(s) for scope {scope_id}")
    return stats
