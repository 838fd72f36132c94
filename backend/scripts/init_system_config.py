"""
scripts/init_system_config.py

Initialize the system configuration catalogs.

Creates the tables if needed, seeds the default department and role
catalogs (plus empty position/skill/benefit catalogs) for the given
scope, then prints the seeded department and role names.
"""
import argparse
import sys
import logging
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.database import SessionLocal, init_db
from app.system.models.catalog import ConfigType
from app.system.services.catalog_service import ConfigCatalogService


logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Setup logging configuration"""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def init_system_config(scope_id=None) -> dict:
    """Seed defaults and return the active department/role names"""
    init_db()
    db = SessionLocal()
    try:
        service = ConfigCatalogService(db)
        stats = service.ensure_defaults(scope_id)
        logger.info(f"Default system config initialized: {stats}")
        return {
            config_type.value: [item["name"] for item in service.get_config_by_type(config_type, scope_id)]
            for config_type in (ConfigType.DEPARTMENTS, ConfigType.ROLES)
        }
    finally:
        db.close()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Initialize system configuration catalogs")
    parser.add_argument("--scope-id", type=int, default=None,
                        help="Company scope to seed (default: global catalog)")
    parser.add_argument("--log-level", default="INFO",
                        help="Logging level (default: INFO)")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    try:
        names = init_system_config(args.scope_id)
    except Exception:
        logger.exception("Error initializing system config")
        return 1

    logger.info(f"Departments: {names[ConfigType.DEPARTMENTS.value]}")
    logger.info(f"Roles: {names[ConfigType.ROLES.value]}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
