"""
tests/test_init_system_config.py

Tests for the system config initialization script.
"""
import logging

import pytest
from sqlalchemy.orm import sessionmaker

from app.system.models.catalog import SysConfigCatalog


@pytest.fixture
def script(db_engine, monkeypatch):
    """Point the script at the in-memory test engine"""
    from scripts import init_system_config

    monkeypatch.setattr(
        init_system_config, "SessionLocal",
        sessionmaker(autocommit=False, autoflush=False, bind=db_engine),
    )
    monkeypatch.setattr(init_system_config, "init_db", lambda: None)
    return init_system_config


class TestInitSystemConfigScript:

    def test_returns_seeded_names(self, script, db_session):
        names = script.init_system_config()

        assert names["departments"][0] == "Engineering"
        assert len(names["departments"]) == 8
        assert names["roles"][-1] == "Intern"
        assert db_session.query(SysConfigCatalog).count() == 5

    def test_rerun_is_idempotent(self, script, db_session):
        script.init_system_config()
        script.init_system_config()
        assert db_session.query(SysConfigCatalog).count() == 5

    def test_scope_argument(self, script, db_session):
        assert script.main(["--scope-id", "3", "--log-level", "WARNING"]) == 0
        assert db_session.query(SysConfigCatalog).filter(SysConfigCatalog.scope_id == 3).count() == 5

    def test_main_reports_failure(self, script, monkeypatch, caplog):
        def boom(scope_id=None):
            raise RuntimeError("no database")

        monkeypatch.setattr(script, "init_system_config", boom)
        with caplog.at_level(logging.ERROR):
            assert script.main([]) == 1
        assert "Error initializing system config" in caplog.text
