from sqlalchemy import inspect

from ressly.core import config as config_module
from ressly.db.init_db import init_db
from ressly.db.session import Database

EXPECTED_TABLES = {"residentials", "houses", "residents", "reports", "report_images", "report_votes"}


def test_init_db_creates_tables_for_sqlite_in_production(monkeypatch):
    database = Database("sqlite://")
    monkeypatch.setattr(config_module.settings, "ENV", "production")

    init_db(database.engine, drop_all=True)

    assert EXPECTED_TABLES <= set(inspect(database.engine).get_table_names())
    database.dispose()


def test_init_db_drop_all_recreates_empty_tables(database, community):
    init_db(database.engine, drop_all=True)
    with database.engine.connect() as connection:
        assert connection.exec_driver_sql("SELECT COUNT(*) FROM residents").scalar() == 0


def test_init_db_uses_explicit_config():
    database = Database("sqlite://")
    config = config_module.Settings(ENV="production", AUTO_CREATE_TABLES=False)

    init_db(database.engine, config=config)

    assert EXPECTED_TABLES <= set(inspect(database.engine).get_table_names())
    database.dispose()
