import pytest
from pydantic import ValidationError

from sync_worker.config import Settings, SyncConfig

ENV_VARS = (
    "SOURCE_DATABASES",
    "ORDERS_DB_URL",
    "PRODUCTS_DB_URL",
    "INVENTORY_DB_URL",
    "NEO4J_URI",
    "NEO4J_PASSWORD",
    "NEO4J_DATABASE",
    "SYNC_INTERVAL_SECONDS",
    "SYNC_CYCLE_TIMEOUT_SECONDS",
    "DB_POOL_MIN_SIZE",
    "DB_POOL_MAX_SIZE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's .env out of these tests.
    monkeypatch.chdir(tmp_path)


def test_defaults_cover_orders_and_products():
    config = Settings().to_sync_config()

    assert isinstance(config, SyncConfig)
    assert config.database_names == ("orders_db", "products_db")
    assert config.interval_seconds == 300.0
    assert config.cycle_timeout_seconds is None
    assert config.catalog_schema == "public"
    assert config.graph.uri == "bolt://localhost:7687"
    assert config.graph.database is None


def test_config_is_immutable():
    config = Settings().to_sync_config()

    with pytest.raises(AttributeError):
        config.interval_seconds = 1


def test_dsn_is_hidden_from_repr(monkeypatch):
    monkeypatch.setenv("ORDERS_DB_URL", "postgresql://sync:s3cret@db/orders")
    config = Settings().to_sync_config()

    assert "s3cret" not in repr(config)
    assert config.sources[0].dsn == "postgresql://sync:s3cret@db/orders"


def test_extra_database_reads_its_own_url(monkeypatch):
    monkeypatch.setenv("SOURCE_DATABASES", "orders_db, inventory_db, orders_db")
    monkeypatch.setenv("INVENTORY_DB_URL", "postgresql://u:p@db/inventory")

    config = Settings().to_sync_config()

    assert config.database_names == ("orders_db", "inventory_db")
    assert config.sources[1].dsn == "postgresql://u:p@db/inventory"


def test_extra_database_url_is_read_from_dotenv(tmp_path):
    (tmp_path / ".env").write_text(
        "SOURCE_DATABASES=orders_db,inventory_db\n"
        "INVENTORY_DB_URL=postgresql://u:p@db/inventory\n"
    )

    config = Settings().to_sync_config()

    assert config.database_names == ("orders_db", "inventory_db")
    assert config.sources[1].dsn == "postgresql://u:p@db/inventory"


def test_environment_overrides_dotenv_for_extra_database(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text(
        "SOURCE_DATABASES=inventory_db\nINVENTORY_DB_URL=postgresql://u:p@db/from_file\n"
    )
    monkeypatch.setenv("INVENTORY_DB_URL", "postgresql://u:p@db/from_env")

    config = Settings().to_sync_config()

    assert config.sources[0].dsn == "postgresql://u:p@db/from_env"


def test_missing_url_fails_fast(monkeypatch):
    monkeypatch.setenv("SOURCE_DATABASES", "inventory_db")

    with pytest.raises(ValueError, match="INVENTORY_DB_URL"):
        Settings().to_sync_config()


def test_empty_source_list_is_rejected(monkeypatch):
    monkeypatch.setenv("SOURCE_DATABASES", " , ")

    with pytest.raises(ValidationError):
        Settings()


def test_interval_must_be_positive(monkeypatch):
    monkeypatch.setenv("SYNC_INTERVAL_SECONDS", "0")

    with pytest.raises(ValidationError):
        Settings()


def test_overrides_flow_into_sync_config(monkeypatch):
    monkeypatch.setenv("SYNC_INTERVAL_SECONDS", "60")
    monkeypatch.setenv("SYNC_CYCLE_TIMEOUT_SECONDS", "45")
    monkeypatch.setenv("NEO4J_DATABASE", "schema")
    monkeypatch.setenv("DB_POOL_MIN_SIZE", "3")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "2")

    config = Settings().to_sync_config()

    assert config.interval_seconds == 60.0
    assert config.cycle_timeout_seconds == 45.0
    assert config.graph.database == "schema"
    assert config.pool_min_size == 3
    assert config.pool_max_size == 3
