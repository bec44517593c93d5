"""Engine construction and the request-scoped session dependency."""

from sqlalchemy import text
from sqlalchemy.pool import QueuePool, StaticPool

from app.db.database import create_db_engine, get_db


def test_testing_engine_shares_one_in_memory_database(settings):
    engine = create_db_engine(settings)

    assert isinstance(engine.pool, StaticPool)
    assert str(engine.url) == "sqlite:///:memory:"


def test_server_engine_uses_configured_pool(settings):
    config = settings.model_copy(update={
        "TESTING": False,
        "DATABASE_URL": "sqlite:///./unused.db",
        "DB_POOL_SIZE": 3,
    })

    engine = create_db_engine(config)

    assert isinstance(engine.pool, QueuePool)
    assert engine.pool.size() == 3
    engine.dispose()


def test_get_db_yields_a_working_session():
    dependency = get_db()
    db = next(dependency)

    assert db.execute(text("SELECT 1")).scalar() == 1
    dependency.close()
