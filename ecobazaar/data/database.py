# ecobazaar/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool

from ecobazaar.utils import settings
from ecobazaar.utils.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()

_store = None


def make_engine(url: str):
    #in-memory sqlite: one shared connection, otherwise every checkout sees an empty db
    if url.startswith("sqlite") and ":memory:" in url:
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(url, pool_pre_ping=True, future=True)


def build_store():
    """
    Pick the record store from the environment.

    DATABASE_URL (direct SQL) wins over SUPABASE_URL + key (PostgREST).
    """
    from ecobazaar.data.rest_store import RestRecordStore
    from ecobazaar.data.sql_store import SqlRecordStore

    if settings.DATABASE_URL:
        logger.info("Using SQL record store via DATABASE_URL")
        return SqlRecordStore(make_engine(settings.DATABASE_URL))

    if settings.SUPABASE_URL and settings.SUPABASE_KEY:
        logger.info("Using Supabase REST record store")
        return RestRecordStore(settings.SUPABASE_URL, settings.SUPABASE_KEY)

    raise RuntimeError("Set DATABASE_URL or SUPABASE_URL and SUPABASE_KEY")


def get_store():
    """Singleton record store, also the FastAPI dependency."""
    global _store
    if _store is None:
        _store = build_store()
    return _store


def init_store(store) -> None:
    """Create tables when the store owns its schema (SQL only)."""
    from ecobazaar.data.sql_store import SqlRecordStore

    if isinstance(store, SqlRecordStore):
        import ecobazaar.data.models  # noqa: F401  registers tables on Base.metadata

        Base.metadata.create_all(bind=store.engine)
        logger.info(f"Tables ready: {sorted(Base.metadata.tables)}")
