from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from flightbook.config import settings


def build_engine(database_url: str) -> Engine:
    """
    SQLite (local development and tests) needs thread sharing switched on and,
    for in-memory databases, a single shared connection. Every other backend
    gets the pooled configuration.
    """
    if database_url.startswith("sqlite"):
        if database_url.endswith(":memory:") or database_url.endswith("://"):
            sqlite_engine = create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            sqlite_engine = create_engine(database_url, connect_args={"check_same_thread": False})

        # SQLite leaves foreign keys unenforced unless asked per connection
        @event.listens_for(sqlite_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return sqlite_engine

    return create_engine(
        database_url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Centralized declarative base shared by every model
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind: Engine = None):
    # Importing the package registers every model on Base.metadata
    import flightbook.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
