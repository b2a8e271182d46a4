from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker
from .config import settings


def is_sqlite_url(url: str) -> bool:
    return url.startswith("sqlite")


def configure_sqlite_engine(target_engine) -> None:
    """Enable FK enforcement and working SAVEPOINTs on a pysqlite engine.

    pysqlite defers BEGIN on its own; hand transaction control to SQLAlchemy
    so nested transactions (used by the like toggle) behave as on PostgreSQL.
    """

    @event.listens_for(target_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(target_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


# Create database engine
engine = create_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
    connect_args={"check_same_thread": False} if is_sqlite_url(settings.DATABASE_URL) else {},
)
if is_sqlite_url(settings.DATABASE_URL):
    configure_sqlite_engine(engine)

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()
