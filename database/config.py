# Database Configuration and Session Management

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
import logging

from config.app_config import DATABASE_URL

logger = logging.getLogger(__name__)


def build_engine(url: str):
    """
    Create the SQLAlchemy engine for the given URL.
    SQLite is used for local development and tests; Postgres in production.
    """
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=False
        )
        # SQLite only enforces ON DELETE CASCADE with foreign keys switched on
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=False  # Set to True for SQL query logging
    )


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# Create engine
engine = build_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Dependency for FastAPI
def get_db() -> Session:
    """
    FastAPI dependency to get database session.
    Usage: db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    """
    Initialize database tables.
    Run this once to create all tables.
    """
    from database.models import Base
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

if __name__ == "__main__":
    # Create tables when run directly
    logging.basicConfig(level=logging.INFO)
    init_db()
