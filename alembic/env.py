import os
from logging.config import fileConfig
from sqlalchemy import pool, create_engine
from alembic import context
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv(os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env'))

# Alembic Config object, gives access to values in alembic.ini
config = context.config

if config.config_file_name:
    fileConfig(config.config_file_name)

# DATABASE_URL from the environment wins over alembic.ini
DATABASE_URL = os.getenv("DATABASE_URL")
if DATABASE_URL:
    # Escape % characters for ConfigParser (% -> %%)
    config.set_main_option("sqlalchemy.url", DATABASE_URL.replace("%", "%%"))

# Model metadata for 'autogenerate' support
from database.models import Base

target_metadata = Base.metadata


def _database_url():
    url = DATABASE_URL or config.get_main_option("sqlalchemy.url")
    return url.replace("%%", "%") if url else url


def run_migrations_offline():
    """
    Run migrations in 'offline' mode.
    """
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """
    Run migrations in 'online' mode.
    """
    url = _database_url()
    connectable = create_engine(url, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            # SQLite cannot ALTER constraints in place
            render_as_batch=url.startswith("sqlite"),
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
