"""SQLModel database engine and session management."""

import logging

from sqlalchemy import inspect
from sqlmodel import SQLModel, create_engine, Session

from auth_service.config import settings

logger = logging.getLogger(__name__)

# SQLite needs check_same_thread=False; PostgreSQL does not
connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(
    settings.database_url,
    echo=False,
    connect_args=connect_args,
)

# Columns a user_account table created by an older build may lack;
# create_all never alters an existing table.
_ADDED_COLUMNS = {
    "two_factor_secret": "VARCHAR",
    "is_two_factor_enabled": "BOOLEAN NOT NULL DEFAULT FALSE",
    "is_online": "BOOLEAN NOT NULL DEFAULT FALSE",
    "last_seen": "TIMESTAMP",
}


def _run_migrations(bind=None):
    """Run lightweight schema migrations for added columns."""
    from sqlalchemy import text

    bind = bind or engine
    inspector = inspect(bind)

    if "user_account" not in inspector.get_table_names():
        return

    columns = {col["name"] for col in inspector.get_columns("user_account")}
    for name, ddl in _ADDED_COLUMNS.items():
        if name in columns:
            continue
        logger.info(f"Migrating: adding user_account.{name}")
        with bind.connect() as conn:
            conn.execute(text(f"ALTER TABLE user_account ADD COLUMN {name} {ddl}"))
            conn.commit()


def create_db_and_tables(bind=None):
    """Create all tables. Called on startup."""
    import auth_service.models  # noqa: F401

    bind = bind or engine
    SQLModel.metadata.create_all(bind)
    _run_migrations(bind)


def get_session() -> Session:
    """Dependency that yields a database session."""
    with Session(engine) as session:
        yield session
