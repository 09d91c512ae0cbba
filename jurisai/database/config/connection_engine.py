"""
Connection Engine (SQLAlchemy)

Purpose
-------
Centralizes database initialization for the application:
- Builds a SQLAlchemy connection URL from environment-backed settings.
- Creates the Engine (connection pool + SQL execution entry point).
- Defines shared MetaData for table and schema objects.
- Exposes a Declarative Base class for ORM models.

Notes
-----
- `DATABASE_URL` wins when set (used by the test-suite with SQLite); otherwise
  the URL is assembled with `URL.create(...)` from the DB_* settings.
- All ORM models must inherit from `declarativeBase`.
"""


from sqlalchemy import create_engine
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import declarative_base
from sqlalchemy.schema import MetaData
from jurisai.database.config.config import settings

if settings.DATABASE_URL:
    connection_url = make_url(settings.DATABASE_URL)
else:
    connection_url = URL.create(
        drivername=settings.DB_DRIVER_NAME,
        username=settings.DB_USERNAME,
        password=settings.DB_PASSWORD,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_DATABASE_NAME,
    )
"""SQLAlchemy connection URL built from Settings."""

# SQLite connections are shared between the event loop and the threadpool.
connect_args = {"check_same_thread": False} if connection_url.get_backend_name() == "sqlite" else {}

connection_engine = create_engine(connection_url, connect_args=connect_args, pool_pre_ping=True)
"""Engine object: Core interface to the database.
Responsible for managing connections, executing SQL, and pooling.
"""

metadata = MetaData()
"""
Metadata object: Stores schema-level information about tables, constraints, indexes, etc. Shared across all models.
"""

declarativeBase = declarative_base(metadata=metadata)
"""Declarative Base: Root class for ORM models.
All model classes should inherit from this to gain ORM features and automatic schema generation.
"""
