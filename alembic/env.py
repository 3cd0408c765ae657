"""
Alembic Environment for the Local Library

The database URL comes from app settings (DATABASE_URL, .env and
.env.<environment>), never from alembic.ini, so migrations run against the
same database the app is configured for.

Importing app.database also installs the SQLite foreign key listener, so
the RESTRICT constraints on the catalog tables hold during migrations run
against a SQLite file. SQLite cannot ALTER most constraints in place; batch
mode is turned on for it so autogenerated migrations recreate the table
instead.

    alembic revision --autogenerate -m "message"
    alembic upgrade head
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from app.config import get_settings
from app.database import Base
from app.models import (  # noqa: F401 - registers the catalog and user tables
    Author,
    Book,
    BookInstance,
    Genre,
    User,
    UserSession,
)

settings = get_settings()

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

render_as_batch = settings.database_url.startswith("sqlite")


def run_migrations_offline() -> None:
    """Emit the migration SQL (alembic upgrade head --sql) without connecting."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=render_as_batch,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=render_as_batch,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
