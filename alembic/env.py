"""
Alembic Environment for the Book Review API

Migrations run against settings.database_url (DATABASE_URL), never the
placeholder URL in alembic.ini. Autogenerate compares the database with
the users, books and reviews tables registered on Base.metadata,
including column types and server defaults, since books.average_rating
and books.total_reviews rely on server-side defaults of 0.

SQLite databases (local development, tests) are migrated in batch mode
because SQLite cannot ALTER constraints such as uq_review_user_book or
ck_review_rating_range in place.

Typical use:
    alembic upgrade head
    alembic revision --autogenerate -m "add reading lists"
    alembic upgrade head --sql > book_review.sql
"""

from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool

from alembic import context

from app.config import get_settings
from app.database import Base
from app.models import Book, Review, User  # noqa: F401 - registers tables on Base.metadata

settings = get_settings()

config = context.config
config.set_main_option("sqlalchemy.url", settings.database_url)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def configure_options(url: str) -> dict:
    """Context options shared by offline and online runs."""
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        "compare_server_default": True,
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    """Emit the migration SQL for settings.database_url without connecting."""
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **configure_options(url),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a single unpooled connection."""
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            **configure_options(str(connection.engine.url)),
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
