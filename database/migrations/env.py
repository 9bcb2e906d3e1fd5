"""
Alembic environment for the credential database.

Only online mode is supported: the caller passes an open connection in
``config.attributes["connection"]``.
"""

from alembic import context

from database.models import Base

config = context.config
target_metadata = Base.metadata


def run_migrations_online() -> None:
    connection = config.attributes.get("connection")
    if connection is None:
        raise RuntimeError("Migrations must be run through database.migrate.run_migrations")

    context.configure(
        connection=connection,
        target_metadata=target_metadata,
    )
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    raise RuntimeError("Offline migrations are not supported")
run_migrations_online()
