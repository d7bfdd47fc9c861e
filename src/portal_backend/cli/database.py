import click
from contextlib import contextmanager
from sqlalchemy.orm import Session

from portal_backend.database import build_engine, build_session_factory
from portal_backend.model import Base
from portal_backend.settings import settings

database_url_option = click.option(
    "--database-url",
    "database_url",
    envvar="DATABASE_URL",
    default=None,
    help="Overrides the configured database URL"
)


@contextmanager
def cli_session(database_url: str = None):
    engine = build_engine(database_url or settings.DATABASE_URL)
    db: Session = build_session_factory(engine)()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@click.command()
@database_url_option
def init_db(database_url):
    """Create all portal tables that do not exist yet."""
    engine = build_engine(database_url or settings.DATABASE_URL)
    try:
        Base.metadata.create_all(bind=engine)
    finally:
        engine.dispose()

    click.echo("Database schema created")
