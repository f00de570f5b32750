import logging
from pathlib import Path
from typing import Iterator, Optional

from alembic import command
from alembic.config import Config
from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.pool import NullPool
from sqlmodel import Session, create_engine

from .config import Settings
from .errors import BudgetPayError, TransactionError, UpstreamStoreUnavailable

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent / "migrations"


class Store:
    """Owns the engine for one process.

    Opened once at startup and closed at shutdown by the application
    lifespan. Request handlers get sessions through ``get_session``.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[Engine] = None

    def open(self) -> Engine:
        if self.engine is not None:
            return self.engine

        url = self.settings.database_url
        if self.settings.is_sqlite:
            engine = create_engine(
                url,
                echo=self.settings.database_echo,
                connect_args={"check_same_thread": False, "timeout": 60},
                poolclass=NullPool,  # avoid multiple pooled connections holding write locks
            )
            try:
                with engine.connect() as conn:
                    conn.exec_driver_sql("PRAGMA journal_mode=WAL;")
            except OperationalError as e:
                # A locked file at startup only costs us WAL mode.
                logger.warning("Could not enable WAL journal mode: %s", e)
        else:
            engine = create_engine(url, echo=self.settings.database_echo, pool_pre_ping=True)

        self.engine = engine
        logger.info("Store opened (%s)", engine.url.render_as_string(hide_password=True))
        return engine

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        logger.info("Store closed")

    def session(self) -> Session:
        if self.engine is None:
            raise UpstreamStoreUnavailable("Store is not open")
        return Session(self.engine)

    def ping(self) -> bool:
        if self.engine is None:
            return False
        with self.engine.connect() as conn:
            return conn.execute(text("SELECT 1")).scalar() == 1


def alembic_config(database_url: Optional[str] = None) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", str(MIGRATIONS_DIR))
    if database_url:
        cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def migrate(store: Store) -> None:
    """Bring the schema up to the latest revision. Runs once, before serving."""
    engine = store.open()
    cfg = alembic_config()
    with engine.begin() as conn:
        cfg.attributes["connection"] = conn
        command.upgrade(cfg, "head")
    logger.info("Migrations applied")


def classify_db_error(exc: DBAPIError) -> BudgetPayError:
    """Lost connections are fatal to the request; anything else is a failed write."""
    if isinstance(exc, InterfaceError) or exc.connection_invalidated:
        return UpstreamStoreUnavailable()
    return TransactionError()


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_session(store: Store = Depends(get_store)) -> Iterator[Session]:
    with store.session() as session:
        yield session
