import logging
import os

from alembic.config import Config
from sqlalchemy import Connection, create_engine, make_url
from sqlalchemy.engine import Engine

from alembic import command
from billtrack.settings import settings

logger = logging.getLogger(__name__)

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

_engine: Engine | None = None
_connection: Connection | None = None


def _redacted_url() -> str:
    return make_url(settings.db_url).render_as_string(hide_password=True)


def get_engine() -> Engine:
    """Process-wide engine, created on first use from ``settings.db_url``."""
    global _engine
    if _engine is None:
        _engine = create_engine(settings.db_url, pool_pre_ping=True, pool_recycle=1800)
        logger.info("Database engine created for %s", _redacted_url())
    return _engine


def get_connection() -> Connection:
    """Shared connection for scripts and the interactive shell.

    HTTP requests never use this; DBConnectionMiddleware gives each request its own.
    """
    global _connection
    if _connection is None:
        _connection = get_engine().connect()
        logger.debug("Shared DB connection opened")
    return _connection


def dispose_engine() -> None:
    global _engine, _connection
    if _connection is not None:
        _connection.close()
        _connection = None
    if _engine is not None:
        _engine.dispose()
        _engine = None
        logger.info("Database engine disposed")


def _get_alembic_config() -> Config:
    ini_path = os.path.join(PROJECT_ROOT, "alembic.ini")
    if not os.path.exists(ini_path):
        ini_path = os.path.join(os.getcwd(), "alembic.ini")
    cfg = Config(ini_path)
    cfg.set_main_option("script_location", os.path.join(PROJECT_ROOT, "alembic"))
    # env.py prefers this over re-reading settings; '%' must be escaped for configparser.
    cfg.set_main_option("sqlalchemy.url", settings.db_url.replace("%", "%%"))
    return cfg


def initialize_db() -> None:
    """Bring the schema up to the latest Alembic revision."""
    logger.info("Migrating %s to head", _redacted_url())
    command.upgrade(_get_alembic_config(), "head")
    logger.info("Migrations complete")
