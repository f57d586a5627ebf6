import logging

from sqlalchemy import create_engine, inspect, exc
from sqlalchemy.orm import sessionmaker

from category_api import config

logger = logging.getLogger(__name__)

if config.DB_ENGINE == "mysql":
    SQLALCHEMY_DATABASE_URL = (
        f"mysql+pymysql://{config.DB_USER}:{config.DB_PASS}"
        f"@{config.DB_HOST}:{config.DB_PORT}/{config.DB_NAME}"
    )
else:
    # Default to SQLite (local dev)
    SQLALCHEMY_DATABASE_URL = f"sqlite:///{config.SQLITE_PATH}"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    # For SQLite, need connect_args check_same_thread
    connect_args={"check_same_thread": False} if config.DB_ENGINE != "mysql" else {},
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency helper to provide a DB session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_initialized(bind=None) -> bool:
    """
    Return True if the ``categories`` table already exists.
    """
    try:
        return inspect(bind or engine).has_table("categories")
    except exc.SQLAlchemyError as e:
        logger.warning("Could not inspect database: %s", e)
        return False
