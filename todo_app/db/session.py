from sqlalchemy.engine import Engine
from sqlmodel import create_engine, SQLModel
from ..core.config import Settings


# Helper function to ensure URL format is correct
def get_db_url(settings: Settings) -> str:
    url = settings.DATABASE_URL
    if not url:
        return "sqlite:///todo.db"
    # Hosted Postgres providers still hand out postgres:// URLs
    return url.replace("postgres://", "postgresql://", 1)


def build_engine(settings: Settings) -> Engine:
    db_url = get_db_url(settings)

    # --- CONFIGURATION FOR SQLITE ---
    if db_url.startswith("sqlite"):
        # Requests are served from the threadpool, so the connection is shared across threads
        return create_engine(
            db_url,
            echo=settings.SQL_ECHO,
            connect_args={"check_same_thread": False}
        )

    # --- CONFIGURATION FOR POSTGRESQL ---
    return create_engine(
        db_url,
        echo=settings.SQL_ECHO,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10
    )


# Create database tables on startup
def create_db_and_tables(engine: Engine) -> None:
    # Import models so they are registered on the metadata
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
