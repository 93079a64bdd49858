from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bookshelf.core.config import settings


def _connect_args() -> dict:
    if settings.DB_STATEMENT_TIMEOUT_MS > 0:
        # Bounds how long the server keeps running a query whose caller has gone away
        return {"options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    pool_size=settings.DB_MAX_OPEN_CONNS,
    max_overflow=0,
    pool_recycle=settings.DB_MAX_IDLE_TIME_SECONDS,
    connect_args=_connect_args(),
)

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)

def get_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
