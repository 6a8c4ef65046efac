# /educenter/db/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from educenter.core.config import settings

DATABASE_URL = settings.DATABASE_URL

# The 'check_same_thread' argument is only needed for SQLite.
engine_args = {"connect_args": {"check_same_thread": False}} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, pool_pre_ping=True, **engine_args)

# Each instance of this class is one request-scoped database session.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency to get a DB session. Used by `get_db_service` in the routers.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
