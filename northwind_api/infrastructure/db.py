from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from northwind_api.core_settings import get_settings
from northwind_api.domain.models import Base

settings = get_settings()
DATABASE_URL = settings.database_url

engine_kwargs: dict = {"echo": False, "future": True}
if DATABASE_URL.startswith("sqlite"):
    # SQLite connections are shared with the threadpool that runs sync endpoints
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        # One connection, otherwise every session sees its own empty in-memory database
        engine_kwargs["poolclass"] = StaticPool
else:
    engine_kwargs["pool_pre_ping"] = True

engine = create_engine(DATABASE_URL, **engine_kwargs)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        # Uncommitted work from an abandoned request is rolled back here
        db.close()

def init_models():
    Base.metadata.create_all(engine)
