from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from esnaf_defterim.core.config import settings


class Base(DeclarativeBase):
    pass


is_sqlite = settings.database_url.startswith("sqlite")

connect_args: dict = {}
if is_sqlite:
    connect_args["check_same_thread"] = False
elif settings.database_sslmode:
    connect_args["sslmode"] = settings.database_sslmode

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    pool_pre_ping=not is_sqlite,
    pool_recycle=1800 if not is_sqlite else -1,
)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    # Local SQLite setups skip alembic; production schemas come from migrations.
    import esnaf_defterim.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
