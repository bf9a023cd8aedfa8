from pathlib import Path

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from db.models import Base


def create_db_engine(echo: bool = False, *, db_file: str | Path, reset: bool = False) -> Engine:
    """Open the SQLite file, creating missing tables."""
    path = Path(db_file)
    if reset and path.exists():
        path.unlink()
    path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(f"sqlite:///{path}", echo=echo)
    Base.metadata.create_all(engine)
    return engine


def init_db(echo: bool = False, *, db_file: str | Path, reset: bool = False) -> Session:
    return sessionmaker(create_db_engine(echo, db_file=db_file, reset=reset))()
