from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from eventreg.config import get_settings

DATABASE_URL = get_settings().database_url


def make_engine(url: str):
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if url.startswith("sqlite") else {}
    )


engine = make_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()
