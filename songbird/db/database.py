from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from songbird.core.config import settings


class Base(DeclarativeBase):
    pass


# sqlite connections are shared with the threadpool FastAPI runs sync routes in
connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
