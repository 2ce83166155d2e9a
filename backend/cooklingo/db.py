from __future__ import annotations
from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import sessionmaker, declarative_base
from .settings import settings


DATABASE_URL = settings.database_url or "sqlite:///./cooklingo.db"

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, future=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
Base = declarative_base()


def get_db():
	db = SessionLocal()
	try:
		yield db
	finally:
		db.close()


# Best-effort lightweight migrations for word tables created before scoring existed
def ensure_schema(bind=None) -> None:
	bind = bind or engine
	try:
		inspector = inspect(bind)
		tables = set(inspector.get_table_names())
	except Exception:
		return
	if "words" in tables:
		cols = {c["name"] for c in inspector.get_columns("words")}
		with bind.begin() as conn:
			for name in ("recognition", "frequency", "simplicity"):
				if name not in cols:
					conn.exec_driver_sql(f"ALTER TABLE words ADD COLUMN {name} INTEGER DEFAULT 0 NOT NULL")
