from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from .settings import settings


def _engine_options(url: str) -> dict:
    """Opciones de conexión según el motor (MySQL en producción, SQLite en local)"""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 280,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
    }


engine = create_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_options(settings.database_url)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Sesión por request; el servicio decide commit o rollback"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Crear las tablas que falten (solo si AUTO_CREATE_TABLES está activo)"""
    from app.shared.database import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
