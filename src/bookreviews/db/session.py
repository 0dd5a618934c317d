"""
Configuración y utilidades para la gestión de la sesión de base de datos SQLAlchemy.
Incluye la creación del motor, la fábrica de sesiones y la clase base para los modelos ORM,
además del ciclo de vida explícito del almacén (init_db / close_db) usado al arrancar y
detener la API.
"""

import logging
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from bookreviews.core.config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str) -> Engine:
    """
    Crea un motor SQLAlchemy para la URL dada.

    SQLite necesita `check_same_thread=False` porque FastAPI atiende las rutas
    síncronas desde un pool de hilos.
    """
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def init_db(bind: Engine = engine) -> None:
    """
    Crea las tablas e índices de libros y reseñas si no existen.

    Args:
        bind (Engine): Motor sobre el que crear el esquema.
    """
    # Registra los modelos en Base.metadata antes de crear las tablas
    from bookreviews.models import book, review  # noqa: F401

    Base.metadata.create_all(bind=bind)
    logger.info(f"Database schema ready at {bind.url.render_as_string(hide_password=True)}")


def close_db(bind: Engine = engine) -> None:
    """Cierra todas las conexiones del pool del motor."""
    bind.dispose()
    logger.info("Database connections closed.")


def get_db():
    """
    Proporciona una sesión de base de datos para su uso en dependencias de FastAPI.

    Yields:
        Session: Sesión de base de datos SQLAlchemy.

    Ensures:
        La sesión se cierra correctamente después de su uso.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
