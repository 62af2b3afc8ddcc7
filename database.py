# -*- coding: utf-8 -*-
from sqlalchemy import create_engine, event, text
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

import structlog

from config import settings

logger = structlog.get_logger()

# SQLite só aceita a conexão na thread que a criou, a menos que se desligue o check
connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


if settings.is_sqlite:
    # SQLite ignora FOREIGN KEY / ON DELETE CASCADE sem este pragma (vale por conexão)
    @event.listens_for(engine, "connect")
    def _ativar_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def testar_conexao(db) -> None:
    """Executa um SELECT 1; propaga a exceção do driver se o banco estiver fora."""
    db.execute(text("SELECT 1"))


def fechar_conexoes():
    """Fecha o pool de conexões (chamado no shutdown)."""
    engine.dispose()
    logger.info("Pool de conexoes encerrado")
