from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine
from costura.models import *


def make_engine(database_url: str, **kwargs) -> Engine:
    """
    Cria o engine do banco. Para SQLite, libera o uso entre threads
    e liga a checagem de chaves estrangeiras em cada conexão.
    """
    if database_url.startswith("sqlite"):
        # Configurações para SQLite (necessário para evitar erros de thread em alguns casos)
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        engine = create_engine(database_url, **kwargs)
        event.listen(engine, "connect", _enable_foreign_keys)
        return engine
    return create_engine(database_url, **kwargs)


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def create_db_and_tables(engine: Engine):
    """
    Cria todas as tabelas definidas nos modelos.
    Deve ser chamado na inicialização da aplicação.
    """
    SQLModel.metadata.create_all(engine)
