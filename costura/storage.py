"""
Camada de persistência do Sistema Costura.

`Storage` define as operações usadas pelas rotas e pelos serviços. Existem duas
implementações intercambiáveis:

- `JsonStorage`: um arquivo JSON por coleção (clients.json, orders.json,
  expenses.json). Toda alteração lê a coleção inteira e a regrava inteira.
- `SqlStorage`: tabelas SQLModel, uma linha por registro.

A coleção é identificada pela própria classe do modelo (`Client`, `Order`,
`Expense`).
"""
import json
import logging
import os
import tempfile
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Type, TypeVar

from pydantic import ValidationError
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, select

from costura.database import create_db_and_tables

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=SQLModel)


class StorageError(Exception):
    """Falha de leitura/escrita no armazenamento."""


class CorruptCollectionError(StorageError):
    """Arquivo de coleção existe mas não é um array JSON válido."""


class Storage(ABC):
    name = "abstract"

    def setup(self) -> None:
        """Prepara o armazenamento (tabelas, diretórios)."""

    @abstractmethod
    def load(self, model: Type[M], order_by: Optional[str] = None, descending: bool = False) -> list[M]:
        """Todos os registros da coleção. Coleção vazia ou inexistente devolve []."""

    @abstractmethod
    def get(self, model: Type[M], record_id: int) -> Optional[M]:
        ...

    @abstractmethod
    def insert(self, record: SQLModel) -> int:
        """Grava o registro com um id novo e devolve o id."""

    @abstractmethod
    def update(self, model: Type[M], record_id: int, **fields) -> bool:
        """Altera campos de um registro. False se o id não existir."""

    @abstractmethod
    def delete(self, model: Type[M], record_id: int) -> bool:
        """Remove um registro. False se o id não existir."""


def _sort(records: list, order_by: Optional[str], descending: bool) -> list:
    if not order_by:
        return records

    def key(record):
        value = getattr(record, order_by)
        # None vai para o fim na ordem crescente
        return (value is None, value)

    return sorted(records, key=key, reverse=descending)


class JsonStorage(Storage):
    """
    Armazenamento em arquivos JSON, um array por coleção.

    Leitura e regravação acontecem sob um lock da instância, então requisições
    simultâneas no mesmo processo não perdem escritas. Vários processos
    gravando o mesmo diretório continuam sem proteção.
    """
    name = "json"

    def __init__(self, data_dir):
        self.data_dir = Path(data_dir)
        self._lock = threading.Lock()
        self._last_ids: dict[str, int] = {}

    def setup(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def path_for(self, model: Type[SQLModel]) -> Path:
        return self.data_dir / f"{model.__tablename__}.json"

    # --- leitura/escrita da coleção inteira ---

    def _read(self, model: Type[M]) -> list[M]:
        path = self.path_for(model)
        if not path.exists():
            return []
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise CorruptCollectionError(f"{path}: JSON inválido ({e})") from e
        if not isinstance(raw, list):
            raise CorruptCollectionError(f"{path}: esperado um array JSON")
        try:
            return [model.model_validate(item) for item in raw]
        except ValidationError as e:
            raise CorruptCollectionError(f"{path}: registro inválido ({e})") from e

    def _write(self, model: Type[SQLModel], records: list) -> None:
        self.setup()
        path = self.path_for(model)
        payload = json.dumps(
            [r.model_dump(mode="json") for r in records],
            ensure_ascii=False,
            indent=2,
        )
        # Grava num temporário e troca de uma vez: leitores nunca veem meio arquivo
        fd, tmp = tempfile.mkstemp(dir=self.data_dir, prefix=path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def _next_id(self, model: Type[SQLModel], records: list) -> int:
        key = model.__tablename__
        highest = max((r.id for r in records), default=0)
        highest = max(highest, self._last_ids.get(key, 0))
        new_id = max(int(time.time() * 1000), highest + 1)
        self._last_ids[key] = new_id
        return new_id

    # --- contrato Storage ---

    def load(self, model, order_by=None, descending=False):
        with self._lock:
            records = self._read(model)
        return _sort(records, order_by, descending)

    def get(self, model, record_id):
        for record in self.load(model):
            if record.id == record_id:
                return record
        return None

    def insert(self, record):
        model = type(record)
        with self._lock:
            records = self._read(model)
            record.id = self._next_id(model, records)
            records.append(record)
            self._write(model, records)
        return record.id

    def update(self, model, record_id, **fields):
        with self._lock:
            records = self._read(model)
            target = next((r for r in records if r.id == record_id), None)
            if target is None:
                return False
            for name, value in fields.items():
                setattr(target, name, value)
            self._write(model, records)
        return True

    def delete(self, model, record_id):
        with self._lock:
            records = self._read(model)
            remaining = [r for r in records if r.id != record_id]
            if len(remaining) == len(records):
                return False
            self._write(model, remaining)
        return True


class SqlStorage(Storage):
    """Armazenamento relacional via SQLModel. Uma sessão por operação."""
    name = "sql"

    def __init__(self, engine: Engine):
        self.engine = engine

    def setup(self) -> None:
        create_db_and_tables(self.engine)

    def load(self, model, order_by=None, descending=False):
        query = select(model)
        if order_by:
            column = getattr(model, order_by)
            query = query.order_by(column.desc() if descending else column)
        with Session(self.engine) as session:
            return list(session.exec(query).all())

    def get(self, model, record_id):
        with Session(self.engine) as session:
            return session.get(model, record_id)

    def insert(self, record):
        with Session(self.engine) as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            return record.id

    def update(self, model, record_id, **fields):
        with Session(self.engine) as session:
            obj = session.get(model, record_id)
            if not obj:
                return False
            for name, value in fields.items():
                setattr(obj, name, value)
            session.add(obj)
            session.commit()
        return True

    def delete(self, model, record_id):
        with Session(self.engine) as session:
            obj = session.get(model, record_id)
            if not obj:
                return False
            session.delete(obj)
            session.commit()
        return True
