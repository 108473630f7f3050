"""
Regras de cadastro e alteração.

Cada operação valida a entrada, grava através do `Storage` e devolve um
`Outcome`. As rotas levam só o código do aviso no redirecionamento; o texto
exibido vem sempre de `NOTICES`, nunca da URL.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from costura.models import Client, Expense, Order
from costura.storage import Storage

logger = logging.getLogger(__name__)

# Faixa do INTEGER do SQLite (64 bits com sinal)
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


class OutcomeKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    VALIDATION_FAILED = "validation_failed"
    NOT_FOUND = "not_found"


SUCCESS_KINDS = (OutcomeKind.CREATED, OutcomeKind.UPDATED, OutcomeKind.DELETED)

# código do aviso -> (tipo do resultado, texto exibido)
NOTICES = {
    "client_created": (OutcomeKind.CREATED, "Cliente cadastrada com sucesso!"),
    "client_invalid": (OutcomeKind.VALIDATION_FAILED, "Nome da cliente é obrigatório!"),
    "client_not_found": (OutcomeKind.NOT_FOUND, "Cliente não encontrada!"),
    "order_created": (OutcomeKind.CREATED, "Pedido criado com sucesso!"),
    "order_invalid": (OutcomeKind.VALIDATION_FAILED, "Preencha todos os campos obrigatórios!"),
    "order_not_found": (OutcomeKind.NOT_FOUND, "Pedido não encontrado!"),
    "status_updated": (OutcomeKind.UPDATED, "Status do pedido atualizado!"),
    "order_paid": (OutcomeKind.UPDATED, "Pagamento marcado como pago"),
    "order_unpaid": (OutcomeKind.UPDATED, "Pagamento marcado como pendente"),
    "expense_created": (OutcomeKind.CREATED, "Despesa registrada com sucesso!"),
    "expense_invalid": (OutcomeKind.VALIDATION_FAILED, "Preencha todos os campos obrigatórios!"),
    "expense_bad_date": (OutcomeKind.VALIDATION_FAILED, "Data da despesa inválida!"),
    "expense_deleted": (OutcomeKind.DELETED, "Despesa excluída com sucesso!"),
    "expense_not_found": (OutcomeKind.NOT_FOUND, "Despesa não encontrada!"),
}


def notice_for(code) -> Optional[tuple[str, str]]:
    """(nível, texto) de um código conhecido; None para qualquer outro valor."""
    entry = NOTICES.get(code)
    if entry is None:
        return None
    kind, text = entry
    return ("success" if kind in SUCCESS_KINDS else "error"), text


@dataclass(frozen=True)
class Outcome:
    code: str
    record_id: Optional[int] = None

    @property
    def kind(self) -> OutcomeKind:
        return NOTICES[self.code][0]

    @property
    def message(self) -> str:
        return NOTICES[self.code][1]

    @property
    def ok(self) -> bool:
        return self.kind in SUCCESS_KINDS

    @property
    def level(self) -> str:
        return "success" if self.ok else "error"


# --- helpers de entrada ---

def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def parse_amount(value) -> Optional[float]:
    """Aceita '120', '120.50' ou '120,50'. None se não for número."""
    if value is None:
        return None
    text = str(value).strip().replace(",", ".")
    if not text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_id(value) -> Optional[int]:
    """Id inteiro dentro da faixa de 64 bits; None para o resto."""
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    if not MIN_ID <= number <= MAX_ID:
        return None
    return number


def _is_integer(value) -> bool:
    try:
        int(str(value).strip())
    except (TypeError, ValueError):
        return False
    return True


def _invalid(code: str) -> Outcome:
    outcome = Outcome(code)
    logger.warning("Validação falhou: %s", outcome.message)
    return outcome


# --- Clientes ---

def create_client(storage: Storage, name, phone=None, email=None, address=None) -> Outcome:
    name = _clean(name)
    if not name:
        return _invalid("client_invalid")

    client = Client(name=name, phone=_clean(phone), email=_clean(email), address=_clean(address))
    client_id = storage.insert(client)
    logger.info("Cliente %s cadastrada (%s)", client_id, name)
    return Outcome("client_created", client_id)


def find_client(storage: Storage, client_id) -> Optional[Client]:
    cid = parse_id(client_id)
    if cid is None:
        return None
    return storage.get(Client, cid)


# --- Pedidos ---

def create_order(
    storage: Storage,
    client_id,
    description,
    service_type,
    price,
    delivery_date=None,
    notes=None,
) -> Outcome:
    cid = parse_id(client_id)
    description = _clean(description)
    service_type = _clean(service_type)
    value = parse_amount(price)

    if not _is_integer(client_id) or not description or not service_type or value is None or value <= 0:
        return _invalid("order_invalid")

    if cid is None or storage.get(Client, cid) is None:
        logger.warning("Pedido recusado: cliente %s não existe", client_id)
        return Outcome("client_not_found")

    order = Order(
        client_id=cid,
        description=description,
        service_type=service_type,
        price=value,
        delivery_date=_clean(delivery_date),
        notes=_clean(notes),
    )
    order_id = storage.insert(order)
    logger.info("Pedido %s criado para cliente %s (R$ %.2f)", order_id, cid, value)
    return Outcome("order_created", order_id)


def set_order_status(storage: Storage, order_id, status) -> Outcome:
    """Qualquer texto é aceito como status; não há transições obrigatórias."""
    oid = parse_id(order_id)
    status = (status or "").strip()
    if oid is None or not storage.update(Order, oid, status=status):
        return Outcome("order_not_found")
    logger.info("Pedido %s: status -> %s", oid, status)
    return Outcome("status_updated", oid)


def set_order_paid(storage: Storage, order_id, paid) -> Outcome:
    oid = parse_id(order_id)
    is_paid = str(paid).strip().lower() == "true"
    if oid is None or not storage.update(Order, oid, paid=is_paid):
        return Outcome("order_not_found")
    logger.info("Pedido %s: pago=%s", oid, is_paid)
    return Outcome("order_paid" if is_paid else "order_unpaid", oid)


# --- Despesas ---

def create_expense(storage: Storage, description, amount, category, expense_date) -> Outcome:
    description = _clean(description)
    category = _clean(category)
    value = parse_amount(amount)

    if not description or not category or value is None or value <= 0:
        return _invalid("expense_invalid")
    try:
        when = date.fromisoformat((expense_date or "").strip())
    except ValueError:
        return _invalid("expense_bad_date")

    expense = Expense(description=description, amount=value, category=category, date=when)
    expense_id = storage.insert(expense)
    logger.info("Despesa %s registrada (R$ %.2f, %s)", expense_id, value, category)
    return Outcome("expense_created", expense_id)


def delete_expense(storage: Storage, expense_id) -> Outcome:
    eid = parse_id(expense_id)
    if eid is None or not storage.delete(Expense, eid):
        return Outcome("expense_not_found")
    logger.info("Despesa %s excluída", eid)
    return Outcome("expense_deleted", eid)
