"""Validation and mutation rules, run against both backends."""

from datetime import date

import pytest

from costura import services
from costura.models import Client, Expense, Order
from costura.services import OutcomeKind


def _new_client(storage, name="Maria") -> int:
    return services.create_client(storage, name).record_id


def _new_order(storage, client_id, price="120") -> int:
    outcome = services.create_order(storage, client_id, "Vestido de festa", "Vestido", price)
    assert outcome.kind is OutcomeKind.CREATED
    return outcome.record_id


# --- clientes ---

def test_create_client_trims_and_stores(storage) -> None:
    outcome = services.create_client(storage, "  Maria  ", " 1199 ", "", "  ")

    assert outcome.kind is OutcomeKind.CREATED
    assert outcome.ok
    client = storage.get(Client, outcome.record_id)
    assert client.name == "Maria"
    assert client.phone == "1199"
    assert client.email is None
    assert client.address is None


@pytest.mark.parametrize("name", ["", "   ", None])
def test_create_client_requires_name(storage, name) -> None:
    outcome = services.create_client(storage, name)

    assert outcome.kind is OutcomeKind.VALIDATION_FAILED
    assert outcome.level == "error"
    assert storage.load(Client) == []


# --- pedidos ---

def test_create_order_defaults(storage) -> None:
    order_id = _new_order(storage, _new_client(storage))

    order = storage.get(Order, order_id)
    assert order.status == "pending"
    assert order.paid is False
    assert order.price == 120.0
    assert order.order_date == date.today()


def test_create_order_accepts_comma_decimal(storage) -> None:
    order_id = _new_order(storage, _new_client(storage), price="89,90")
    assert storage.get(Order, order_id).price == 89.9


def test_create_order_unknown_client_is_rejected(storage) -> None:
    outcome = services.create_order(storage, "777", "Barra", "Barra", "30")

    assert outcome.kind is OutcomeKind.NOT_FOUND
    assert not outcome.ok
    assert storage.load(Order) == []


@pytest.mark.parametrize(
    "client_id, description, service_type, price",
    [
        ("", "Barra", "Barra", "30"),
        ("abc", "Barra", "Barra", "30"),
        ("{cid}", "", "Barra", "30"),
        ("{cid}", "Barra", "  ", "30"),
        ("{cid}", "Barra", "Barra", "0"),
        ("{cid}", "Barra", "Barra", "-10"),
        ("{cid}", "Barra", "Barra", "trinta"),
        ("{cid}", "Barra", "Barra", "nan"),
    ],
)
def test_create_order_validation(storage, client_id, description, service_type, price) -> None:
    cid = _new_client(storage)
    outcome = services.create_order(storage, client_id.format(cid=cid), description, service_type, price)

    assert outcome.kind is OutcomeKind.VALIDATION_FAILED
    assert storage.load(Order) == []


def test_status_accepts_free_text(storage) -> None:
    order_id = _new_order(storage, _new_client(storage))

    outcome = services.set_order_status(storage, order_id, "aguardando tecido")

    assert outcome.kind is OutcomeKind.UPDATED
    assert storage.get(Order, order_id).status == "aguardando tecido"


def test_status_unknown_order(storage) -> None:
    assert services.set_order_status(storage, 999, "delivered").kind is OutcomeKind.NOT_FOUND


def test_paid_flag_is_idempotent(storage) -> None:
    order_id = _new_order(storage, _new_client(storage))

    services.set_order_paid(storage, order_id, "true")
    once = storage.get(Order, order_id)
    services.set_order_paid(storage, order_id, "true")
    twice = storage.get(Order, order_id)

    assert once.paid is True
    assert twice.model_dump() == once.model_dump()


def test_paid_flag_only_true_string_means_paid(storage) -> None:
    order_id = _new_order(storage, _new_client(storage))

    services.set_order_paid(storage, order_id, "TRUE")
    assert storage.get(Order, order_id).paid is True
    services.set_order_paid(storage, order_id, "yes")
    assert storage.get(Order, order_id).paid is False


def test_paid_unknown_order(storage) -> None:
    assert services.set_order_paid(storage, 999, "true").kind is OutcomeKind.NOT_FOUND


# --- despesas ---

def test_create_expense(storage) -> None:
    outcome = services.create_expense(storage, "Tecido", "150,00", "material", "2025-02-14")

    assert outcome.kind is OutcomeKind.CREATED
    expense = storage.get(Expense, outcome.record_id)
    assert expense.amount == 150.0
    assert expense.date == date(2025, 2, 14)


@pytest.mark.parametrize(
    "description, amount, category, when",
    [
        ("", "10", "material", "2025-02-14"),
        ("Tecido", "0", "material", "2025-02-14"),
        ("Tecido", "", "material", "2025-02-14"),
        ("Tecido", "10", "", "2025-02-14"),
        ("Tecido", "10", "material", ""),
        ("Tecido", "10", "material", "14/02/2025"),
    ],
)
def test_create_expense_validation(storage, description, amount, category, when) -> None:
    outcome = services.create_expense(storage, description, amount, category, when)

    assert outcome.kind is OutcomeKind.VALIDATION_FAILED
    assert storage.load(Expense) == []


def test_delete_expense(storage) -> None:
    expense_id = services.create_expense(storage, "Luz", "80", "bill", "2025-01-10").record_id

    assert services.delete_expense(storage, expense_id).kind is OutcomeKind.DELETED
    assert storage.load(Expense) == []


def test_delete_unknown_expense_is_noop(storage) -> None:
    services.create_expense(storage, "Luz", "80", "bill", "2025-01-10")

    outcome = services.delete_expense(storage, 31337)

    assert outcome.kind is OutcomeKind.NOT_FOUND
    assert len(storage.load(Expense)) == 1


def test_parse_amount() -> None:
    assert services.parse_amount("10") == 10.0
    assert services.parse_amount(" 10,5 ") == 10.5
    assert services.parse_amount("") is None
    assert services.parse_amount(None) is None
    assert services.parse_amount("inf") is None


# --- ids fora da faixa de 64 bits ---

HUGE_IDS = ["99999999999999999999", str(2 ** 63), str(-(2 ** 63) - 1), 2 ** 70]


@pytest.mark.parametrize("huge", HUGE_IDS)
def test_parse_id_rejects_out_of_range(huge) -> None:
    assert services.parse_id(huge) is None


def test_parse_id_accepts_range_limits() -> None:
    assert services.parse_id(str(2 ** 63 - 1)) == 2 ** 63 - 1
    assert services.parse_id(-(2 ** 63)) == -(2 ** 63)
    assert services.parse_id(" 42 ") == 42


@pytest.mark.parametrize("huge", HUGE_IDS)
def test_huge_ids_are_not_found(storage, huge) -> None:
    _new_client(storage)
    services.create_expense(storage, "Luz", "80", "bill", "2025-01-10")

    assert services.create_order(storage, huge, "Barra", "Barra", "30").kind is OutcomeKind.NOT_FOUND
    assert services.set_order_status(storage, huge, "delivered").kind is OutcomeKind.NOT_FOUND
    assert services.set_order_paid(storage, huge, "true").kind is OutcomeKind.NOT_FOUND
    assert services.delete_expense(storage, huge).kind is OutcomeKind.NOT_FOUND
    assert services.find_client(storage, huge) is None
    assert storage.load(Order) == []
    assert len(storage.load(Expense)) == 1


def test_outcome_text_comes_from_notice_table() -> None:
    outcome = services.Outcome("order_paid", 7)

    assert outcome.kind is OutcomeKind.UPDATED
    assert outcome.message == "Pagamento marcado como pago"
    assert outcome.level == "success"
    assert services.notice_for("order_not_found") == ("error", "Pedido não encontrado!")
    assert services.notice_for("<script>") is None
    assert services.notice_for(None) is None
