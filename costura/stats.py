"""
Totais financeiros calculados a partir das coleções atuais.

Funções puras: recalculam tudo a cada chamada, sem cache.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from costura.models import Client, Expense, Order, OrderStatus


@dataclass(frozen=True)
class FinancialSummary:
    total_revenue: float
    total_expenses: float
    profit: float
    active_orders: int
    profit_margin: float
    total_orders: int
    # None quando a lista de clientes não foi informada
    total_clients: Optional[int] = None


def total_revenue(orders: Iterable[Order]) -> float:
    return sum((o.price for o in orders if o.paid), 0.0)


def total_expenses(expenses: Iterable[Expense]) -> float:
    return sum((e.amount for e in expenses), 0.0)


def profit_margin(revenue: float, profit: float) -> float:
    """Margem em %. Zero quando não há receita, qualquer que seja o lucro."""
    if revenue == 0:
        return 0.0
    return profit / revenue * 100


def compute_summary(
    orders: Iterable[Order],
    expenses: Iterable[Expense],
    clients: Optional[Iterable[Client]] = None,
) -> FinancialSummary:
    orders = list(orders)
    revenue = total_revenue(orders)
    spent = total_expenses(expenses)
    profit = revenue - spent
    return FinancialSummary(
        total_revenue=revenue,
        total_expenses=spent,
        profit=profit,
        active_orders=sum(1 for o in orders if o.status != OrderStatus.DELIVERED.value),
        profit_margin=profit_margin(revenue, profit),
        total_orders=len(orders),
        total_clients=len(list(clients)) if clients is not None else None,
    )


def status_breakdown(orders: Iterable[Order]) -> dict[str, int]:
    """Quantidade de pedidos por status, na ordem em que cada status aparece."""
    counts: dict[str, int] = {}
    for order in orders:
        counts[order.status] = counts.get(order.status, 0) + 1
    return counts


def recent_orders(orders: Iterable[Order], limit: int = 5) -> list[Order]:
    return sorted(orders, key=lambda o: o.created_at, reverse=True)[:limit]
