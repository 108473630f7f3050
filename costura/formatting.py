from datetime import date, datetime

from costura.models import OrderStatus

STATUS_EMOJI = {
    OrderStatus.PENDING.value: "⏳",
    OrderStatus.IN_PROGRESS.value: "🔄",
    OrderStatus.COMPLETED.value: "✅",
    OrderStatus.DELIVERED.value: "🎉",
}

STATUS_LABELS = {
    OrderStatus.PENDING.value: "Pendente",
    OrderStatus.IN_PROGRESS.value: "Em andamento",
    OrderStatus.COMPLETED.value: "Concluído",
    OrderStatus.DELIVERED.value: "Entregue",
}

CATEGORY_LABELS = {
    "material": "Material",
    "bill": "Conta",
    "transport": "Transporte",
    "other": "Outros",
}


def format_currency(value) -> str:
    """Ex: 1234.5 -> 'R$ 1234,50'."""
    try:
        amount = float(value or 0)
    except (TypeError, ValueError):
        amount = 0.0
    return f"R$ {amount:.2f}".replace(".", ",")


def format_date(value) -> str:
    """dd/mm/aaaa para datas e textos ISO; outro texto volta como está."""
    if value is None or value == "":
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime("%d/%m/%Y")
    try:
        return date.fromisoformat(str(value)[:10]).strftime("%d/%m/%Y")
    except ValueError:
        return str(value)


def status_emoji(status) -> str:
    return STATUS_EMOJI.get(str(status), "📝")


def status_label(status) -> str:
    return STATUS_LABELS.get(str(status), str(status))


def category_label(category) -> str:
    return CATEGORY_LABELS.get(str(category), str(category))
