import logging
from pathlib import Path
from typing import Annotated, Optional
from urllib.parse import urlencode

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from costura import formatting, services, stats
from costura.config import Settings
from costura.database import make_engine
from costura.logging_config import setup_logging
from costura.models import Client, Expense, ExpenseCategory, Order, OrderStatus
from costura.services import Outcome
from costura.storage import JsonStorage, SqlStorage, Storage

logger = logging.getLogger(__name__)

settings = Settings.from_env()

app = FastAPI(title="Sistema Costura")
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.filters["currency"] = formatting.format_currency
templates.env.filters["br_date"] = formatting.format_date
templates.env.filters["status_emoji"] = formatting.status_emoji
templates.env.filters["status_label"] = formatting.status_label
templates.env.filters["category_label"] = formatting.category_label

_storage: Optional[Storage] = None


def build_storage(config: Settings) -> Storage:
    """Escolhe o backend conforme COSTURA_BACKEND."""
    if config.backend == "json":
        return JsonStorage(config.data_dir)
    return SqlStorage(make_engine(config.database_url))


def get_storage() -> Storage:
    """Dependência: o armazenamento configurado (criado uma única vez)."""
    global _storage
    if _storage is None:
        _storage = build_storage(settings)
    return _storage


StorageDep = Annotated[Storage, Depends(get_storage)]


@app.on_event("startup")
def on_startup():
    setup_logging(settings.log_level)
    storage = get_storage()
    storage.setup()
    logger.info("Sistema Costura iniciado (backend: %s)", storage.name)


# --- helpers de resposta ---

def redirect(url: str, outcome: Optional[Outcome] = None) -> RedirectResponse:
    """Redireciona levando só o código do aviso na query string."""
    if outcome is not None:
        url = f"{url}?{urlencode({'notice': outcome.code})}"
    return RedirectResponse(url=url, status_code=303)


def render(request: Request, name: str, **context):
    # Códigos desconhecidos são ignorados: o texto nunca vem da URL
    notice = services.notice_for(request.query_params.get("notice"))
    context.setdefault("level", notice[0] if notice else None)
    context.setdefault("notice", notice[1] if notice else None)
    return templates.TemplateResponse(request, name, context)


def client_names(storage: Storage) -> dict[int, str]:
    return {c.id: c.name for c in storage.load(Client)}


# --- Painel ---
@app.get("/", response_class=HTMLResponse)
async def dashboard(request: Request, storage: StorageDep):
    orders = storage.load(Order)
    summary = stats.compute_summary(orders, storage.load(Expense), storage.load(Client))
    return render(
        request, "index.html",
        stats=summary,
        recent_orders=stats.recent_orders(orders),
        client_names=client_names(storage),
    )


@app.get("/health")
def health(storage: StorageDep):
    return {"ok": True, "backend": storage.name}


# --- Rotas de Clientes ---
@app.get("/clientes", response_class=HTMLResponse)
async def list_clients(request: Request, storage: StorageDep):
    clients = storage.load(Client, order_by="name")
    return render(request, "clients.html", clients=clients)


@app.post("/clientes/novo")
async def add_client(
    storage: StorageDep,
    name: Annotated[str, Form()] = "",
    phone: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    address: Annotated[str, Form()] = "",
):
    outcome = services.create_client(storage, name, phone, email, address)
    return redirect("/clientes", outcome)


@app.get("/clientes/{client_id}", response_class=HTMLResponse)
async def client_details(client_id: str, request: Request, storage: StorageDep):
    client = services.find_client(storage, client_id)
    if not client:
        return redirect("/clientes", Outcome("client_not_found"))
    orders = [o for o in storage.load(Order, order_by="created_at", descending=True)
              if o.client_id == client.id]
    return render(request, "client_details.html", client=client, orders=orders)


# --- Rotas de Pedidos ---
@app.get("/pedidos", response_class=HTMLResponse)
async def list_orders(request: Request, storage: StorageDep):
    orders = storage.load(Order, order_by="created_at", descending=True)
    return render(
        request, "orders.html",
        orders=orders,
        client_names=client_names(storage),
        statuses=list(OrderStatus),
    )


@app.get("/pedidos/novo", response_class=HTMLResponse)
async def new_order_form(request: Request, storage: StorageDep):
    clients = storage.load(Client, order_by="name")
    return render(request, "order_form.html", clients=clients)


@app.post("/pedidos/novo")
async def create_order(
    storage: StorageDep,
    client_id: Annotated[str, Form()] = "",
    description: Annotated[str, Form()] = "",
    service_type: Annotated[str, Form()] = "",
    price: Annotated[str, Form()] = "",
    delivery_date: Annotated[str, Form()] = "",
    notes: Annotated[str, Form()] = "",
):
    outcome = services.create_order(
        storage, client_id, description, service_type, price, delivery_date, notes
    )
    if not outcome.ok:
        return redirect("/pedidos/novo", outcome)
    return redirect("/pedidos", outcome)


@app.post("/pedidos/{order_id}/status")
async def update_order_status(
    order_id: str,
    storage: StorageDep,
    status: Annotated[str, Form()] = "",
):
    outcome = services.set_order_status(storage, order_id, status)
    return redirect("/pedidos", outcome)


@app.post("/pedidos/{order_id}/pagamento")
async def update_order_payment(
    order_id: str,
    storage: StorageDep,
    paid: Annotated[str, Form()] = "false",
):
    outcome = services.set_order_paid(storage, order_id, paid)
    return redirect("/pedidos", outcome)


# --- Rotas de Despesas ---
@app.get("/despesas", response_class=HTMLResponse)
async def list_expenses(request: Request, storage: StorageDep):
    expenses = storage.load(Expense, order_by="date", descending=True)
    return render(
        request, "expenses.html",
        expenses=expenses,
        total=stats.total_expenses(expenses),
        categories=list(ExpenseCategory),
    )


@app.post("/despesas/nova")
async def add_expense(
    storage: StorageDep,
    description: Annotated[str, Form()] = "",
    amount: Annotated[str, Form()] = "",
    category: Annotated[str, Form()] = "",
    date: Annotated[str, Form()] = "",
):
    outcome = services.create_expense(storage, description, amount, category, date)
    return redirect("/despesas", outcome)


@app.post("/despesas/{expense_id}/excluir")
async def remove_expense(expense_id: str, storage: StorageDep):
    outcome = services.delete_expense(storage, expense_id)
    return redirect("/despesas", outcome)


# --- Financeiro e Relatórios ---
@app.get("/financeiro", response_class=HTMLResponse)
async def finance(request: Request, storage: StorageDep):
    summary = stats.compute_summary(storage.load(Order), storage.load(Expense), storage.load(Client))
    return render(request, "finance.html", stats=summary)


@app.get("/relatorios", response_class=HTMLResponse)
async def reports(request: Request, storage: StorageDep):
    orders = storage.load(Order)
    summary = stats.compute_summary(orders, storage.load(Expense), storage.load(Client))
    return render(
        request, "reports.html",
        stats=summary,
        by_status=stats.status_breakdown(orders),
    )
