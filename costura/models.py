from typing import Optional
from sqlmodel import Field, SQLModel
from datetime import date, datetime
from enum import Enum

# --- Enums ---
class OrderStatus(str, Enum):
    """Status reconhecidos para um Pedido.

    O campo `Order.status` continua sendo texto livre; este enum só alimenta
    os formulários e os helpers de exibição.
    """
    PENDING = "pending"          # Pendente
    IN_PROGRESS = "in-progress"  # Em andamento
    COMPLETED = "completed"      # Concluído
    DELIVERED = "delivered"      # Entregue


class ExpenseCategory(str, Enum):
    """Categorias sugeridas para Despesas (não obrigatórias)."""
    MATERIAL = "material"
    BILL = "bill"
    TRANSPORT = "transport"
    OTHER = "other"

# --- Modelos de Dados (Tabelas) ---

class Client(SQLModel, table=True):
    """
    Representa uma Cliente do ateliê.
    Nunca é alterada nem excluída depois do cadastro.
    """
    __tablename__ = "clients"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(description="Nome completo da cliente")
    phone: Optional[str] = Field(default=None, description="Telefone/WhatsApp")
    email: Optional[str] = None
    address: Optional[str] = None
    registered_on: date = Field(default_factory=date.today, description="Data de cadastro")
    created_at: datetime = Field(default_factory=datetime.now)


class Order(SQLModel, table=True):
    """
    Representa um Pedido de costura vinculado a uma cliente.
    Só muda via status e pagamento.
    """
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    client_id: int = Field(foreign_key="clients.id", description="ID da Cliente vinculada")
    description: str
    service_type: str = Field(description="Tipo de serviço (ex: Barra, Ajuste, Vestido)")
    price: float = Field(description="Valor cobrado")
    order_date: date = Field(default_factory=date.today, description="Data do pedido")
    delivery_date: Optional[str] = Field(default=None, description="Data de entrega combinada (texto livre)")
    notes: Optional[str] = None
    status: str = Field(default=OrderStatus.PENDING.value)
    paid: bool = Field(default=False)
    created_at: datetime = Field(default_factory=datetime.now, description="Data de abertura")


class Expense(SQLModel, table=True):
    """
    Uma Despesa avulsa do ateliê (material, contas, transporte...).
    """
    __tablename__ = "expenses"

    id: Optional[int] = Field(default=None, primary_key=True)
    description: str
    amount: float = Field(description="Valor gasto")
    category: str
    date: date
    created_at: datetime = Field(default_factory=datetime.now)
