"""Sistema Costura: clientes, pedidos e despesas de um ateliê de costura."""

__version__ = "1.0.0"
