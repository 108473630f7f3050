"""
Configuração de logging do Sistema Costura.
Chame setup_logging() uma vez na inicialização.
"""
import logging
from datetime import datetime


class HumanFormatter(logging.Formatter):
    """Formato curto e legível para o console."""

    def format(self, record):
        ts = datetime.now().strftime("%H:%M:%S")
        line = f"{ts} [{record.levelname[0]}] {record.name}: {record.getMessage()}"
        if record.exc_info and record.exc_info[0]:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level="INFO"):
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(HumanFormatter())
    root.addHandler(console)

    # uvicorn já tem seus próprios handlers de acesso
    logging.getLogger("uvicorn.access").propagate = False
