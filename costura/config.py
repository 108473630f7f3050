import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Carrega variáveis de ambiente do arquivo .env
load_dotenv()

BACKENDS = ("sql", "json")


@dataclass(frozen=True)
class Settings:
    """Configuração da aplicação, lida das variáveis de ambiente."""
    backend: str = "sql"
    database_url: str = "sqlite:///costura.db"
    data_dir: str = "data"
    host: str = "0.0.0.0"
    port: int = 4567
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        backend = os.getenv("COSTURA_BACKEND", cls.backend).strip().lower()
        if backend not in BACKENDS:
            raise ValueError(
                f"COSTURA_BACKEND inválido: {backend!r} (use um de: {', '.join(BACKENDS)})"
            )
        return cls(
            backend=backend,
            database_url=os.getenv("COSTURA_DATABASE_URL", cls.database_url),
            data_dir=os.getenv("COSTURA_DATA_DIR", cls.data_dir),
            host=os.getenv("COSTURA_HOST", cls.host),
            port=int(os.getenv("COSTURA_PORT", str(cls.port))),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
