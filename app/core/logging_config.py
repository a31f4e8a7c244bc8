# app/core/logging_config.py
"""
Configuração de logging do serviço de URLs curtas com Loguru.

Os módulos da aplicação usam `logging.getLogger(__name__)`; o InterceptHandler
encaminha esses registros (e os do Uvicorn/asyncpg) para o Loguru, que é o único
destino de saída.
"""

# ========================
# --- Importações ---
# ========================
import logging
import sys
from loguru import logger as loguru_logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

# ========================
# --- Handler de Intercepção ---
# ========================
class InterceptHandler(logging.Handler):
    """Repassa cada `logging.LogRecord` ao Loguru preservando nível e origem."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = loguru_logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Sobe a pilha até sair do módulo logging para que {name}/{line} apontem para quem logou
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back # pragma: no cover
            depth += 1 # pragma: no cover

        loguru_logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())

# ========================
# --- Função de Setup ---
# ========================
def setup_logging(log_level: str = "INFO", enqueue: bool = True) -> None:
    """
    Configura o logging global do processo.

    - Troca o handler padrão do Loguru por um handler em `sys.stderr`.
    - Faz o `logging` padrão passar pelo `InterceptHandler`.
    - Desliga o log de acesso do Uvicorn e os logs do httpx.

    Args:
        log_level: Nível mínimo exibido (ex: "INFO", "DEBUG").
        enqueue: Se True, o Loguru escreve a partir de uma fila (seguro entre workers).
    """
    log_level = log_level.upper()

    loguru_logger.remove()
    loguru_logger.add(
        sys.stderr,
        level=log_level,
        format=LOG_FORMAT,
        enqueue=enqueue,
        diagnose=False   # Sem valores de variáveis nos tracebacks
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    logging.getLogger("uvicorn.access").disabled = True
    logging.getLogger("uvicorn.error").propagate = False

    loguru_logger.disable("httpx")
