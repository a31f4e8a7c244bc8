# app/main.py
"""
Ponto de entrada da aplicação FastAPI do encurtador de URLs.
Define a fábrica da aplicação (`create_app`), middlewares, handlers de erro,
rotas e o ciclo de vida (lifespan) que cria e fecha o pool do PostgreSQL.
"""

# ========================
# --- Importações ---
# ========================
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# --- Módulos da Aplicação ---
from app.routers import health, short_urls
from app.core.config import Settings, get_settings
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.db.postgres_utils import Database

logger = logging.getLogger(__name__)

# ========================
# --- Função de Setup do Middleware CORS ---
# ========================
def _setup_cors_middleware(app_instance: FastAPI, current_settings: Settings):
    """Configura o middleware CORS para a aplicação."""
    if current_settings.CORS_ALLOWED_ORIGINS:
        logger.info(f"Configurando CORS para origens: {current_settings.CORS_ALLOWED_ORIGINS}")
        app_instance.add_middleware(
            CORSMiddleware,
            allow_origins=current_settings.CORS_ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )
    else:
        logger.debug("Nenhuma origem CORS configurada; middleware CORS não adicionado.")

# ========================
# --- Ciclo de Vida (Lifespan) ---
# ========================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gerencia o ciclo de vida da aplicação.

    Cria o pool do PostgreSQL no startup e o fecha no shutdown. Se o banco
    estiver inacessível, a aplicação sobe mesmo assim e as rotas que dependem
    dele respondem 500 até o próximo restart.
    """
    logger.info("Iniciando ciclo de vida da aplicação...")
    current_settings: Settings = app.state.settings
    db = Database(current_settings.database)
    try:
        await db.connect()
    except Exception as e:
        logger.critical(f"Falha ao conectar ao PostgreSQL na inicialização: {e!r}")
        app.state.db = None
    else:
        app.state.db = db
        logger.info("Aplicação iniciada e pronta.")

    yield

    logger.info("Iniciando processo de encerramento...")
    if app.state.db is not None:
        await app.state.db.close()
    logger.info("Aplicação encerrada.")

# ========================
# --- Fábrica da Aplicação ---
# ========================
def create_app(current_settings: Optional[Settings] = None) -> FastAPI:
    """
    Monta a instância FastAPI.

    Args:
        current_settings: Configurações a injetar. Se None, lê do ambiente
            (é o caminho usado pelo Uvicorn com `factory=True`).
    """
    current_settings = current_settings or get_settings()
    setup_logging(log_level=current_settings.LOG_LEVEL)

    app_instance = FastAPI(
        title=current_settings.PROJECT_NAME,
        description="API para encurtar URLs e redirecionar códigos curtos.",
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan
    )
    app_instance.state.settings = current_settings
    app_instance.state.db = None

    _setup_cors_middleware(app_instance, current_settings)
    register_exception_handlers(app_instance)

    # /health precisa vir antes da rota curinga /{short_code}
    app_instance.include_router(health.router)
    app_instance.include_router(short_urls.router)
    return app_instance
