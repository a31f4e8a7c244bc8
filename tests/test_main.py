# tests/test_main.py

# ========================
# --- Importações ---
# ========================
import io
import logging
from unittest.mock import AsyncMock, MagicMock
import pytest
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from httpx import AsyncClient
from loguru import logger as loguru_logger_obj

# --- Módulos da Aplicação ---
from app.core import logging_config
from app.core.config import Settings
from app.main import _setup_cors_middleware, create_app, lifespan
from tests.conftest import TEST_JWT_SECRET

# ============================
# --- Fixture Auxiliar ---
# ============================
@pytest.fixture
def log_stream():
    """Captura a saída do Loguru (para onde o `logging` padrão é encaminhado)."""
    logging_config.setup_logging(log_level="DEBUG", enqueue=False)
    stream = io.StringIO()
    handler_id = loguru_logger_obj.add(stream, level="DEBUG", format="{level} | {message}")
    yield stream
    loguru_logger_obj.remove(handler_id)

@pytest.fixture
def mock_database(mocker):
    """Substitui a classe `Database` usada pelo lifespan."""
    instance = MagicMock()
    instance.connect = AsyncMock()
    instance.close = AsyncMock()
    mock_cls = mocker.patch("app.main.Database", return_value=instance)
    return mock_cls, instance

# ===============================================
# --- Testes para a Fábrica da Aplicação ---
# ===============================================
def test_create_app_uses_injected_settings(test_settings: Settings):
    app_instance = create_app(test_settings)

    assert app_instance.title == test_settings.PROJECT_NAME
    assert app_instance.state.settings is test_settings
    assert app_instance.state.db is None

@pytest.mark.asyncio
async def test_health_route_is_not_shadowed_by_short_code_route(mocker, test_async_client: AsyncClient):
    mock_resolve = mocker.patch(
        "app.routers.short_urls.short_url_service.resolve_short_code", new_callable=AsyncMock
    )

    response = await test_async_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    # "health" também tem o formato de um código curto válido
    mock_resolve.assert_not_awaited()

# ===============================================
# --- Testes para a Função de Ciclo de Vida (Lifespan) ---
# ===============================================
@pytest.mark.asyncio
async def test_lifespan_creates_and_closes_pool(test_settings: Settings, mock_database):
    mock_cls, instance = mock_database
    test_app_instance = create_app(test_settings)

    async with lifespan(test_app_instance):
        assert test_app_instance.state.db is instance, "app.state.db deveria receber o pool criado."
        instance.close.assert_not_awaited()

    mock_cls.assert_called_once_with(test_settings.database)
    instance.connect.assert_awaited_once()
    instance.close.assert_awaited_once()

@pytest.mark.asyncio
async def test_lifespan_handles_database_connection_failure_on_startup(test_settings: Settings, mock_database):
    _, instance = mock_database
    instance.connect.side_effect = OSError("Connection refused")
    test_app_instance = create_app(test_settings)
    # create_app reconfigura o logging; o handler de captura vem depois
    log_stream = io.StringIO()
    handler_id = loguru_logger_obj.add(log_stream, level="DEBUG", format="{level} | {message}")

    try:
        async with lifespan(test_app_instance):
            assert test_app_instance.state.db is None, \
                "app.state.db não deveria ser definido se a conexão falhou."
    finally:
        loguru_logger_obj.remove(handler_id)

    instance.close.assert_not_awaited()
    assert "CRITICAL | Falha ao conectar ao PostgreSQL na inicialização" in log_stream.getvalue()

# ===============================================
# --- Testes Logging Config Externo ---
# ===============================================
def test_intercept_handler_emit_unknown_level(mocker):
    handler = logging_config.InterceptHandler()
    mock_loguru_opt_log = mocker.patch.object(loguru_logger_obj, "opt", return_value=loguru_logger_obj)
    mock_loguru_log = mocker.patch.object(loguru_logger_obj, "log")
    numeric_level = 60
    record = logging.LogRecord(
        name='test.logger',
        level=numeric_level,
        pathname='/path/to/file.py',
        lineno=10,
        msg='Test message with invalid level name',
        args=[],
        exc_info=None,
        func='test_func'
    )
    record.levelname = "INVALIDLEVELNAME"

    handler.emit(record)

    mock_loguru_opt_log.assert_called_once()
    final_log_call_args, _ = mock_loguru_log.call_args
    assert final_log_call_args[0] == numeric_level
    assert final_log_call_args[1] == record.getMessage()

def test_standard_logging_is_forwarded_to_loguru(log_stream):
    logging.getLogger("app.db.short_url_crud").warning("Colisão de código curto ao inserir 'abc123'.")

    assert "WARNING | Colisão de código curto ao inserir 'abc123'." in log_stream.getvalue()

def test_setup_logging_silences_uvicorn_access(log_stream):
    assert logging.getLogger("uvicorn.access").disabled is True
    assert logging.getLogger("uvicorn.error").propagate is False

# ==================================================
# --- Testes para _setup_cors_middleware ---
# ==================================================
def test_setup_cors_middleware_with_empty_origins_adds_nothing():
    mock_app = MagicMock(spec=FastAPI)
    settings_empty_cors = Settings(secret={"jwt": {"secret": TEST_JWT_SECRET}}, CORS_ALLOWED_ORIGINS=[])

    _setup_cors_middleware(mock_app, settings_empty_cors)

    mock_app.add_middleware.assert_not_called()

def test_setup_cors_middleware_with_origins_adds_middleware():
    mock_app = MagicMock(spec=FastAPI)
    settings_with_cors = Settings(
        secret={"jwt": {"secret": TEST_JWT_SECRET}},
        CORS_ALLOWED_ORIGINS=["http://localhost:3000", "https://example.com"]
    )

    _setup_cors_middleware(mock_app, settings_with_cors)

    mock_app.add_middleware.assert_called_once()
    args, kwargs = mock_app.add_middleware.call_args
    assert args[0] == CORSMiddleware
    assert kwargs.get("allow_origins") == ["http://localhost:3000", "https://example.com"]
    assert kwargs.get("allow_methods") == ["GET", "POST"]
