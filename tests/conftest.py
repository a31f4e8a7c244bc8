# tests/conftest.py
"""
Fixtures compartilhadas pelos testes.

Nenhum teste usa um PostgreSQL real: o pool do asyncpg é substituído por um
MagicMock cujas conexões são `InMemoryConnection`, um dublê que imita as
chamadas `fetchrow`/`fetchval`/`execute` usadas pelas funções CRUD.
"""

# ========================
# --- Importações ---
# ========================
import uuid
from datetime import datetime
from typing import AsyncGenerator, Dict, Optional
from unittest.mock import MagicMock
import asyncpg
import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

# --- Módulos da Aplicação ---
from app.core.config import Settings
from app.core.dependencies import get_database
from app.core.security import create_access_token
from app.db.postgres_utils import Database
from app.main import create_app

# ========================
# --- Constantes de Teste ---
# ========================
TEST_JWT_SECRET = "segredo-de-testes-com-tamanho-razoavel"
TEST_DOMAIN = "sho.rt"
TEST_MAX_ATTEMPTS = 3

# ========================
# --- Dublê de Conexão ---
# ========================
class InMemoryConnection:
    """Imita o subconjunto da API de `asyncpg.Connection` usado pelo CRUD."""

    def __init__(self):
        self.rows: Dict[str, dict] = {}
        self.users: Dict[str, uuid.UUID] = {}
        self._next_id = 1

    async def fetchrow(self, query: str, short_code: str, original_url: str, created_on: datetime, owner_id: uuid.UUID):
        if short_code in self.rows:
            raise asyncpg.UniqueViolationError('duplicate key value violates unique constraint "short_url_short_code_key"')
        row = {
            "id": self._next_id,
            "short_code": short_code,
            "original_url": original_url,
            "created_on": created_on,
            "owner_id": owner_id,
        }
        self._next_id += 1
        self.rows[short_code] = row
        return row

    async def fetchval(self, query: str, *args) -> Optional[object]:
        if "user_account" in query:
            return self.users.get(args[0])
        if args:
            row = self.rows.get(args[0])
            return row["original_url"] if row else None
        return 1

    async def execute(self, query: str) -> str:
        deleted = len(self.rows)
        self.rows.clear()
        return f"DELETE {deleted}"


def attach_connection(db: Database, conn) -> Database:
    """Troca o pool de `db` por um mock que sempre entrega `conn`."""
    db.pool = MagicMock()
    db.pool.acquire.return_value.__aenter__.return_value = conn
    return db

# ========================
# --- Fixtures de Configuração ---
# ========================
@pytest.fixture
def test_settings() -> Settings:
    """Configurações isoladas do ambiente para os testes."""
    return Settings(
        LOG_LEVEL="WARNING",
        secret={"jwt": {"secret": TEST_JWT_SECRET, "expiry": 1}},
        application={"domain": TEST_DOMAIN, "short_code_max_attempts": TEST_MAX_ATTEMPTS},
        database={"acquire_timeout": 2.5},
    )

# ========================
# --- Fixtures de Banco ---
# ========================
@pytest.fixture
def in_memory_connection() -> InMemoryConnection:
    return InMemoryConnection()

@pytest.fixture
def fake_db(test_settings: Settings, in_memory_connection: InMemoryConnection) -> Database:
    """`Database` real com pool mockado servindo a `InMemoryConnection`."""
    return attach_connection(Database(test_settings.database), in_memory_connection)

# ========================
# --- Fixtures da Aplicação ---
# ========================
@pytest.fixture
def test_app(test_settings: Settings, fake_db: Database) -> FastAPI:
    app_instance = create_app(test_settings)
    app_instance.state.db = fake_db
    app_instance.dependency_overrides[get_database] = lambda: fake_db
    return app_instance

@pytest_asyncio.fixture
async def test_async_client(test_app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Cliente HTTP assíncrono ligado diretamente à aplicação via ASGITransport,
    sem servidor Uvicorn. O lifespan não é executado: o banco vem de `fake_db`.
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url=f"http://{TEST_DOMAIN}") as client:
        yield client

# ========================
# --- Fixtures de Autenticação ---
# ========================
@pytest.fixture
def owner_id() -> uuid.UUID:
    return uuid.uuid4()

@pytest.fixture
def owner_token(owner_id: uuid.UUID) -> str:
    return create_access_token(owner_id, expiry_hours=1, secret_key=TEST_JWT_SECRET)

@pytest.fixture
def auth_headers(owner_token: str) -> Dict[str, str]:
    """Header `Authorization` com o token puro, como os clientes enviam."""
    return {"Authorization": owner_token}
