# app/db/postgres_utils.py
"""
Este módulo gerencia o pool de conexões com o PostgreSQL.
Utiliza a biblioteca asyncpg para interações assíncronas com o banco.

O pool é criado uma vez no startup, com limites mínimo/máximo de conexões e
um timeout de aquisição vindos de `DatabaseSettings`, e é compartilhado por
todas as requisições.
"""

# ========================
# --- Importações ---
# ========================
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
import asyncpg

# --- Módulos da Aplicação ---
from app.core.config import DatabaseSettings
from app.db.exceptions import StoreUnavailableError

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Classe Database ---
# ========================
class Database:
    """Envolve o pool asyncpg e aplica o timeout de aquisição a cada uso."""

    def __init__(self, settings: DatabaseSettings, database_name: Optional[str] = None):
        """
        Args:
            settings: Credenciais e dimensionamento do pool.
            database_name: Banco alvo. Se None, usa `settings.name`.
        """
        self.settings = settings
        self.database_name = database_name or settings.name
        self.pool: Optional[asyncpg.Pool] = None

    async def connect(self) -> None:
        """
        Cria o pool de conexões.

        Raises:
            StoreUnavailableError: Se o banco não puder ser alcançado, recusar as
                credenciais ou não responder dentro de `acquire_timeout`.
        """
        if self.pool is not None:
            return
        logger.info(f"Criando pool de conexões para o banco '{self.database_name}'...")
        try:
            self.pool = await asyncpg.create_pool(
                min_size=self.settings.min_connections,
                max_size=self.settings.max_connections,
                timeout=self.settings.acquire_timeout,
                **self.settings.connect_kwargs(self.database_name),
            )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError) as e:
            logger.error(f"Falha ao criar o pool para o banco '{self.database_name}': {e!r}")
            raise StoreUnavailableError("Não foi possível conectar ao PostgreSQL.") from e
        logger.info(
            f"Pool criado (min={self.settings.min_connections}, max={self.settings.max_connections}, "
            f"timeout de aquisição={self.settings.acquire_timeout}s)."
        )

    async def close(self) -> None:
        """Fecha o pool, se existir."""
        if self.pool is None:
            logger.warning("Tentativa de fechar o pool, mas ele não estava inicializado.")
            return
        await self.pool.close()
        self.pool = None
        logger.info("Pool de conexões fechado.")

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Obtém uma conexão do pool, respeitando `acquire_timeout`.

        Raises:
            StoreUnavailableError: Se o pool não foi criado ou a aquisição expirou.
        """
        if self.pool is None:
            logger.error("Tentativa de usar o banco antes da inicialização do pool!")
            raise StoreUnavailableError("O pool de conexões não foi inicializado.")
        try:
            async with self.pool.acquire(timeout=self.settings.acquire_timeout) as conn:
                yield conn
        except asyncio.TimeoutError as e:
            logger.error(f"Timeout ao obter conexão do pool ({self.settings.acquire_timeout}s).")
            raise StoreUnavailableError("Timeout ao obter conexão do pool.") from e

    async def check_connection(self) -> bool:
        """
        Verifica a conectividade executando `SELECT 1`.

        Returns:
            True se o banco respondeu, False caso contrário.
        """
        try:
            async with self.connection() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (StoreUnavailableError, asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.warning(f"Verificação de conectividade com o PostgreSQL falhou: {e!r}")
            return False
