# app/db/short_url_crud.py
"""
Módulo contendo as operações de persistência da tabela `short_url`.

Cada operação é um único comando SQL em autocommit: não há transações
multi-comando, pois cada uma toca no máximo um registro (exceto a limpeza
administrativa). Erros do asyncpg são traduzidos para `app.db.exceptions`.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from datetime import datetime, timezone
from typing import Optional
import asyncpg

# --- Módulos da Aplicação ---
from app.db.exceptions import ShortCodeConflictError, StoreError, StoreUnavailableError
from app.db.postgres_utils import Database
from app.models.short_url import ShortUrlRecord

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)
SHORT_URL_TABLE = "short_url"

CONNECTIVITY_ERRORS = (asyncpg.PostgresConnectionError, asyncpg.InterfaceError, OSError)

# ========================
# --- Operações CRUD para URLs Curtas ---
# ========================
async def insert_short_url(
    db: Database,
    original_url: str,
    short_code: str,
    owner_id: uuid.UUID
) -> ShortUrlRecord:
    """
    Insere um novo mapeamento código -> URL.

    Args:
        db: Pool de conexões.
        original_url: URL original, armazenada sem normalização.
        short_code: Código curto gerado.
        owner_id: ID do proprietário autenticado.

    Returns:
        O registro criado, com `id` e `created_on` atribuídos.

    Raises:
        ShortCodeConflictError: Se `short_code` já existir.
        StoreUnavailableError: Em falha de conectividade ou timeout do pool.
        StoreError: Para qualquer outro erro do banco.
    """
    query = f"""
        INSERT INTO {SHORT_URL_TABLE} (short_code, original_url, created_on, owner_id)
        VALUES ($1, $2, $3, $4)
        RETURNING id, short_code, original_url, created_on, owner_id
    """
    try:
        async with db.connection() as conn:
            row = await conn.fetchrow(query, short_code, original_url, datetime.now(timezone.utc), owner_id)
    except asyncpg.UniqueViolationError as e:
        logger.warning(f"Colisão de código curto ao inserir '{short_code}'.")
        raise ShortCodeConflictError(short_code) from e
    except CONNECTIVITY_ERRORS as e:
        logger.error(f"Falha de conectividade ao inserir URL curta '{short_code}': {e!r}")
        raise StoreUnavailableError("Banco de dados indisponível.") from e
    except asyncpg.PostgresError as e:
        logger.error(f"Erro do banco ao inserir URL curta '{short_code}': {e!r}")
        raise StoreError("Erro ao inserir URL curta.") from e

    record = ShortUrlRecord.model_validate(dict(row))
    logger.info(f"URL curta '{record.short_code}' criada (id={record.id}, proprietário={record.owner_id}).")
    return record

async def get_original_url(db: Database, short_code: str) -> Optional[str]:
    """
    Busca a URL original de um código curto.

    Args:
        db: Pool de conexões.
        short_code: Código a ser buscado (comparação exata).

    Returns:
        A URL original, ou None se o código não existir.

    Raises:
        StoreUnavailableError: Em falha de conectividade ou timeout do pool.
        StoreError: Para qualquer outro erro do banco.
    """
    query = f"SELECT original_url FROM {SHORT_URL_TABLE} WHERE short_code = $1"
    try:
        async with db.connection() as conn:
            return await conn.fetchval(query, short_code)
    except CONNECTIVITY_ERRORS as e:
        logger.error(f"Falha de conectividade ao buscar código '{short_code}': {e!r}")
        raise StoreUnavailableError("Banco de dados indisponível.") from e
    except asyncpg.PostgresError as e:
        logger.error(f"Erro do banco ao buscar código '{short_code}': {e!r}")
        raise StoreError("Erro ao buscar URL curta.") from e

async def delete_short_urls(db: Database) -> int:
    """
    Remove todos os registros de URLs curtas. Uso administrativo/testes.

    Returns:
        Quantidade de registros removidos.
    """
    try:
        async with db.connection() as conn:
            command_status = await conn.execute(f"DELETE FROM {SHORT_URL_TABLE}")
    except CONNECTIVITY_ERRORS as e:
        raise StoreUnavailableError("Banco de dados indisponível.") from e
    except asyncpg.PostgresError as e:
        logger.error(f"Erro do banco ao limpar a tabela '{SHORT_URL_TABLE}': {e!r}")
        raise StoreError("Erro ao remover URLs curtas.") from e

    # O asyncpg devolve o status do comando, ex: "DELETE 3"
    deleted_count = int(command_status.split()[-1])
    logger.info(f"{deleted_count} URL(s) curta(s) removida(s).")
    return deleted_count
