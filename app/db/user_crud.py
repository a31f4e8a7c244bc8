# app/db/user_crud.py
"""
Consultas à tabela `user_account`.
Usada apenas pelo comando administrativo que emite tokens para um usuário.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from typing import Optional
import asyncpg

# --- Módulos da Aplicação ---
from app.db.exceptions import StoreError, StoreUnavailableError
from app.db.postgres_utils import Database

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)
USERS_TABLE = "user_account"

# ========================
# --- Operações para Usuários ---
# ========================
async def get_user_id_by_username(db: Database, username: str) -> Optional[uuid.UUID]:
    """
    Busca o ID de um usuário pelo seu nome de usuário.

    Args:
        db: Pool de conexões.
        username: O nome de usuário a ser buscado.

    Returns:
        O UUID do usuário, ou None se não existir.

    Raises:
        StoreError: Em qualquer falha do banco.
    """
    query = f"SELECT id FROM {USERS_TABLE} WHERE username = $1"
    try:
        async with db.connection() as conn:
            user_id = await conn.fetchval(query, username)
    except (asyncpg.PostgresConnectionError, asyncpg.InterfaceError, OSError) as e:
        raise StoreUnavailableError("Banco de dados indisponível.") from e
    except asyncpg.PostgresError as e:
        logger.error(f"Erro do banco ao buscar usuário '{username}': {e!r}")
        raise StoreError("Erro ao buscar usuário.") from e

    if user_id is None:
        logger.info(f"Usuário '{username}' não encontrado.")
    return user_id
