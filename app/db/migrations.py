# app/db/migrations.py
"""
Provisionamento do banco de dados e aplicação dos arquivos SQL de schema.

`run_migrations` cria o banco principal e o banco de testes quando ainda não
existem e executa, em ordem alfabética, cada arquivo `*.sql` do diretório de
migrações em ambos, comando por comando.
"""

# ========================
# --- Importações ---
# ========================
import logging
from pathlib import Path
from typing import List, Optional, Union
import asyncpg

# --- Módulos da Aplicação ---
from app.core.config import DatabaseSettings

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)
DEFAULT_MIGRATIONS_DIR = Path("migrations")
MAINTENANCE_DATABASE = "postgres"

# ========================
# --- Funções Auxiliares ---
# ========================
def split_sql_statements(sql: str) -> List[str]:
    """
    Divide o conteúdo de um arquivo SQL em comandos individuais.

    Comentários `--` (de linha inteira ou no fim da linha) e comandos vazios
    são descartados. Não trata `;` ou `--` dentro de strings ou corpos de função.
    """
    lines = [line.split("--", 1)[0] for line in sql.splitlines()]
    statements = "\n".join(lines).split(";")
    return [" ".join(statement.split()) for statement in statements if statement.strip()]

def list_migration_files(migrations_dir: Union[str, Path]) -> List[Path]:
    migrations_path = Path(migrations_dir)
    if not migrations_path.is_dir():
        raise FileNotFoundError(f"Diretório de migrações não encontrado: {migrations_path}")
    return sorted(migrations_path.glob("*.sql"))

def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'

# ========================
# --- Provisionamento ---
# ========================
async def create_database_if_missing(conn: asyncpg.Connection, database_name: str) -> bool:
    """
    Cria `database_name` se ele não existir.

    Returns:
        True se o banco foi criado, False se já existia.
    """
    exists = await conn.fetchval("SELECT count(*) FROM pg_database WHERE datname = $1", database_name)
    if exists:
        logger.info(f"Banco de dados '{database_name}' já existe.")
        return False
    await conn.execute(f"CREATE DATABASE {_quote_identifier(database_name)}")
    logger.info(f"Banco de dados '{database_name}' criado.")
    return True

async def apply_migrations(conn: asyncpg.Connection, migration_files: List[Path]) -> int:
    """
    Executa os comandos de cada arquivo de migração na conexão informada.

    Returns:
        Quantidade de comandos executados.

    Raises:
        asyncpg.PostgresError: Na primeira falha; os comandos anteriores permanecem aplicados.
    """
    applied = 0
    for migration_file in migration_files:
        for statement in split_sql_statements(migration_file.read_text(encoding="utf-8")):
            try:
                await conn.execute(statement)
            except asyncpg.PostgresError as e:
                logger.error(f"Erro ao executar comando de '{migration_file.name}': {statement!r} ({e})")
                raise
            applied += 1
            logger.debug(f"Comando aplicado: {statement!r}")
        logger.info(f"Migração aplicada: {migration_file.name}")
    return applied

async def run_migrations(
    settings: DatabaseSettings,
    migrations_dir: Union[str, Path] = DEFAULT_MIGRATIONS_DIR,
    database_names: Optional[List[str]] = None
) -> None:
    """
    Provisiona os bancos e aplica as migrações.

    Args:
        settings: Credenciais do PostgreSQL.
        migrations_dir: Diretório com os arquivos `*.sql`.
        database_names: Bancos alvo. Padrão: banco principal e banco de testes.
    """
    migration_files = list_migration_files(migrations_dir)
    targets = database_names or [settings.name, settings.test_name]

    admin_conn = await asyncpg.connect(**settings.connect_kwargs(MAINTENANCE_DATABASE))
    try:
        for database_name in targets:
            await create_database_if_missing(admin_conn, database_name)
    finally:
        await admin_conn.close()

    for database_name in targets:
        conn = await asyncpg.connect(**settings.connect_kwargs(database_name))
        try:
            applied = await apply_migrations(conn, migration_files)
            logger.info(f"{applied} comando(s) aplicado(s) no banco '{database_name}'.")
        finally:
            await conn.close()
