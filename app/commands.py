# app/commands.py
"""
Linha de comando do serviço.

    shortlink                       # equivale a `serve`
    shortlink serve                 # sobe o servidor Uvicorn
    shortlink migrate               # cria os bancos e aplica migrations/*.sql
    shortlink generate_token NOME   # imprime um token JWT para o usuário NOME (stderr)
"""

# ========================
# --- Importações ---
# ========================
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

# --- Módulos da Aplicação ---
from app.core.config import Settings, get_settings
from app.core.logging_config import setup_logging
from app.core.security import create_access_token
from app.db import user_crud
from app.db.exceptions import StoreError
from app.db.migrations import DEFAULT_MIGRATIONS_DIR, run_migrations
from app.db.postgres_utils import Database

logger = logging.getLogger(__name__)

# ========================
# --- Comandos ---
# ========================
def serve(current_settings: Settings) -> int:
    import uvicorn

    logger.info(
        f"Iniciando Uvicorn em {current_settings.application.host}:{current_settings.application.port} "
        f"com {current_settings.application.workers} worker(s)..."
    )
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=current_settings.application.host,
        port=current_settings.application.port,
        workers=current_settings.application.workers,
        log_level=current_settings.LOG_LEVEL.lower()
    )
    return 0

def migrate(current_settings: Settings, migrations_dir: Path) -> int:
    asyncio.run(run_migrations(current_settings.database, migrations_dir))
    logger.info("Migrações concluídas.")
    return 0

async def generate_user_token(current_settings: Settings, username: str) -> Optional[str]:
    """
    Emite um token de acesso para o usuário `username`.

    Returns:
        O token, ou None se o usuário não existir.

    Raises:
        StoreError: Se a consulta ao banco falhar.
    """
    db = Database(current_settings.database)
    await db.connect()
    try:
        user_id = await user_crud.get_user_id_by_username(db, username)
    finally:
        await db.close()

    if user_id is None:
        return None
    jwt_settings = current_settings.secret.jwt
    return create_access_token(user_id, jwt_settings.expiry, jwt_settings.secret.get_secret_value())

def generate_token(current_settings: Settings, username: str) -> int:
    try:
        token = asyncio.run(generate_user_token(current_settings, username))
    except (StoreError, OSError) as e:
        logger.error(f"Erro ao consultar o banco para o usuário '{username}': {e!r}")
        return 1

    if token is None:
        logger.error(f"Usuário '{username}' não encontrado.")
        return 1
    print(f"Token para {username}: {token}", file=sys.stderr)
    return 0

# ========================
# --- Parser ---
# ========================
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shortlink", description="Serviço de encurtamento de URLs.")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Sobe o servidor HTTP (padrão).")

    migrate_parser = subparsers.add_parser("migrate", help="Cria os bancos e aplica os arquivos SQL.")
    migrate_parser.add_argument(
        "--migrations-dir",
        type=Path,
        default=DEFAULT_MIGRATIONS_DIR,
        help="Diretório com os arquivos *.sql (padrão: ./migrations).",
    )

    token_parser = subparsers.add_parser("generate_token", help="Imprime um token JWT para um usuário.")
    token_parser.add_argument("username", help="Nome do usuário em user_account.")
    return parser

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    current_settings = get_settings()
    setup_logging(log_level=current_settings.LOG_LEVEL)

    if args.command == "migrate":
        return migrate(current_settings, args.migrations_dir)
    if args.command == "generate_token":
        return generate_token(current_settings, args.username)
    return serve(current_settings)


if __name__ == "__main__": # pragma: no cover
    sys.exit(main())
