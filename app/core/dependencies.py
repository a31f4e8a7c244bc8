# app/core/dependencies.py
"""
Define as dependências reutilizáveis da aplicação FastAPI: acesso às
configurações, ao pool do banco e a autenticação por token das rotas de escrita.
"""

# ========================
# --- Importações ---
# ========================
from fastapi import Depends, Header, Request
from typing import Annotated, Optional
import uuid

# --- Módulos da Aplicação ---
from app.core.config import Settings
from app.core.errors import InvalidJWTError, UnexpectedError
from app.core.security import TokenExpiredError, TokenInvalidError, decode_token
from app.db.postgres_utils import Database

BEARER_SCHEME = "bearer"

# ========================
# --- Dependências de Infraestrutura ---
# ========================
def get_app_settings(request: Request) -> Settings:
    """Retorna as configurações imutáveis criadas junto com a aplicação."""
    return request.app.state.settings

def get_database(request: Request) -> Database:
    """
    Retorna o pool criado no lifespan da aplicação.

    Raises:
        UnexpectedError: Se o lifespan não inicializou o banco.
    """
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise UnexpectedError("Serviço temporariamente indisponível.")
    return db

SettingsDep = Annotated[Settings, Depends(get_app_settings)]
DbDep = Annotated[Database, Depends(get_database)]

# ========================
# --- Dependência: Proprietário Autenticado ---
# ========================
async def get_authenticated_subject(
    settings: SettingsDep,
    authorization: Annotated[Optional[str], Header(description="Token JWT")] = None
) -> uuid.UUID:
    """
    Valida o token do header `Authorization` e retorna o ID do proprietário.

    O header deve conter o token puro; o prefixo `Bearer ` é aceito e removido.
    Roda antes do handler da rota: em caso de falha a requisição é encerrada
    com 401 e nenhum acesso ao banco acontece.

    Raises:
        InvalidJWTError: Header ausente, token inválido ou expirado.
    """
    token = (authorization or "").strip()
    scheme, _, credentials = token.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        token = credentials.strip()
    if not token:
        raise InvalidJWTError("Token de autenticação ausente.")

    try:
        return decode_token(token, settings.secret.jwt.secret.get_secret_value())
    except TokenExpiredError:
        raise InvalidJWTError("Token expirado.")
    except TokenInvalidError:
        raise InvalidJWTError("Token inválido.")

# ========================
# --- Tipos Anotados para Rotas ---
# ========================
# Injeta o UUID do proprietário autenticado nos endpoints protegidos.
AuthenticatedSubject = Annotated[uuid.UUID, Depends(get_authenticated_subject)]
