# app/routers/short_urls.py
"""
Este módulo define as rotas públicas do encurtador:

- `POST /shorten`: cria uma URL curta (exige token JWT no header `Authorization`).
- `GET /{short_code}`: redireciona para a URL original (sem autenticação).
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import Annotated

from fastapi import APIRouter, Body, Path, Request, status
from fastapi.responses import RedirectResponse, Response

# --- Módulos da Aplicação ---
from app.core.dependencies import AuthenticatedSubject, DbDep, SettingsDep
from app.core.errors import ValidationError, error_response
from app.core.shortener import is_valid_short_code, to_location_header
from app.models.response import GenericResponse
from app.models.short_url import CreateUrlRequest, CreateUrlResponseData
from app.services import short_url_service

# ========================
# --- Configurações e Constantes ---
# ========================
logger = logging.getLogger(__name__)
NOT_FOUND_MESSAGE = "URL curta não encontrada."

# ========================
# --- Configuração do Router ---
# ========================
router = APIRouter(
    tags=["Short URLs"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": GenericResponse[None], "description": "Requisição inválida."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": GenericResponse[None], "description": "Erro interno."},
    },
)

# ========================
# --- Endpoint: Criar URL Curta ---
# ========================
@router.post(
    "/shorten",
    response_model=GenericResponse[CreateUrlResponseData],
    summary="Cria uma URL curta para o proprietário autenticado",
    responses={
        status.HTTP_401_UNAUTHORIZED: {"model": GenericResponse[None], "description": "Token JWT ausente, inválido ou expirado."},
    },
)
async def create_short_url(
    owner_id: AuthenticatedSubject,
    url_in: Annotated[CreateUrlRequest, Body(description="URL a ser encurtada.")],
    request: Request,
    db: DbDep,
    settings: SettingsDep
):
    """
    Gera um código curto, grava o mapeamento com o proprietário do token e
    devolve o endereço público. O domínio vem de `APPLICATION__DOMAIN` ou,
    na ausência dele, do header `Host` da requisição.
    """
    domain = settings.application.domain or request.headers.get("host")
    if not domain:
        raise ValidationError("Não foi possível determinar o domínio público.")

    short_url = await short_url_service.shorten_url(
        db=db,
        original_url=url_in.original_url,
        owner_id=owner_id,
        domain=domain,
        max_attempts=settings.application.short_code_max_attempts
    )
    return GenericResponse[CreateUrlResponseData].success(
        "URL curta criada com sucesso.",
        CreateUrlResponseData(short_url=short_url)
    )

# ========================
# --- Endpoint: Redirecionar ---
# ========================
@router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    summary="Redireciona um código curto para a URL original",
    responses={
        status.HTTP_404_NOT_FOUND: {"model": GenericResponse[None], "description": NOT_FOUND_MESSAGE},
    },
)
async def redirect_short_url(
    short_code: Annotated[str, Path(description="Código curto de 6 caracteres.")],
    db: DbDep
):
    """
    Responde 302 com `Location` contendo a URL original exatamente como foi
    armazenada, ou 404.
    """
    if not is_valid_short_code(short_code):
        logger.debug(f"Código curto com formato inválido: {short_code!r}")
        return error_response(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)

    original_url = await short_url_service.resolve_short_code(db=db, short_code=short_code)
    if original_url is None:
        return error_response(NOT_FOUND_MESSAGE, status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_302_FOUND, headers={"location": to_location_header(original_url)})
