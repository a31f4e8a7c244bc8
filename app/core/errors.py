# app/core/errors.py
"""
Taxonomia de erros expostos ao cliente e os exception handlers que os
convertem no envelope padrão `GenericResponse`.

- `ValidationError`  -> 400 (entrada inválida)
- `InvalidJWTError`  -> 401 (token ausente, inválido ou expirado)
- `UnexpectedError`  -> 500 (falha do banco ou qualquer falha interna)

Causas internas (erros SQL, de parsing etc.) são apenas logadas; a mensagem
enviada ao cliente é sempre a definida na exceção.
"""

# ========================
# --- Importações ---
# ========================
import logging
from typing import Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# --- Módulos da Aplicação ---
from app.models.response import GenericResponse

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Exceções da API ---
# ========================
class GenericError(Exception):
    """Base dos erros que viram resposta HTTP com o envelope padrão."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.headers = headers


class ValidationError(GenericError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidJWTError(GenericError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class UnexpectedError(GenericError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

# ========================
# --- Construção de Respostas ---
# ========================
def error_response(message: str, status_code: int, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    """Monta um JSONResponse de erro no formato do envelope."""
    body = GenericResponse.error(message, status_code).model_dump(by_alias=True, mode="json")
    return JSONResponse(status_code=status_code, content=body, headers=headers)

# ========================
# --- Exception Handlers ---
# ========================
async def generic_error_handler(request: Request, exc: GenericError) -> JSONResponse:
    cause = exc.__cause__
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message} (causa: {cause!r})")
    else:
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return error_response(exc.message, exc.status_code, exc.headers)

async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Erros de corpo/parâmetros do FastAPI também viram 400 com o envelope."""
    logger.info(f"{request.method} {request.url.path} -> 400: {len(exc.errors())} erro(s) de validação da requisição.")
    return error_response("Requisição inválida.", status.HTTP_400_BAD_REQUEST)

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Erro não tratado em {request.method} {request.url.path}: {exc}")
    return error_response("Erro interno do servidor.", status.HTTP_500_INTERNAL_SERVER_ERROR)

def register_exception_handlers(app_instance: FastAPI) -> None:
    """Registra os handlers de erro na aplicação."""
    app_instance.add_exception_handler(GenericError, generic_error_handler)
    app_instance.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app_instance.add_exception_handler(Exception, unhandled_exception_handler)
