# app/services/short_url_service.py
"""
Orquestração das duas operações públicas do serviço:

- `shorten_url`: gera um código, persiste o mapeamento em nome do proprietário
  autenticado e devolve o endereço público.
- `resolve_short_code`: busca a URL original de um código.

Erros do banco são traduzidos aqui para a taxonomia de `app.core.errors`;
nenhuma mensagem interna chega ao cliente.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from typing import Optional

# --- Módulos da Aplicação ---
from app.core.errors import UnexpectedError, ValidationError
from app.core.shortener import build_short_url, generate_short_code
from app.db import short_url_crud
from app.db.exceptions import ShortCodeConflictError, StoreError, StoreUnavailableError
from app.db.postgres_utils import Database

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Encurtamento ---
# ========================
async def shorten_url(
    db: Database,
    original_url: str,
    owner_id: uuid.UUID,
    domain: str,
    max_attempts: int = 5
) -> str:
    """
    Cria uma URL curta para `original_url`.

    Em caso de colisão do código gerado, tenta novamente com um código novo
    até `max_attempts` vezes.

    Args:
        db: Pool de conexões.
        original_url: URL original, aceita como string opaca.
        owner_id: ID do proprietário vindo do token validado.
        domain: Domínio público usado no endereço devolvido.
        max_attempts: Número máximo de códigos tentados.

    Returns:
        O endereço público `https://{domain}/{codigo}`.

    Raises:
        UnexpectedError: Banco indisponível ou tentativas esgotadas.
        ValidationError: O banco rejeitou o registro por outro motivo.
    """
    for attempt in range(1, max_attempts + 1):
        short_code = generate_short_code()
        try:
            await short_url_crud.insert_short_url(
                db=db,
                original_url=original_url,
                short_code=short_code,
                owner_id=owner_id
            )
        except ShortCodeConflictError:
            logger.warning(f"Tentativa {attempt}/{max_attempts}: código '{short_code}' já existe, gerando outro.")
            continue
        except StoreUnavailableError as e:
            raise UnexpectedError("Serviço temporariamente indisponível.") from e
        except StoreError as e:
            raise ValidationError("Não foi possível criar a URL curta.") from e
        return build_short_url(domain, short_code)

    logger.error(f"Nenhum código curto inédito após {max_attempts} tentativa(s) para o proprietário {owner_id}.")
    raise UnexpectedError("Não foi possível gerar um código curto único.")

# ========================
# --- Redirecionamento ---
# ========================
async def resolve_short_code(db: Database, short_code: str) -> Optional[str]:
    """
    Retorna a URL original de `short_code`, ou None se ele não existir.

    Raises:
        UnexpectedError: Em qualquer falha do banco.
    """
    try:
        original_url = await short_url_crud.get_original_url(db=db, short_code=short_code)
    except StoreError as e:
        raise UnexpectedError("Erro interno do servidor.") from e

    if original_url is None:
        logger.info(f"Código curto '{short_code}' não encontrado.")
    return original_url
