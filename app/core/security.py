# app/core/security.py
"""
Módulo responsável pela emissão e verificação dos tokens JWT (bearer tokens)
que autenticam os proprietários das URLs curtas.

Os tokens são autocontidos: carregam apenas o ID do proprietário (`sub`) e a
expiração (`exp`), são assinados com HMAC-SHA256 e não são persistidos nem revogados.
"""

# ========================
# --- Importações ---
# ========================
import logging
import uuid
from datetime import datetime, timedelta, timezone
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError

# --- Módulos da Aplicação ---
from app.models.token import TokenPayload

# ========================
# --- Configuração do Logger ---
# ========================
logger = logging.getLogger(__name__)

# ========================
# --- Constantes JWT ---
# ========================
ALGORITHM = "HS256"

# ========================
# --- Exceções ---
# ========================
class TokenError(Exception):
    """Base para falhas de verificação de token."""


class TokenExpiredError(TokenError):
    """O claim `exp` do token já passou no relógio deste host."""


class TokenInvalidError(TokenError):
    """Token malformado, com assinatura/algoritmo incorreto ou sem os claims obrigatórios."""

# ========================
# --- Funções JWT ---
# ========================
def create_access_token(subject: uuid.UUID, expiry_hours: int, secret_key: str) -> str:
    """
    Cria um novo token de acesso JWT para um proprietário.

    Args:
        subject: ID (UUID) do proprietário.
        expiry_hours: Validade do token em horas, a partir de agora.
        secret_key: Chave usada na assinatura HS256.

    Returns:
        O token JWT codificado como string.
    """
    expire = datetime.now(timezone.utc) + timedelta(hours=expiry_hours)
    to_encode = {
        "sub": str(subject),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)

def decode_token(token: str, secret_key: str) -> uuid.UUID:
    """
    Verifica um token JWT e retorna o ID do proprietário.

    A assinatura, o algoritmo (somente HS256) e a expiração são verificados
    pela biblioteca JOSE sem tolerância (leeway) de relógio. O payload é então
    validado pelo modelo `TokenPayload`.

    Args:
        token: A string do token JWT.
        secret_key: Chave usada para verificar a assinatura.

    Returns:
        O UUID contido no claim `sub`.

    Raises:
        TokenExpiredError: Se o token estiver expirado.
        TokenInvalidError: Para qualquer outra falha de decodificação ou validação.
    """
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        logger.info("Token JWT expirado.")
        raise TokenExpiredError("Token expirado") from e
    except JWTError as e:
        logger.warning(f"Token JWT rejeitado: {e}")
        raise TokenInvalidError("Token inválido") from e

    try:
        token_data = TokenPayload.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Payload do token JWT inválido: {e.error_count()} erro(s) de validação.")
        raise TokenInvalidError("Token inválido") from e

    return token_data.sub
