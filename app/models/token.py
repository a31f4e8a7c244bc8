# app/models/token.py
"""
Este módulo define o modelo Pydantic para o payload (claims) do token JWT
usado na autenticação das rotas de escrita.
"""

# ========================
# --- Importações ---
# ========================
import uuid

from pydantic import BaseModel, Field

# ========================
# --- Modelos Pydantic Token ---
# ========================
class TokenPayload(BaseModel):
    """
    Claims esperados dentro de um token JWT de acesso.
    Ambos são obrigatórios: um token sem `sub` ou sem `exp` é inválido.
    """
    sub: uuid.UUID = Field(..., title="ID do Proprietário (Subject)")
    exp: int = Field(..., title="Timestamp Unix de Expiração (segundos)")
