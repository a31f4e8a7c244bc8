# app/models/short_url.py
"""
Este módulo define os modelos Pydantic das URLs curtas: o registro como
armazenado no banco, o corpo da requisição de criação e os dados devolvidos
ao cliente. Os nomes JSON seguem camelCase (`originalUrl`, `shortUrl`), mas
os nomes em snake_case também são aceitos na entrada.
"""

# ========================
# --- Importações ---
# ========================
import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# ========================
# --- Modelos Pydantic de URL Curta ---
# ========================
class ShortUrlRecord(BaseModel):
    """
    Registro persistido na tabela `short_url`.
    Criado uma única vez e nunca atualizado.
    """
    id: int = Field(..., title="ID atribuído pelo banco")
    short_code: str = Field(..., title="Código curto (6 caracteres alfanuméricos)")
    original_url: str = Field(..., title="URL original")
    created_on: datetime = Field(..., title="Data de criação (UTC)")
    owner_id: uuid.UUID = Field(..., title="ID do proprietário")

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

class CreateUrlRequest(BaseModel):
    """
    Corpo de `POST /shorten`.
    A URL é aceita como string opaca; `expiryDate` é aceito mas não utilizado.
    """
    original_url: str = Field(..., title="URL original a ser encurtada")
    expiry_date: Optional[datetime] = Field(None, title="Data de expiração (ignorada)")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {"originalUrl": "https://www.example.com/um/caminho/bem/longo?com=parametros"}
            ]
        },
    )

class CreateUrlResponseData(BaseModel):
    short_url: str = Field(..., title="Endereço público encurtado")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
