# app/models/response.py
"""
Envelope padrão das respostas da API.

Toda resposta JSON (sucesso ou erro) tem o formato
`{status, customerMessage, code, data}`, para que o cliente possa decidir
apenas pelo status HTTP e pelo campo `status`.
"""

# ========================
# --- Importações ---
# ========================
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")

# ========================
# --- Modelo do Envelope ---
# ========================
class GenericResponse(BaseModel, Generic[DataT]):
    """Envelope genérico usado por todas as rotas."""
    status: bool = Field(..., title="Indica se a operação foi bem-sucedida")
    customer_message: str = Field(..., title="Mensagem para o cliente")
    code: str = Field(..., title="Status HTTP como string")
    data: Optional[DataT] = Field(None, title="Dados da resposta (null em erros)")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def success(cls, message: str, data: Optional[DataT] = None) -> "GenericResponse[DataT]":
        return cls(status=True, customer_message=message, code="200", data=data)

    @classmethod
    def error(cls, message: str, code: int) -> "GenericResponse[DataT]":
        return cls(status=False, customer_message=message, code=str(code), data=None)
