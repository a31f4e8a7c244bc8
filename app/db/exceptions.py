# app/db/exceptions.py
"""
Exceções da camada de persistência.

As funções CRUD traduzem os erros do asyncpg para estas classes; a camada de
serviço decide como cada uma chega ao cliente.
"""


class StoreError(Exception):
    """Falha genérica do banco (violação de constraint, SQL inválido, etc.)."""


class ShortCodeConflictError(StoreError):
    """O código curto já existe (violação da constraint UNIQUE de `short_code`)."""

    def __init__(self, short_code: str):
        super().__init__(f"Código curto já existente: {short_code}")
        self.short_code = short_code


class StoreUnavailableError(StoreError):
    """Pool não inicializado, timeout ao obter conexão ou falha de conectividade."""
