# app/core/config.py

# ========================
# --- Importações ---
# ========================
import os
import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# ===============================
# --- Configuração do Logger ---
# ===============================
logger = logging.getLogger(__name__)

# ===============================
# --- Carregamento do .env ---
# ===============================
# Define o caminho para o arquivo .env na raiz do projeto
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), '.env')
loaded = load_dotenv(dotenv_path=dotenv_path)

NESTED_DELIMITER = "__"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}

# ======================================
# --- Seções Aninhadas ---
# ======================================
class DatabaseSettings(BaseModel):
    """
    Credenciais e dimensionamento do pool PostgreSQL.
    Lidas de variáveis como `DATABASE__HOST`, `DATABASE__MAX_CONNECTIONS`, etc.
    """
    model_config = ConfigDict(frozen=True)

    username: str = Field("postgres", description="Usuário do PostgreSQL")
    password: SecretStr = Field(SecretStr("postgres"), description="Senha do PostgreSQL")
    host: str = Field("localhost", description="Host do PostgreSQL")
    port: int = Field(5432, description="Porta do PostgreSQL")
    name: str = Field("shortlink", description="Nome do banco de dados principal")
    test_name: str = Field("shortlink_test", description="Nome do banco de dados usado pelos testes de integração")
    max_connections: int = Field(10, ge=1, description="Número máximo de conexões no pool")
    min_connections: int = Field(1, ge=0, description="Número mínimo de conexões mantidas no pool")
    acquire_timeout: float = Field(5.0, gt=0, description="Tempo máximo (segundos) para obter uma conexão do pool")

    @model_validator(mode='after')
    def check_pool_bounds(self) -> 'DatabaseSettings':
        """Garante que o mínimo de conexões não ultrapasse o máximo."""
        if self.min_connections > self.max_connections:
            raise ValueError("DATABASE__MIN_CONNECTIONS não pode ser maior que DATABASE__MAX_CONNECTIONS.")
        return self

    def connect_kwargs(self, database: Optional[str] = None) -> Dict[str, Any]:
        """
        Monta os argumentos de conexão aceitos pelo asyncpg.

        Args:
            database: Banco de dados alvo. Se None, usa `name`.

        Returns:
            Dicionário com host, porta, usuário, senha e banco.
        """
        return {
            "host": self.host,
            "port": self.port,
            "user": self.username,
            "password": self.password.get_secret_value(),
            "database": database or self.name,
        }


class ApplicationSettings(BaseModel):
    """Parâmetros do servidor HTTP e da geração de URLs curtas."""
    model_config = ConfigDict(frozen=True)

    host: str = Field("0.0.0.0", description="Endereço de bind do servidor")
    port: int = Field(8000, description="Porta do servidor")
    workers: int = Field(1, ge=1, description="Número de workers do Uvicorn")
    domain: Optional[str] = Field(
        None,
        description="Domínio público usado nas URLs curtas. Se ausente, usa o header Host da requisição."
    )
    short_code_max_attempts: int = Field(
        5,
        ge=1,
        description="Tentativas de gerar um código inédito antes de desistir em caso de colisão."
    )


class JWTSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    secret: SecretStr = Field(..., description="Chave secreta forte para assinar tokens JWT (obrigatória)")
    expiry: int = Field(24, ge=1, description="Validade do token de acesso em horas")


class SecretSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    jwt: JWTSettings

# ======================================
# --- Definição das Configurações ---
# ======================================
class Settings(BaseSettings):
    """
    Configurações da aplicação lidas do ambiente usando Pydantic BaseSettings.
    Chaves aninhadas usam `__` como separador (ex: `SECRET__JWT__SECRET`).
    A instância é imutável: é criada uma vez no início do processo e injetada
    nos componentes que precisam dela.
    Docs Pydantic Settings: https://docs.pydantic.dev/latest/concepts/pydantic_settings/
    """
    # =========================
    # --- Config Gerais ---
    # =========================
    PROJECT_NAME: str = Field("ShortLink API", description="Nome do Projeto")
    LOG_LEVEL: str = Field(default="INFO", description="Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    CORS_ALLOWED_ORIGINS: List[str] = Field(default=[], description="Lista de origens CORS permitidas")

    # =========================
    # --- Seções Aninhadas ---
    # =========================
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    application: ApplicationSettings = Field(default_factory=ApplicationSettings)
    secret: SecretSettings

    # ====================================================
    # --- Configuração do Modelo Pydantic BaseSettings ---
    # ====================================================
    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_nested_delimiter=NESTED_DELIMITER,
        frozen=True,
        extra="ignore",
    )

    # ===============================
    # --- Validadores ---
    # ===============================
    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        """Normaliza e valida o nível de log."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL deve ser um de {sorted(LOG_LEVELS)}")
        return level

# ================================
# --- Criação da Instância ---
# ================================
@lru_cache()
def get_settings() -> Settings:
    """
    Lê as configurações do ambiente uma única vez por processo.

    Raises:
        pydantic.ValidationError: Se faltar uma variável obrigatória ou algum valor for inválido.
    """
    try:
        return Settings()
    except ValueError as e:
        # pydantic.ValidationError herda de ValueError
        logger.critical(f"Erro fatal de validação ao carregar configurações: {e}")
        raise
