from typing import List, Literal, Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='POSTGRES_', env_file='.env', extra='ignore')

    HOST: str = 'localhost'
    PORT: int = 5432
    DB: str = 'game_scores'
    USER: str = 'postgres'
    PASSWORD: SecretStr = SecretStr('postgres')
    MIN_POOL_SIZE: int = 2
    MAX_POOL_SIZE: int = 20
    COMMAND_TIMEOUT: float = 10.0

database = DatabaseConfig()

class StorageConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    STORAGE_BACKEND: Literal['postgres', 'memory'] = 'postgres'
    # Titles loaded into the in-memory game catalog at startup
    MEMORY_SEED_GAMES: List[str] = []

storage = StorageConfig()

class Auth0Config(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='AUTH0_', env_file='.env', extra='ignore')

    DOMAIN: str = ''
    CLIENT_ID: str = ''
    CLIENT_SECRET: SecretStr = SecretStr('')
    REQUEST_TIMEOUT: float = 5.0

auth0 = Auth0Config()

class GameCatalogConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    GAME_SERVICE_URL: Optional[str] = None
    GAME_SERVICE_TIMEOUT: float = 5.0

game_catalog = GameCatalogConfig()

class AuthConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='AUTH_', env_file='.env', extra='ignore')

    JWKS_URL: str = ''
    AUDIENCE: Optional[str] = None
    ISSUER: Optional[str] = None
    ALGORITHMS: List[str] = ['RS256']
    JWKS_CACHE_SECONDS: int = 300

auth = AuthConfig()

class ServiceConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

    SCORES_SUBMIT_TIMEOUT_SECONDS: Optional[float] = None
    LOG_LEVEL: str = 'INFO'

service = ServiceConfig()
