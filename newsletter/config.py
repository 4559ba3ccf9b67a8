# newsletter/config.py
from pydantic import BaseModel, SecretStr
from pydantic_settings import BaseSettings
from typing import Optional

from newsletter.domain import SubscriberEmail


class ApplicationSettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8000
    # Public address used to build the links we email out
    base_url: str = "http://127.0.0.1:8000"
    environment: str = "local"


class DatabaseSettings(BaseModel):
    backend: str = "postgres"  # postgres, memory
    host: str = "localhost"
    port: int = 5432
    username: str = "postgres"
    password: SecretStr = SecretStr("password")
    database_name: str = "newsletter"
    require_ssl: bool = False
    min_pool_size: int = 1
    max_pool_size: int = 10
    command_timeout: float = 60

    def connection_string(self) -> str:
        return (
            f"postgres://{self.username}:{self.password.get_secret_value()}"
            f"@{self.host}:{self.port}/{self.database_name}"
        )

    @property
    def ssl_mode(self) -> str:
        return "require" if self.require_ssl else "prefer"


class EmailClientSettings(BaseModel):
    base_url: str = "http://localhost:9000"
    sender_email: str = "newsletter@example.com"
    authorization_token: SecretStr = SecretStr("")
    timeout_milliseconds: int = 10000

    def sender(self) -> SubscriberEmail:
        return SubscriberEmail.parse(self.sender_email)

    @property
    def timeout(self) -> float:
        return self.timeout_milliseconds / 1000


class LogsSettings(BaseModel):
    level: str = "INFO"
    path: Optional[str] = None
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    application: ApplicationSettings = ApplicationSettings()
    database: DatabaseSettings = DatabaseSettings()
    email_client: EmailClientSettings = EmailClientSettings()
    logs: LogsSettings = LogsSettings()

    class Config:
        env_file = ".env"
        env_nested_delimiter = "__"
        extra = "ignore"  # This line allows extra env vars without errors


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Load settings, reading an alternative env file when one is given"""
    if env_file:
        return Settings(_env_file=env_file)
    return Settings()


settings = Settings()
