"""Typed settings derived from the merged configuration store."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from sqlalchemy.engine import URL, make_url

from bookstore.core.exceptions import ConfigError
from bookstore.runtime.config.store import ConfigStore

DEFAULT_VAULT_ADDR = "https://127.0.0.1:8200"
DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH = "/var/run/secrets/kubernetes.io/serviceaccount/token"


class Settings(BaseSettings):
    """Application settings keyed by their environment variable names."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
    )

    # Environment and server
    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="ENVIRONMENT"
    )
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8080, validation_alias="PORT")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "plain"] = Field(
        default="plain", validation_alias="LOG_FORMAT"
    )
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    log_max_size_mb: int = Field(default=10, validation_alias="LOG_MAX_SIZE_MB")
    log_backup_count: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    # Vault
    vault_enabled: bool = Field(default=True, validation_alias="VAULT_ENABLED")
    vault_addr: str = Field(default=DEFAULT_VAULT_ADDR, validation_alias="VAULT_ADDR")
    vault_token: SecretStr | None = Field(default=None, validation_alias="VAULT_TOKEN")
    vault_namespace: str | None = Field(
        default=None, validation_alias="VAULT_NAMESPACE"
    )
    vault_role: str = Field(default="", validation_alias="VAULT_ROLE")
    vault_kv_mount: str = Field(default="", validation_alias="VAULT_KV_MOUNT")
    vault_bookstore_env: str = Field(
        default="", validation_alias="VAULT_BOOKSTORE_ENV"
    )
    vault_k8s_auth_mount: str = Field(
        default="kubernetes", validation_alias="VAULT_K8S_AUTH_MOUNT"
    )
    vault_auth_required: bool = Field(
        default=False, validation_alias="VAULT_AUTH_REQUIRED"
    )
    vault_skip_verify: bool = Field(default=False, validation_alias="VAULT_SKIP_VERIFY")
    vault_cacert: str | None = Field(default=None, validation_alias="VAULT_CACERT")
    vault_client_timeout: float = Field(
        default=60.0, validation_alias="VAULT_CLIENT_TIMEOUT"
    )
    kube_svc_acct_token: str = Field(
        default=DEFAULT_SERVICE_ACCOUNT_TOKEN_PATH,
        validation_alias="KUBE_SVC_ACCT_TOKEN",
    )

    # Database
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="", validation_alias="DB_NAME")
    db_user: str = Field(default="", validation_alias="DB_USER")
    db_pass: SecretStr = Field(default=SecretStr(""), validation_alias="DB_PASS")
    db_ssl: str = Field(default="require", validation_alias="DB_SSL")
    db_url_override: str | None = Field(default=None, validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=5, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=10, validation_alias="DB_MAX_OVERFLOW")
    db_pool_timeout: int = Field(default=30, validation_alias="DB_POOL_TIMEOUT")
    db_pool_recycle: int = Field(default=1800, validation_alias="DB_POOL_RECYCLE")
    db_init_schema: bool = Field(default=False, validation_alias="DB_INIT_SCHEMA")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # The environment is already part of the ConfigStore passed as init kwargs
        return init_settings, dotenv_settings

    @classmethod
    def from_store(cls, store: ConfigStore) -> Settings:
        """Build settings from a configuration store.

        Raises:
            ConfigError: If a value cannot be converted to its field type.
        """
        try:
            return cls(**store.as_dict())
        except ValidationError as exc:
            raise ConfigError(f"invalid configuration: {exc}") from exc

    @property
    def database_url(self) -> URL:
        """SQLAlchemy URL for the books database.

        ``DATABASE_URL`` wins when set; otherwise the URL is composed from the
        ``DB_*`` entries, which are usually supplied by the secret bundle.
        """
        if self.db_url_override:
            return make_url(self.db_url_override)

        return URL.create(
            "postgresql+psycopg2",
            username=self.db_user or None,
            password=self.db_pass.get_secret_value() or None,
            host=self.db_host or None,
            port=self.db_port,
            database=self.db_name or None,
            query={"sslmode": self.db_ssl} if self.db_ssl else {},
        )

    @property
    def is_postgresql(self) -> bool:
        return self.database_url.get_backend_name() == "postgresql"
