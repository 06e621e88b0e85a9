"""Core services exports."""

from .database.db_session import DbSessionService
from .health_service import ConnectionChecker, DatabaseHealthService
from .vault_service import VaultClient, fetch_secret_bundle

__all__ = [
    # Database
    "DbSessionService",
    # Health
    "ConnectionChecker",
    "DatabaseHealthService",
    # Vault
    "VaultClient",
    "fetch_secret_bundle",
]
