"""One-shot startup sequence: environment, Vault secret bundle, settings."""

from collections.abc import Mapping

from loguru import logger

from bookstore.core.exceptions import ConfigError, SecretFetchError
from bookstore.core.services.vault_service import VaultClient, fetch_secret_bundle
from bookstore.runtime.config.settings import Settings
from bookstore.runtime.config.store import ConfigStore


def load_settings(
    environ: Mapping[str, str] | None = None,
    vault_client: VaultClient | None = None,
) -> Settings:
    """Resolve the application settings once, before any request is served.

    The environment is read first; unless ``VAULT_ENABLED`` is false, the
    secret bundle at ``VAULT_KV_MOUNT``/``VAULT_BOOKSTORE_ENV`` is then fetched
    and merged on top of it.

    Raises:
        ConfigError: If the environment holds malformed values.
        AuthBootstrapError: If Vault login fails and ``VAULT_AUTH_REQUIRED`` is set.
        SecretFetchError: If the secret cannot be read or merged.
    """
    store = ConfigStore.from_environ(environ)
    env_settings = Settings.from_store(store)

    if not env_settings.vault_enabled:
        logger.warning("Vault disabled; using environment configuration only")
        return env_settings

    logger.info(
        "Fetching secret bundle {}/{} from {}",
        env_settings.vault_kv_mount,
        env_settings.vault_bookstore_env,
        env_settings.vault_addr,
    )
    bundle = fetch_secret_bundle(env_settings, vault_client)

    try:
        merged = store.merged(bundle)
        settings = Settings.from_store(merged)
    except ConfigError as exc:
        raise SecretFetchError(f"unable to merge secret: {exc}") from exc

    logger.info("Merged {} secret entries into configuration", len(bundle))
    return settings
