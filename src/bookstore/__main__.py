"""Process entry point: bootstrap configuration, then serve with uvicorn."""

import sys

import uvicorn
from loguru import logger

from bookstore.api.http.app import build_dependencies, create_app
from bookstore.api.utils.app_startup import configure_logging
from bookstore.core.exceptions import AuthBootstrapError, ConfigError, SecretFetchError
from bookstore.runtime.bootstrap import load_settings
from bookstore.runtime.config import ConfigStore, Settings


def main() -> None:
    try:
        # Logging settings come from the environment alone
        configure_logging(Settings.from_store(ConfigStore.from_environ()))
        settings = load_settings()
    except (ConfigError, AuthBootstrapError, SecretFetchError) as exc:
        logger.critical("Startup failed: {}", exc)
        sys.exit(1)

    app = create_app(build_dependencies(settings))

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        access_log=False,  # Request logging is done by middleware
        log_config=None,  # Keep the InterceptHandler installed by configure_logging
    )


if __name__ == "__main__":
    main()
