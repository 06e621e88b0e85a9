import logging
import sys
from pathlib import Path

from loguru import logger

from bookstore.runtime.config.settings import Settings


def configure_logging(settings: Settings) -> None:
    env = settings.environment

    # 0) Reset Loguru and guarantee a default request_id
    logger.remove()
    logger.configure(extra={"request_id": "-"})

    # 1) Formats
    fmt_plain = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "[<cyan>{extra[request_id]}</cyan>] | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )
    is_json = settings.log_format == "json"

    backtrace_on = env != "production"
    diagnose_on = env != "production"

    # 2) Loguru sinks
    logger.add(
        sys.stderr,
        level=settings.log_level,
        format=fmt_plain,
        colorize=not is_json,
        serialize=is_json,
        backtrace=backtrace_on,
        diagnose=diagnose_on,
        enqueue=False,
    )

    if settings.log_file:
        path = Path(settings.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(path),
            level=settings.log_level,
            format=fmt_plain,
            serialize=is_json,
            rotation=f"{settings.log_max_size_mb} MB",
            retention=settings.log_backup_count,
            compression="zip",
            enqueue=True,
            backtrace=backtrace_on,
            diagnose=diagnose_on,
        )

    # 3) Intercept stdlib logging and forward into Loguru
    class InterceptHandler(logging.Handler):
        """Redirect standard 'logging' records to Loguru, with selective drops."""

        def emit(self, record: logging.LogRecord) -> None:
            # Request logging is done by middleware
            if record.name == "uvicorn.access":
                return

            try:
                level = logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

            logger.opt(depth=2, exception=record.exc_info).bind(
                logger_name=record.name
            ).log(level, record.getMessage())

    # 4) Replace stdlib handlers with the interceptor
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in list(logging.root.manager.loggerDict.keys()):
        stdlog = logging.getLogger(name)
        stdlog.handlers = []
        stdlog.propagate = True

    # 5) Tune noise
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.CRITICAL)

    logger.info(
        "Logging configured",
        app_level=settings.log_level,
        app_format=settings.log_format,
        app_file=settings.log_file,
        environment=env,
    )
