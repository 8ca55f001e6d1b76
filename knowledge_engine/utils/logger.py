"""
Logging configuration using Loguru.

Call sites attach structured context as ``extra={...}``; Loguru stores
keyword arguments under ``record["extra"]``, so the patcher below lifts
that dict one level up where sinks and ``serialize=True`` can see it.
"""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>{extra[context]}"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} - {message}{extra[context]}"


def _flatten_extra(record) -> None:
    extra = record["extra"]
    nested = extra.pop("extra", None)
    if isinstance(nested, dict):
        for key, value in nested.items():
            extra.setdefault(key, value)

    extra.setdefault("module", record["name"])
    fields = {key: value for key, value in extra.items() if key not in ("module", "context")}
    extra["context"] = (
        " | " + " ".join(f"{key}={value}" for key, value in sorted(fields.items())) if fields else ""
    )


def setup_logging(
    level: str = "INFO",
    log_to_file: bool = False,
    log_dir: str = "logs",
    file_rotation: str = "10 MB",
    file_retention: str = "7 days",
    compression: str = "zip",
    serialize: bool = True,
) -> None:
    """
    Configure the global Loguru logger.

    Replaces every existing sink with a coloured stderr sink and, when
    ``log_to_file`` is set, a rotating file sink (JSON lines when
    ``serialize`` is set). Accepts the fields of ``LoggingConfig``.
    """
    logger.remove()
    logger.configure(patcher=_flatten_extra)

    logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        colorize=True,
        serialize=False,
    )

    if log_to_file:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path / "knowledge_{time:YYYY-MM-DD}.log",
            level=level,
            format=FILE_FORMAT,
            rotation=file_rotation,
            retention=file_retention,
            compression=compression,
            serialize=serialize,
            enqueue=True,
        )


def get_logger(name: str):
    """Get a logger bound to a module name."""
    return logger.bind(module=name)
