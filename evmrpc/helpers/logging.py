"""Logger module."""

import logging
import sys

import colorlog

from evmrpc.helpers.config import LOG_LEVELS, get_log_level


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

loggers: dict[str, logging.Logger] = {}


def _build_handler(log_handler: str, *, log_color: bool) -> logging.Handler:
    if log_handler != "stdout":
        err_msg = f"Invalid handler: {log_handler}"
        raise ValueError(err_msg)

    if log_color:
        handler = colorlog.StreamHandler(sys.stdout)
        handler.setFormatter(
            colorlog.ColoredFormatter(f"%(log_color)s {LOG_FORMAT}", log_colors=LOG_COLORS)
        )
    else:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def get_logger(
    name: str,
    log_handler: str = "stdout",
    log_level: str | None = None,
    log_color: bool = False,
) -> logging.Logger:
    """Get a cached logger writing to stdout.

    Args:
        name: The name of the logger.
        log_handler: The log handler type ('stdout').
        log_level: The logging level name. Defaults to EVMRPC_LOG_LEVEL, or
            INFO with a warning when that variable is unset or invalid.
        log_color: Whether to use colored output.

    Returns:
        logging.Logger: Configured logger instance.

    Raises:
        ValueError: If invalid handler or log level is provided.
    """
    if name in loggers:
        return loggers[name]

    env_error: ValueError | None = None
    if log_level is not None:
        level_name = log_level
    else:
        try:
            level_name = get_log_level()
        except ValueError as e:
            # Bad EVMRPC_LOG_LEVEL must not break module imports
            env_error = e
            level_name = "INFO"

    if level_name not in LOG_LEVELS:
        err_msg = f"Invalid log level: {level_name}"
        raise ValueError(err_msg)

    handler = _build_handler(log_handler, log_color=log_color)
    level = logging.getLevelNamesMapping()[level_name]

    logger = colorlog.getLogger(name) if log_color else logging.getLogger(name)
    logger.setLevel(level)
    handler.setLevel(level)
    logger.addHandler(handler)

    loggers[name] = logger
    if env_error is not None:
        logger.warning("%s; using INFO", env_error)
    return logger


__all__ = ["get_logger"]
