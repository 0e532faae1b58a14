"""
Loguru Logging Configuration

This module provides centralized logging configuration for the storage gateway.
The ``system`` label is bound once at process start so that every record,
including fault reports, carries it.
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[system]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)


class LoguruConfig:
    """Loguru configuration manager."""

    def __init__(self):
        self._configured = False
        self._system = ""

    def remove_default_handlers(self):
        """Remove default loguru handlers."""
        logger.remove()
        self._configured = False

    def bind_system(self, system: str):
        """Bind the system label onto every record emitted by the process."""
        self._system = system
        logger.configure(extra={"system": system})

    def configure_console_logging(
        self,
        level: str = "INFO",
        colorize: Optional[bool] = None,
        backtrace: bool = True,
        diagnose: bool = True,
    ):
        """Configure console logging."""
        if colorize is None:
            colorize = sys.stdout.isatty()

        logger.add(
            sys.stdout,
            format=CONSOLE_FORMAT,
            level=level,
            colorize=colorize,
            backtrace=backtrace,
            diagnose=diagnose,
            catch=True,
        )
        self._configured = True

    def configure_json_logging(
        self,
        log_dir: Union[str, Path],
        level: str = "INFO",
        rotation: str = "1 day",
        retention: str = "30 days",
        compression: str = "zip",
    ):
        """Configure JSON structured logging."""
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / "structured.json",
            level=level,
            rotation=rotation,
            retention=retention,
            compression=compression,
            serialize=True,
            enqueue=True,
        )
        self._configured = True

    def configure_development_logging(self, log_dir: Optional[Union[str, Path]] = None, level: Optional[str] = None):
        """Configure development environment logging."""
        self.remove_default_handlers()
        self.configure_console_logging(level=level or "DEBUG", colorize=True)
        if log_dir:
            self.configure_json_logging(log_dir, level=level or "DEBUG", rotation="10 MB", retention="7 days")

    def configure_production_logging(self, log_dir: Optional[Union[str, Path]] = None, level: Optional[str] = None):
        """Configure production environment logging."""
        self.remove_default_handlers()

        # Fault reports are warnings, keep them on the console
        self.configure_console_logging(
            level=level or "WARNING",
            colorize=False,
            backtrace=False,
            diagnose=False,
        )
        if log_dir:
            self.configure_json_logging(log_dir, level=level or "INFO", rotation="100 MB")

    def configure_testing_logging(self, log_dir: Optional[Union[str, Path]] = None, level: Optional[str] = None):
        """Configure testing environment logging."""
        self.remove_default_handlers()
        self.configure_console_logging(
            level=level or "WARNING",
            colorize=False,
            backtrace=False,
            diagnose=False,
        )

    def get_logger(self, name: Optional[str] = None):
        """Get a configured logger instance."""
        if name:
            return logger.bind(name=name)
        return logger

    @property
    def system(self) -> str:
        return self._system

    def is_configured(self) -> bool:
        """Check if logging has been configured."""
        return self._configured


# Global loguru configuration instance
loguru_config = LoguruConfig()


def setup_logging(
    environment: str = "development",
    system: str = "",
    log_dir: Optional[Union[str, Path]] = None,
    level: Optional[str] = None,
) -> None:
    """
    Setup logging based on environment.

    Args:
        environment: Environment name (development, production, testing)
        system: System label bound onto every record
        log_dir: Directory for structured log files, console only when empty
        level: Override the environment's default level
    """
    environment = environment.lower()

    loguru_config.bind_system(system)
    if environment == "production":
        loguru_config.configure_production_logging(log_dir, level)
    elif environment in ("testing", "test"):
        loguru_config.configure_testing_logging(log_dir, level)
    else:
        loguru_config.configure_development_logging(log_dir, level)

    logger.info(f"Logging configured for environment: {environment}")


def get_logger(name: Optional[str] = None):
    """Get a configured logger instance."""
    return loguru_config.get_logger(name=name)
