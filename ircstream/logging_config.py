r"""
Logging configuration for applications built on ircstream.

The library itself only emits records on the ``ircstream`` logger; call
``LoggerConfigurator().configure()`` from an application entry point to get
coloured console output using the colorlog library.
"""

import logging
import os
import sys

import colorlog

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "magenta",
}


def level_from_env() -> int:
    """DEBUG when the DEBUG environment variable is 'true', '1' or 'yes', else INFO."""
    debug_env = os.environ.get("DEBUG", "").lower()
    return logging.DEBUG if debug_env in ("true", "1", "yes") else logging.INFO


class LoggerConfigurator:
    """Handles logging configuration cleanly using colorlog.

    Supports environment variable configuration for log levels.
    """

    def __init__(self, config=None):
        """Initialize the configurator.

        Args:
            config: Optional dict; ``stream`` overrides the output stream
                (stderr by default) and ``level`` overrides the level.
        """
        self.config = config or {}

    def build_formatter(self) -> colorlog.ColoredFormatter:
        return colorlog.ColoredFormatter(
            "%(asctime)s %(log_color)s%(levelname)-8s%(reset)s %(message_log_color)s%(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            log_colors=LOG_COLORS,
            secondary_log_colors={
                "message": {
                    "ERROR": "red",
                    "CRITICAL": "magenta",
                }
            },
            reset=True,
        )

    def configure(self) -> logging.Handler:
        """Install a coloured stream handler on the root logger.

        Returns:
            The handler that was installed.
        """
        log_level = self.config.get("level", level_from_env())
        formatter = self.build_formatter()

        handler = logging.StreamHandler(self.config.get("stream", sys.stderr))
        handler.setFormatter(formatter)

        root_logger = logging.getLogger()
        # Replace handlers from an earlier configure() call
        for existing in list(root_logger.handlers):
            if getattr(existing, "_ircstream_handler", False):
                root_logger.removeHandler(existing)
        handler._ircstream_handler = True  # type: ignore[attr-defined]
        root_logger.addHandler(handler)
        root_logger.setLevel(log_level)
        return handler
