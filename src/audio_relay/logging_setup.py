import logging

from .settings import LoggingSettings


def configure_logging(cfg: LoggingSettings) -> None:
    """
    Sets up root logging from the runtime configuration.
    """
    level = logging.getLevelName(cfg.level)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format=cfg.format)
