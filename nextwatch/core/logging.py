# nextwatch/core/logging.py
import logging
import sys
import colorlog

from nextwatch.core.config import Settings

LOG_FORMAT = "%(log_color)s%(asctime)s %(levelname)-8s [{app}:%(name)s]%(reset)s %(message)s"


def configure_logging(settings: Settings) -> None:
    """
    Route every log record to stdout through one colorlog handler.
    Colors are off outside development so production logs stay plain text.
    Drivers listed in LOG_QUIET_LOGGERS never log below LOG_QUIET_LEVEL.
    """
    handler = colorlog.StreamHandler(sys.stdout)
    handler.setFormatter(
        colorlog.ColoredFormatter(
            LOG_FORMAT.format(app=settings.APP_NAME),
            datefmt="%Y-%m-%d %H:%M:%S",
            no_color=settings.APP_ENV != "development",
            log_colors={
                "DEBUG": "cyan",
                "INFO": "green",
                "WARNING": "yellow",
                "ERROR": "red",
                "CRITICAL": "bold_red",
            },
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.log_level)
    root_logger.handlers = [handler]

    # uvicorn follows the app level
    for name in ("uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(settings.log_level)
    for name in settings.quiet_loggers:
        logging.getLogger(name).setLevel(settings.LOG_QUIET_LEVEL)
