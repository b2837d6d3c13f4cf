import os
from logging import INFO, config, getLevelName, getLogger

LOGGER_NAME = "ipapi_geo"


def build_log_config(level: str | int) -> dict:
    """dictConfig for the library logger and the uvicorn loggers of the HTTP service."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": '%(levelprefix)s %(asctime)s - %(client_addr)s - "%(request_line)s" %(status_code)s',
                "datefmt": "%Y-%m-%d %H:%M:%S",
                "use_colors": True,
            },
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": "%(levelprefix)s %(asctime)s - %(name)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
                "use_colors": True,
            },
        },
        "handlers": {
            "access": {"class": "logging.StreamHandler", "formatter": "access", "stream": "ext://sys.stdout"},
            "default": {
                "formatter": "default",
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
            },
        },
        "loggers": {
            LOGGER_NAME: {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": True},
            "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
            "uvicorn.error": {"level": level, "propagate": False},
        },
    }


def resolve_log_level(level: str | None = None) -> int:
    """Numeric level for `level`, else $LOG_LEVEL; unknown names fall back to INFO."""
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()  # DEBUG, WARNING, ERROR
    resolved = getLevelName(level_name)
    # getLevelName returns "Level <name>" for names it does not know.
    return resolved if isinstance(resolved, int) else INFO


def configure_logging(level: str | None = None) -> None:
    """Apply the logging configuration.

    Only the service entry point calls this; importing the library leaves logging alone.
    """
    config.dictConfig(build_log_config(resolve_log_level(level)))


logger = getLogger(LOGGER_NAME)
