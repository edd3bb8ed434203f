"""Logging setup shared by the app, the posts and the export script."""
import logging
import logging.handlers
import sys

from statblog.constants import LOG_FILE, LOG_LEVEL

MAX_LOG_SIZE_MB = 5
LOG_BACKUP_COUNT = 3


def setup_logging(level=None, log_file=None):
    """
    Creates a console handler and, when a log file is configured, a rotating
    file handler (DEBUG+).
    """
    log_formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] [%(name)s] - %(message)s"
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    console_level_name = (level or LOG_LEVEL).upper()
    console_level = getattr(logging, console_level_name, logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(log_formatter)

    # Plotting and fitting libraries are chatty at DEBUG
    for logger_name in ["matplotlib", "PIL", "urllib3", "watchdog", "fsevents"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    # Streamlit reruns the script on every interaction
    for h in list(root_logger.handlers):
        root_logger.removeHandler(h)

    root_logger.addHandler(console_handler)

    log_file = log_file or LOG_FILE
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE_MB * 1024 * 1024,
            backupCount=LOG_BACKUP_COUNT,
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(log_formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).debug("Logging configured at %s.", console_level_name)
