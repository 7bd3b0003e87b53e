"""
Logging setup for interview sessions.

Everything goes to a log file; the console stays reserved for the
interview itself and only shows critical failures.
"""
import os
import logging

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s - %(message)s'

# Client libraries that log every request at DEBUG/INFO
CHATTY_LOGGERS = ("urllib3", "websockets", "google", "grpc")


def setup_logging(log_file_path: str, level: str = "INFO") -> str:
    """
    Route all session logs to `log_file_path`.

    Args:
        log_file_path: Log file; its directory is created if missing
        level: Level name for the file handler (unknown names mean DEBUG)

    Returns:
        Path to the log file
    """
    log_dir = os.path.dirname(log_file_path)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()

    # Sessions append to one file so consecutive interviews stay together
    file_handler = logging.FileHandler(log_file_path, mode='a', encoding='utf-8')
    file_handler.setLevel(getattr(logging, str(level).upper(), logging.DEBUG))
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.CRITICAL)
    console_handler.setFormatter(logging.Formatter('%(message)s'))

    root_logger.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("session").info("Logging to %s at %s", log_file_path, str(level).upper())
    return log_file_path
