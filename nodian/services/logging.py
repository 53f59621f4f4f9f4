# nodian/services/logging.py
import sys
from loguru import logger

from ..config.paths import get_user_log_dir

CONSOLE_FORMAT = "<level>{level: <8}</level> | <cyan>{name}:{function}:{line}</cyan> - <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {process} | {name}:{function}:{line} - {message}"

def setup_logging(level="INFO", verbose=False):
    """
    Routes loguru output to stderr (at `level`, or DEBUG with `verbose`) and
    to a daily rotating file in the user log directory (always DEBUG).
    """
    console_level = "DEBUG" if verbose else level
    logger.remove()
    logger.add(sys.stderr, level=console_level, format=CONSOLE_FORMAT, colorize=True)

    try:
        log_file = get_user_log_dir() / "nodian_{time:YYYY-MM-DD}.log"
        logger.add(
            str(log_file),
            level="DEBUG",
            format=FILE_FORMAT,
            rotation="1 day",
            retention="7 days",
            compression="zip",
            encoding="utf-8",
        )
    except OSError as e:
        # Console logging still works without the file sink
        logger.error(f"File logging disabled, could not open log file: {e}")
        return
    logger.debug(f"Logging ready (console: {console_level}, file: {log_file})")
