from typing import Optional

import datetime
import logging
import os
from logging.handlers import TimedRotatingFileHandler

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
CONSOLE_FORMAT = '%(levelname)s - %(message)s'

# Daily files, a week of history.
BACKUP_DAYS = 7


def get_log_path(log_dir: Optional[str] = None) -> str:
    log_dir = log_dir or os.path.join(os.path.expanduser('~'), '.okta_logs')
    os.makedirs(log_dir, exist_ok=True)
    today = datetime.date.today().isoformat()
    return os.path.join(log_dir, f'oktasdk_{today}.log')


def setup_logging(level: int = logging.DEBUG, log_dir: Optional[str] = None) -> logging.Logger:
    """Send `oktasdk` logs to a daily log file and warnings to the console.

    The library itself never installs handlers, applications call this
    explicitly. Calling it again replaces previously installed handlers.
    """
    logger = logging.getLogger('oktasdk')
    logger.setLevel(level)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    handler = TimedRotatingFileHandler(
        get_log_path(log_dir),
        when='midnight',
        backupCount=BACKUP_DAYS,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    logger.addHandler(handler)

    console = logging.StreamHandler()
    console.setLevel(logging.WARNING)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(console)

    return logger
