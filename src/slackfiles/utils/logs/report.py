"""Configures the logging system for the script."""
import os
import sys
import logging
from logging.handlers import RotatingFileHandler

def _log_dir():
    """Return the directory log files are written to."""
    override = os.environ.get("SLACKFILES_LOG_DIR")
    if override:
        return override
    root = os.path.dirname(os.path.dirname(os.path.dirname(__file__)))
    return os.path.join(root, 'logs')

def settings(script_path):
    """Configures the logging system for the script."""
    script_name = os.path.basename(script_path)
    log_name = script_name.rsplit('.', 1)[0] + '.log'
    log_file = os.path.join(_log_dir(), log_name)
    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    # Create a logger instance
    logger = logging.getLogger(script_name)

    # Prevent adding multiple handlers
    if not logger.handlers:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=1024*1024*10,  # 10 MB
            backupCount=10,
            encoding='utf-8'
        )
        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s [%(filename)s:%(lineno)d] %(message)s'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

        logger.propagate = False

    # Titles and user names are routinely non-ASCII
    if hasattr(sys.stdout, 'reconfigure'):
        sys.stdout.reconfigure(encoding='utf-8')

    return logger
