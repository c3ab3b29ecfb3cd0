"""
Logging configuration utility for WatchSync CLI and services.
"""
import logging
import sys
import os

def setup_logging(verbosity: int = 0, logfile: str = None) -> None:
    """
    Configure logging level and optional file output.

    Args:
        verbosity (int): Verbosity level (0=off, 1=info, 2=debug).
        logfile (str, optional): Path to log file. If None, logs only to console.

    Returns:
        None
    """
    if verbosity == 0:
        level = logging.CRITICAL + 1  # disables all log output to terminal
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(module)s::%(funcName)s - %(message)s')

    logger = logging.getLogger()
    logger.handlers.clear()

    if verbosity > 0:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)
        logger.addHandler(console_handler)

    if logfile:
        # A log file always captures INFO, even when the console is silent
        file_level = min(level, logging.INFO)
        file_handler = logging.FileHandler(logfile, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(file_level)
        logger.addHandler(file_handler)
        level = min(level, file_level)

    logger.setLevel(level)

    # Quiet chatty client libraries unless debugging
    if level > logging.DEBUG:
        for noisy in ("urllib3", "googleapiclient.discovery", "googleapiclient.discovery_cache"):
            logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info(f"Command line: {' '.join(sys.argv)}")
    logger.info(f"Current working directory: {os.getcwd()}")
