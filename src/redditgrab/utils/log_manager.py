# redditgrab/utils/log_manager.py

import logging
import sys

MAIN_LOGGER_NAME = "redditgrab"


class LogManager:
    _configured = False

    @staticmethod
    def setup_main_logger() -> logging.Logger:
        """
        Return the shared 'redditgrab' logger, attaching a stdout handler once.
        Plain message format so progress lines read like console output.
        """
        logger = logging.getLogger(MAIN_LOGGER_NAME)
        if not LogManager._configured:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(logging.Formatter("%(message)s"))
            logger.addHandler(handler)
            logger.setLevel(logging.INFO)
            LogManager._configured = True
        return logger

    @staticmethod
    def set_level(level: int) -> None:
        LogManager.setup_main_logger().setLevel(level)
