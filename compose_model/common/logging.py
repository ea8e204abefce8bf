#  SPDX-License-Identifier: MPL-2.0
#  Copyright 2020-2022 John Mille <john@compose-x.io>


from __future__ import annotations

import logging as logthings
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)8s] %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s [%(levelname)8s] (%(filename)s.%(lineno)d , %(funcName)s,) %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
VALID_LEVELS = ["FATAL", "CRITICAL", "ERROR", "WARNING", "WARN", "INFO", "DEBUG"]


class LevelFormatter(logthings.Formatter):
    """Adds the source location to DEBUG records"""

    def __init__(self):
        super().__init__(LOG_FORMAT, DATE_FORMAT)
        self._debug_formatter = logthings.Formatter(DEBUG_LOG_FORMAT, DATE_FORMAT)

    def format(self, record) -> str:
        if record.levelno == logthings.DEBUG:
            return self._debug_formatter.format(record)
        return super().format(record)


def setup_logging(name: str = "compose-model"):
    """
    Sets the application logger with stdout for info and debug, stderr for the rest.

    :param str name: name of the logger
    :rtype: logging.Logger
    """
    app_logger = logthings.getLogger(name)
    for h in list(app_logger.handlers):
        app_logger.removeHandler(h)

    for stream, level, record_filter in [
        (sys.stdout, logthings.INFO, lambda rec: rec.levelno <= logthings.INFO),
        (sys.stderr, logthings.WARNING, lambda rec: rec.levelno > logthings.INFO),
    ]:
        handler = logthings.StreamHandler(stream)
        handler.setFormatter(LevelFormatter())
        handler.setLevel(level)
        handler.addFilter(record_filter)
        app_logger.addHandler(handler)
    app_logger.setLevel(logthings.INFO)
    return app_logger


def set_log_level(logger: logthings.Logger, level: str) -> bool:
    """
    Changes the logger and its stdout handler level.

    :return: whether the level was valid and applied
    """
    if level.upper() not in VALID_LEVELS:
        return False
    logger.setLevel(logthings.getLevelName(level.upper()))
    if logger.handlers:
        logger.handlers[0].setLevel(logthings.getLevelName(level.upper()))
    return True


LOG = setup_logging()
