# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Logging configuration for pysatpos"""

import logging
import sys
from enum import Enum
from typing import Optional

# Package root logger; library modules log under "pysatpos.<module>"
ROOT_LOGGER = "pysatpos"


class LogLevel(Enum):
    """Log levels for the library"""
    TRACE = 5
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


logging.addLevelName(LogLevel.TRACE.value, "TRACE")


def _level(level: str) -> int:
    try:
        return LogLevel[level.upper()].value
    except KeyError:
        raise ValueError(f"Unknown log level: {level}") from None


class ColoredFormatter(logging.Formatter):
    """Colored log formatter"""

    COLORS = {
        'TRACE': '\033[36m',     # Cyan
        'DEBUG': '\033[34m',     # Blue
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        log_color = self.COLORS.get(record.levelname, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{log_color}{record.levelname}{self.RESET}"
        return super().format(record)


def setup_logger(name: str = ROOT_LOGGER,
                 level: str = "INFO",
                 log_file: Optional[str] = None,
                 console: bool = True) -> logging.Logger:
    """
    Setup logger with specified configuration

    Parameters:
    -----------
    name : str
        Logger name
    level : str
        Log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Log file path (if None, no file logging)
    console : bool
        Enable console output

    Returns:
    --------
    logging.Logger
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level(level))

    # Remove existing handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(_level(level))
        console_handler.setFormatter(ColoredFormatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        ))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(_level(level))
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    return logger


class LogContext:
    """Context manager for temporary log level change

    >>> with LogContext(logging.getLogger("pysatpos.satellite"), "DEBUG"):
    ...     state = compute_satellite_state(eph, t)
    """

    def __init__(self, logger: logging.Logger, level: str):
        self.logger = logger
        self.new_level = _level(level)
        self.old_level = None

    def __enter__(self):
        self.old_level = self.logger.level
        self.logger.setLevel(self.new_level)
        return self.logger

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.setLevel(self.old_level)


def setup_logger_from_config(config: dict) -> logging.Logger:
    """Setup the package logger and per-module levels from a dictionary

    Module loggers only get a level; their records propagate to the
    package logger's handlers. Unknown levels raise ValueError before
    any logger is touched.

    Example config:
    {
        'level': 'INFO',
        'log_file': 'satpos.log',
        'console': True,
        'module_levels': {
            'pysatpos.satellite.satellite_position': 'DEBUG',
            'pysatpos.observation.pseudorange': 'WARNING'
        }
    }
    """
    module_levels = {module: _level(level)
                     for module, level in config.get('module_levels', {}).items()}

    logger = setup_logger(ROOT_LOGGER,
                          level=config.get('level', 'WARNING'),
                          log_file=config.get('log_file'),
                          console=config.get('console', True))

    for module, level in module_levels.items():
        logging.getLogger(module).setLevel(level)

    # Handlers must pass the most verbose module level
    lowest = min([logger.level, *module_levels.values()])
    for handler in logger.handlers:
        handler.setLevel(lowest)

    return logger
