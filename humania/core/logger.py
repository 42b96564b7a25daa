# Copyright (c) 2025 Ming Yu (yuming@oppo.com)
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

"""
Logging setup shared by every humania module.

Configured once, either explicitly through setup_logging or lazily on the
first get_logger call, from the HUMANIA_LOG_* environment variables.
"""

import logging
import os
import sys
from typing import Optional


LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

# the library logs under this namespace only, the root logger is left alone
ROOT_NAME = "humania"

_configured = False


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[str] = None,
    format_string: str = DEFAULT_FORMAT,
    console_output: bool = True,
):
    """
    Configure the humania logger hierarchy.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL. Read from
               HUMANIA_LOG_LEVEL when None, WARNING by default.
        log_file: optional path of an additional file handler
        format_string: logging format string
        console_output: whether to log to stderr
    """
    global _configured

    if _configured:
        return

    if level is None:
        level = os.environ.get("HUMANIA_LOG_LEVEL", "WARNING")
    log_level = LOG_LEVELS.get(level.upper(), logging.WARNING)

    logger = logging.getLogger(ROOT_NAME)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.propagate = False

    formatter = logging.Formatter(format_string)

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """
    Return the logger for a module, configuring logging from the
    environment on first use.

    Args:
        name: usually __name__
    """
    if not _configured:
        auto_setup()

    return logging.getLogger(name)


def set_module_log_level(module_name: str, level: str):
    """Override the level of a single module logger."""
    logger = logging.getLogger(module_name)
    logger.setLevel(LOG_LEVELS.get(level.upper(), logging.WARNING))


def auto_setup():
    """
    Configure logging from the environment.

    Environment:
        HUMANIA_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL
        HUMANIA_LOG_FILE: log file path
        HUMANIA_LOG_FORMAT: default or simple
    """
    log_level = os.environ.get("HUMANIA_LOG_LEVEL", "WARNING")
    log_file = os.environ.get("HUMANIA_LOG_FILE", None)
    log_format = os.environ.get("HUMANIA_LOG_FORMAT", "default")

    format_string = SIMPLE_FORMAT if log_format == "simple" else DEFAULT_FORMAT

    setup_logging(level=log_level, log_file=log_file, format_string=format_string)
