#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey logging with colored console output."""

import logging
import logging.handlers
import os
import platform
import sys
from datetime import datetime
from typing import Optional, TextIO

import colorama

from hwkey import HWKEY_DEBUG_LOG_FILE, HWKEY_DEBUG_LOGGING_DISABLED, __version__

colorama.just_fix_windows_console()


class ColoredFormatter(logging.Formatter):
    """HWKey Colored Logging Formatter.

    :cvar COLORED_FORMATS: Color-coded format strings for each logging level.
    :cvar FORMATS: Plain text format strings for each logging level.
    """

    FORMAT = logging.BASIC_FORMAT
    FORMAT_DEBUG = FORMAT + " (%(relativeCreated)dms since start, %(filename)s:%(lineno)d)"

    COLORED_FORMATS = {
        logging.DEBUG: colorama.Fore.BLUE + FORMAT_DEBUG + colorama.Fore.RESET,
        logging.INFO: colorama.Fore.WHITE
        + colorama.Style.BRIGHT
        + FORMAT
        + colorama.Fore.RESET
        + colorama.Style.RESET_ALL,
        logging.WARNING: colorama.Fore.YELLOW + FORMAT_DEBUG + colorama.Fore.RESET,
        logging.ERROR: colorama.Fore.RED + FORMAT_DEBUG + colorama.Fore.RESET,
        logging.CRITICAL: colorama.Fore.RED
        + colorama.Style.BRIGHT
        + FORMAT_DEBUG
        + colorama.Fore.RESET
        + colorama.Style.RESET_ALL,
    }
    FORMATS = {
        logging.DEBUG: FORMAT_DEBUG,
        logging.INFO: FORMAT,
        logging.WARNING: FORMAT_DEBUG,
        logging.ERROR: FORMAT_DEBUG,
        logging.CRITICAL: FORMAT_DEBUG,
    }

    def __init__(self, colored: bool = True) -> None:
        """Initialize the formatter.

        :param colored: Use colors in the output.
        """
        super().__init__()
        self.colored = colored
        self.formats = self.COLORED_FORMATS if colored else self.FORMATS

    def format(self, record: logging.LogRecord) -> str:
        """Format the record using the format of its level.

        :param record: Input logging record to print.
        :return: Formatted logging string.
        """
        formatter = logging.Formatter(self.formats.get(record.levelno))
        return formatter.format(record)


def _add_debug_file_handler(target_logger: logging.Logger, log_file: str) -> None:
    for handler in target_logger.handlers:
        if (
            isinstance(handler, logging.handlers.RotatingFileHandler)
            and handler.baseFilename == os.path.abspath(log_file)
        ):
            return
    os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
    debug_handler = logging.handlers.RotatingFileHandler(
        log_file, mode="a", maxBytes=1_000_000, backupCount=5, encoding="utf-8"
    )
    debug_handler.setFormatter(ColoredFormatter(colored=False))
    debug_handler.setLevel(logging.DEBUG)
    target_logger.addHandler(debug_handler)

    starter = f"* HWKEY DEBUG LOGGING STARTED {datetime.now().strftime('%Y-%m-%d %H:%M:%S')} *"
    padding = len(starter) - 2
    target_logger.debug("*" * len(starter))
    target_logger.debug(starter)
    target_logger.debug(f"* HWKey version: {__version__}".ljust(padding) + " *")
    target_logger.debug(f"* Python version: {sys.version.split()[0]}".ljust(padding) + " *")
    target_logger.debug(f"* OS version: {platform.platform()}".ljust(padding) + " *")
    target_logger.debug(f"* Last command: {sys.argv}".ljust(padding) + " *")
    target_logger.debug("*" * len(starter))


def install(
    level: Optional[int] = None,
    stream: TextIO = sys.stderr,
    colored: Optional[bool] = None,
    logger: Optional[logging.Logger] = None,
    create_debug_logger: bool = True,
) -> None:
    """Install HWKey log handler.

    :param level: logging level, defaults to logging.WARNING
    :param stream: stream to output logging, defaults to sys.stderr
    :param colored: colored output, by default only when the stream is a terminal
    :param logger: defaults to "hwkey" logger
    :param create_debug_logger: create debug log file handler
    """
    level = level or logging.WARNING
    target_logger = logger or logging.getLogger("hwkey")
    target_logger.setLevel(logging.DEBUG)

    color = hasattr(stream, "isatty") and stream.isatty() and "NO_COLOR" not in os.environ
    if colored is not None:
        color = colored

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(color))
    target_logger.addHandler(handler)

    if create_debug_logger and not HWKEY_DEBUG_LOGGING_DISABLED:
        try:
            _add_debug_file_handler(target_logger, HWKEY_DEBUG_LOG_FILE)
        except OSError as e:
            target_logger.warning(f"Failed to initialize debug logging: {str(e)}")
