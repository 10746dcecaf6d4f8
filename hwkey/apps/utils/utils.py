#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey application utilities."""

import logging
import sys
from functools import wraps
from typing import Any, Callable, Optional

import click

from hwkey import HWKEY_DEBUG_LOG_FILE, HWKEY_DEBUG_LOGGING_DISABLED
from hwkey.exceptions import HWKeyError

logger = logging.getLogger(__name__)


class HWKeyAppError(HWKeyError):
    """Non-fatal error of a command line application.

    :cvar fmt: Format string template for error message display.
    """

    fmt = "{description}"

    def __init__(self, desc: Optional[str] = None, error_code: int = 1) -> None:
        """Initialize the AppError.

        :param desc: Description to print out on command line, defaults to None
        :param error_code: Error code passed to OS, defaults to 1
        """
        super().__init__(desc)
        self.description = desc
        self.error_code = error_code


def parse_hex_data(hex_data: str) -> bytes:
    """Parse hex string into bytes.

    Whitespace and an optional 0x prefix are ignored.

    :param hex_data: Hex string, e.g. "0x3044...", "30 44 ..."
    :raises HWKeyError: Failure to parse given input
    :return: Parsed data
    """
    text = "".join(hex_data.split())
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise HWKeyError(f"Invalid hex data: {hex_data}") from exc


def catch_hwkey_error(function: Callable) -> Callable:
    """Catch and handle HWKeyError and other exceptions.

    HWKeyAppError exits with its error code, HWKeyError and AssertionError
    exit with 2 and any other exception with 3.

    :param function: The function to be decorated.
    :return: The decorated function.
    """

    @wraps(function)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            retval = function(*args, **kwargs)
            return retval
        except HWKeyAppError as app_exc:
            if app_exc.description:
                click.echo(f"{app_exc.__class__.__name__}: {app_exc}", err=True)
            if 0 < app_exc.error_code < 256:
                sys.exit(app_exc.error_code)
            sys.exit(1)
        except (AssertionError, HWKeyError) as hwkey_exc:
            click.echo(f"{hwkey_exc.__class__.__name__}: {hwkey_exc}", err=True)
            logger.debug(str(hwkey_exc), exc_info=True)
            if not HWKEY_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {HWKEY_DEBUG_LOG_FILE} for more info", fg="yellow"
                )
            sys.exit(2)
        except (Exception, KeyboardInterrupt) as base_exc:  # pylint: disable=broad-except
            click.echo(f"GENERAL ERROR: {type(base_exc).__name__}: {base_exc}", err=True)
            logger.debug(str(base_exc), exc_info=True)
            if not HWKEY_DEBUG_LOGGING_DISABLED:
                click.secho(
                    f"See debug log file: {HWKEY_DEBUG_LOG_FILE} for more info.", fg="yellow"
                )
            sys.exit(3)

    return wrapper
