#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Operator interaction during signing.

Whether the operator has to confirm the address is decided from the device
firmware version alone, obtaining the confirmation is delegated to an
operator console which can be replaced, e.g. in tests.
"""

import abc
import logging
import sys
from typing import Optional, TextIO

import click

from hwkey import HWKEY_INTERACTIVE_DISABLED
from hwkey.exceptions import HWKeyConfigurationError, HWKeyIOError
from hwkey.ledger.device import VersionInfo

logger = logging.getLogger(__name__)

CONFIRMATION_VERSION = VersionInfo(1, 1, 0)
ACCEPTED_ANSWERS = ("y", "yes")


def is_confirmation_required(version: VersionInfo) -> bool:
    """Check whether the address must be confirmed by the operator before signing.

    Application versions before 1.1 can't display the address reliably.

    :param version: Version of the device application.
    :return: True for version 1.1 and newer.
    """
    return version.major > 1 or (version.major == 1 and version.minor >= 1)


def is_confirmed(answer: str) -> bool:
    """Check the operator answer, "y" and "yes" are accepted case-insensitively.

    :param answer: Line entered by the operator.
    :return: True if the answer is a confirmation.
    """
    return answer.strip().lower() in ACCEPTED_ANSWERS


class OperatorConsole(abc.ABC):
    """Channel to the human operating the device."""

    @abc.abstractmethod
    def write(self, message: str, newline: bool = True) -> None:
        """Show a message to the operator.

        :param message: Message text.
        :param newline: Terminate the message with a new line.
        """

    @abc.abstractmethod
    def read_line(self) -> str:
        """Block until the operator enters one line.

        :return: Entered line.
        """


class ConsoleOperator(OperatorConsole):
    """Operator on the terminal, standard output and standard input."""

    def __init__(
        self,
        interactive: Optional[bool] = None,
        input_stream: Optional[TextIO] = None,
    ) -> None:
        """Initialize the console operator.

        :param interactive: Allow reading from input, defaults to the HWKEY_INTERACTIVE_DISABLED
            setting.
        :param input_stream: Stream to read from, defaults to the current standard input.
        """
        self.interactive = not HWKEY_INTERACTIVE_DISABLED if interactive is None else interactive
        self.input_stream = input_stream

    def write(self, message: str, newline: bool = True) -> None:
        click.echo(message, nl=newline)

    def read_line(self) -> str:
        """Read one line from standard input.

        :raises HWKeyConfigurationError: The interactive mode is turned off.
        :raises HWKeyIOError: The input is closed or can't be read.
        :return: Entered line.
        """
        if not self.interactive:
            raise HWKeyConfigurationError(
                "Operator confirmation is required, but the interactive mode is turned off. "
                "You can change it setting the 'HWKEY_INTERACTIVE_DISABLED' environment variable"
            )
        stream = self.input_stream or sys.stdin
        try:
            line = stream.readline()
        except (OSError, ValueError) as exc:
            raise HWKeyIOError(f"Cannot read operator input: {exc}") from exc
        if not line:
            raise HWKeyIOError("Cannot read operator input: end of input")
        return line

