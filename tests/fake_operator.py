#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Operator console answering with prepared lines."""

from typing import Iterable

from hwkey.exceptions import HWKeyIOError
from hwkey.ledger.operator import OperatorConsole


class ScriptedOperator(OperatorConsole):
    """Operator answering with prepared lines and recording all messages."""

    def __init__(self, answers: Iterable[str] = ()) -> None:
        self.answers = list(answers)
        self.messages: list[str] = []
        self.reads = 0

    def write(self, message: str, newline: bool = True) -> None:
        self.messages.append(message)

    def read_line(self) -> str:
        if not self.answers:
            raise HWKeyIOError("Cannot read operator input: end of input")
        self.reads += 1
        return self.answers.pop(0)
