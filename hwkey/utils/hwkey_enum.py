#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey enumeration with labelled members."""

from enum import Enum
from typing import Optional


class HWKeyEnum(Enum):
    """Enumeration whose members are ``(tag, label[, description])`` tuples."""

    def __init__(self, tag: int, label: str, description: Optional[str] = None) -> None:
        self.tag = tag
        self.label = label
        self.description = description

    @classmethod
    def labels(cls) -> list[str]:
        """Get labels of all members in definition order.

        :return: List of labels.
        """
        return [member.label for member in cls]
