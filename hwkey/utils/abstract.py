#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey abstract base classes for serializable objects."""

from abc import ABC, abstractmethod
from typing import Any

from typing_extensions import Self


class BaseClass(ABC):
    """HWKey abstract base class for objects with a binary representation."""

    def __eq__(self, obj: Any) -> bool:
        """Check object equality.

        :param obj: Object to compare with this instance.
        :return: True if objects are of the same class with identical attributes.
        """
        return isinstance(obj, self.__class__) and vars(obj) == vars(self)

    def __ne__(self, obj: Any) -> bool:
        """Check if this object is not equal to another object.

        :param obj: Object to compare with this instance.
        :return: True if objects are not equal.
        """
        return not self.__eq__(obj)

    @abstractmethod
    def __repr__(self) -> str:
        """Get string representation of the object."""

    @abstractmethod
    def __str__(self) -> str:
        """Get description of the object."""

    @abstractmethod
    def export(self) -> bytes:
        """Export object into bytes array.

        :return: Object representation as bytes.
        """

    @classmethod
    @abstractmethod
    def parse(cls, data: bytes) -> Self:
        """Parse object from bytes array.

        :param data: Byte array containing the serialized object data.
        :return: Parsed object instance.
        """
