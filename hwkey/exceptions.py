#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey exception classes.

This module defines the hierarchy of custom exception classes used throughout
the HWKey library for consistent error handling and reporting.
"""

from typing import Optional

#######################################################################
# # Hardware Key Exceptions
#######################################################################


class HWKeyError(Exception):
    """HWKey Base Exception.

    Base exception class for all HWKey-related errors. All HWKey-specific
    exceptions inherit from this class, so a caller can catch any failure of
    a hardware key operation with a single except clause.

    :cvar fmt: Default error message format template.
    """

    fmt = "HWKey: {description}"

    def __init__(self, desc: Optional[str] = None) -> None:
        """Initialize the base HWKey Exception.

        :param desc: Optional description of the exception.
        """
        super().__init__()
        self.description = desc

    def __str__(self) -> str:
        """Return string representation of the exception.

        :return: Formatted exception message as string.
        """
        return self.fmt.format(description=self.description or "Unknown Error")


class HWKeyKeyError(HWKeyError, KeyError):
    """HWKey Key Error exception for missing dictionary keys."""


class HWKeyValueError(HWKeyError, ValueError):
    """HWKey standard value error exception."""


class HWKeyTypeError(HWKeyError, TypeError):
    """HWKey standard type error exception."""


class HWKeyIOError(HWKeyError, IOError):
    """HWKey standard IO error exception.

    Raised when the operator input or output stream cannot be used.
    """


class HWKeyParsingError(HWKeyError):
    """HWKey parsing error exception.

    This exception is raised when binary data coming from a device or from
    storage is malformed: invalid DER signatures, invalid curve points or
    corrupted serialized keys.
    """


class HWKeyConnectionError(HWKeyError, ConnectionError):
    """HWKey Connection Error exception class.

    This exception is raised when the device cannot be reached or answers with
    an error, typically because it is locked or the wrong application is open.
    """


class HWKeyConfigurationError(HWKeyError):
    """HWKey configuration error.

    Raised when the library is not configured to reach any device, e.g. no
    discovery function has been provided.
    """


class HWKeyDiscoveryError(HWKeyError):
    """HWKey device discovery error.

    Raised when a discovery function has been provided but no device was found.
    """


class HWKeyRejectedError(HWKeyError):
    """HWKey operator rejection.

    Raised when the operator declines the address confirmation prompt. No
    signing request reaches the device in such case.
    """
