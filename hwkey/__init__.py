#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey - hardware-backed SECP256K1 private keys.

The library lets a software wallet use a physically separate signing device
as if it were an in-memory private key. The secret never leaves the device;
the library takes care of the public key caching, the confirmation protocol
and the normalization of signatures produced by the device.
"""

import os
from typing import Optional, Union

from packaging.version import Version, parse
from platformdirs import PlatformDirs


def get_hwkey_version() -> Version:
    """Get HWKey version information.

    :return: Parsed version object containing HWKey version information.
    """
    from .__version__ import __version__ as hwkey_version

    return parse(hwkey_version)


def value_to_bool(value: Optional[Union[bool, int, str]]) -> bool:
    """Convert value to boolean from various input formats.

    Supports conversion from string representations like "True", "true", "T", "1"
    and standard Python truthy/falsy values for other types.

    :param value: Value to convert to boolean (string, int, bool, or None).
    :return: Boolean representation of the input value.
    """
    if isinstance(value, str):
        return value in ("True", "true", "T", "1")
    return bool(value)


version = get_hwkey_version()

__author__ = "NXP"
__license__ = "BSD-3-Clause"
__version__ = str(version)

HWKEY_PLATFORM_DIRS = PlatformDirs(
    appauthor="nxp",
    appname="hwkey",
    version=version.base_version,
)

# The HWKey behavior settings
HWKEY_INTERACTIVE_DISABLED = value_to_bool(os.environ.get("HWKEY_INTERACTIVE_DISABLED"))

HWKEY_DEBUG_LOGGING_DISABLED = value_to_bool(os.environ.get("HWKEY_DEBUG_LOGGING_DISABLED"))
HWKEY_DEBUG_LOG_FILE = os.environ.get(
    "HWKEY_DEBUG_LOG_FILE", os.path.join(HWKEY_PLATFORM_DIRS.user_log_dir, "debug.log")
)

# Default device configuration string, e.g. "type=emulator;seed=test"
HWKEY_DEVICE = os.environ.get("HWKEY_DEVICE")
HWKEY_ADDRESS_PREFIX = os.environ.get("HWKEY_ADDRESS_PREFIX", "cosmos")
