#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""HWKey cryptographic exceptions."""

from hwkey.exceptions import HWKeyError


class HWKeyCryptoError(HWKeyError):
    """General HWKey Crypto Error."""


class HWKeyKeysNotMatchingError(HWKeyCryptoError):
    """HWKey key mismatch exception.

    Raised when the public key cached in a hardware key doesn't match the key
    currently reported by the device. Such key must not be trusted.
    """
