#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Hardware-backed SECP256K1 keys living on a Ledger-class signing device."""

from hwkey.ledger.device import DerivationPath, LedgerSecp256k1Device, VersionInfo
from hwkey.ledger.discovery import (
    DeviceDiscovery,
    get_default_discovery,
    get_device_discovery,
    static_discovery,
)
from hwkey.ledger.emulator import EmulatedLedgerDevice
from hwkey.ledger.hardware_key import HardwareKeySecp256k1
from hwkey.ledger.operator import ConsoleOperator, OperatorConsole

__all__ = [
    "ConsoleOperator",
    "DerivationPath",
    "DeviceDiscovery",
    "EmulatedLedgerDevice",
    "HardwareKeySecp256k1",
    "LedgerSecp256k1Device",
    "OperatorConsole",
    "VersionInfo",
    "get_default_discovery",
    "get_device_discovery",
    "static_discovery",
]
