#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Device discovery.

A discovery function takes no arguments and returns a connected device. It is
passed explicitly to the hardware key, a key can't be created without one.
"""

import logging
from typing import Callable, Optional, Union

from hwkey import HWKEY_DEVICE
from hwkey.exceptions import HWKeyDiscoveryError, HWKeyValueError
from hwkey.ledger.device import LedgerSecp256k1Device

logger = logging.getLogger(__name__)

DeviceDiscovery = Callable[[], LedgerSecp256k1Device]


def get_device_discovery(config: Union[str, dict]) -> DeviceDiscovery:
    """Build discovery function from device configuration.

    :param config: Configuration string ``type=<identifier>;key=value`` or dictionary.
    :raises HWKeyValueError: Invalid configuration.
    :return: Discovery function creating the configured device.
    """
    params = LedgerSecp256k1Device.convert_params(config) if isinstance(config, str) else config
    if "type" not in params:
        raise HWKeyValueError(f"Device configuration must contain the 'type' key: {config}")

    def discover() -> LedgerSecp256k1Device:
        logger.debug(f"Looking for device of type {params['type']}")
        device = LedgerSecp256k1Device.create(dict(params))
        if device is None:
            raise HWKeyDiscoveryError(
                f"Device type '{params['type']}' is not available. "
                f"Known types: {', '.join(LedgerSecp256k1Device.get_types())}"
            )
        logger.info(f"Using device: {device.info()}")
        return device

    return discover


def get_default_discovery() -> Optional[DeviceDiscovery]:
    """Get discovery function configured by the HWKEY_DEVICE environment variable.

    :return: Discovery function or None if the variable is not set.
    """
    if not HWKEY_DEVICE:
        return None
    return get_device_discovery(HWKEY_DEVICE)


def static_discovery(device: LedgerSecp256k1Device) -> DeviceDiscovery:
    """Get discovery function always returning the given, already connected device.

    :param device: Connected device.
    :return: Discovery function.
    """
    return lambda: device
