#!/usr/bin/env python
# -*- coding: UTF-8 -*-
#
# Copyright 2025 NXP
#
# SPDX-License-Identifier: BSD-3-Clause

"""Emulated signing device.

The emulator keeps its keys in memory and therefore has none of the security
properties of a real device. It exists for tests and demonstrations only.
"""

import logging
from typing import Optional, Union

from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from hwkey import value_to_bool
from hwkey.crypto.hash import EnumHashAlgorithm, get_hash_algorithm, hmac
from hwkey.crypto.keys import SECP256K1_ORDER, PublicKeySecp256k1
from hwkey.ledger.device import DerivationPath, LedgerSecp256k1Device, VersionInfo
from hwkey.utils.misc import Endianness

logger = logging.getLogger(__name__)


class EmulatedLedgerDevice(LedgerSecp256k1Device):
    """Software emulation of a Ledger device running the Cosmos application.

    The private key for a path is HMAC-SHA256(seed, path) reduced to the range
    of valid SECP256K1 scalars, so the same seed always yields the same keys.
    """

    identifier = "emulator"

    def __init__(
        self,
        seed: Union[str, bytes] = "hwkey-emulator",
        version: Union[str, VersionInfo] = "2.34.0",
        uncompressed: Union[bool, str] = False,
        app_mode: Union[int, str] = 0,
    ) -> None:
        """Initialize the emulator.

        :param seed: Master secret of the emulated device.
        :param version: Application version reported by the device.
        :param uncompressed: Report public keys as 65-byte uncompressed points.
        :param app_mode: Application mode reported with the version.
        """
        self.seed = seed.encode("utf-8") if isinstance(seed, str) else seed
        if isinstance(version, str):
            version = VersionInfo.parse(version)
        self.version = VersionInfo(version.major, version.minor, version.patch, int(app_mode))
        self.uncompressed = value_to_bool(uncompressed)
        self.displayed_address: Optional[str] = None
        logger.warning("Emulated signing device is in use, keys are NOT protected")

    def info(self) -> str:
        """Provide information about the emulated device.

        :return: Description of the device.
        """
        return f"Emulated Ledger device, Cosmos application {self.version}"

    def _private_key(self, path: DerivationPath) -> ec.EllipticCurvePrivateKey:
        digest = hmac(self.seed, DerivationPath(path).export(), EnumHashAlgorithm.SHA256)
        value = int.from_bytes(digest, Endianness.BIG.value) % (SECP256K1_ORDER - 1) + 1
        return ec.derive_private_key(value, ec.SECP256K1())

    def get_public_key_secp256k1(self, path: DerivationPath) -> bytes:
        public_key = self._private_key(path).public_key()
        point_format = (
            PublicFormat.UncompressedPoint if self.uncompressed else PublicFormat.CompressedPoint
        )
        return public_key.public_bytes(Encoding.X962, point_format)

    def show_address_secp256k1(self, path: DerivationPath, hrp: str) -> None:
        public_key = PublicKeySecp256k1(self._private_key(path).public_key())
        self.displayed_address = public_key.address(hrp)
        logger.info(f"Emulated device displays address {self.displayed_address}")

    def sign_secp256k1(self, path: DerivationPath, message: bytes) -> bytes:
        logger.debug(f"Emulated device signs {len(message)} bytes with key {DerivationPath(path)}")
        return self._private_key(path).sign(
            message, ec.ECDSA(get_hash_algorithm(EnumHashAlgorithm.SHA256))
        )

    def get_version(self) -> VersionInfo:
        return self.version
